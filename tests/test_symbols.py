# =============================================================================
# test_symbols.py - Symbol Table Tests
# =============================================================================
# Tests for predefined symbols, label binding (pass 1) and reference
# resolution with variable allocation (pass 2).
# =============================================================================

import pytest

from hack_sdk.assembler.parser import parse_source
from hack_sdk.assembler.symbols import PREDEFINED_SYMBOLS, VARIABLE_BASE, SymbolTable
from hack_sdk.errors import AddressRangeError, DuplicateLabelError


def resolve(source: str) -> tuple[SymbolTable, list[int]]:
    """Run both passes over source and return the table and values."""
    commands = parse_source(source)
    table = SymbolTable()
    table.bind_labels(commands)
    return table, table.resolve(commands)


# =============================================================================
# Predefined Symbols
# =============================================================================

class TestPredefined:
    """Test the fixed register and I/O aliases."""

    def test_virtual_registers(self):
        table = SymbolTable()
        assert [table.get(n) for n in ("SP", "LCL", "ARG", "THIS", "THAT")] == [0, 1, 2, 3, 4]

    def test_r_registers(self):
        table = SymbolTable()
        for n in range(16):
            assert table.get(f"R{n}") == n

    def test_io(self):
        assert PREDEFINED_SYMBOLS["SCREEN"] == 16384
        assert PREDEFINED_SYMBOLS["KBD"] == 24576

    def test_count(self):
        assert len(SymbolTable()) == 23

    def test_case_sensitive(self):
        table = SymbolTable()
        assert table.get("sp") is None
        assert "sp" not in table


# =============================================================================
# Pass 1: Labels
# =============================================================================

class TestBindLabels:
    """Test label binding."""

    def test_label_addresses(self):
        """Labels bind to the next instruction and take no address."""
        commands = parse_source("(START)\n@START\n0;JMP\n(END)\n@END\n0;JMP")
        table = SymbolTable()
        count = table.bind_labels(commands)
        assert count == 4
        assert table.get("START") == 0
        assert table.get("END") == 2

    def test_consecutive_labels(self):
        commands = parse_source("@0\n(A)\n(B)\nD=A")
        table = SymbolTable()
        table.bind_labels(commands)
        assert table.get("A") == table.get("B") == 1

    def test_trailing_label(self):
        """A label at the end binds to the instruction count."""
        commands = parse_source("@0\nD=A\n(DONE)")
        table = SymbolTable()
        assert table.bind_labels(commands) == 2
        assert table.get("DONE") == 2

    def test_duplicate_label(self):
        commands = parse_source("(LOOP)\n@0\n(LOOP)")
        with pytest.raises(DuplicateLabelError) as exc_info:
            SymbolTable().bind_labels(commands)
        assert exc_info.value.symbol == "LOOP"
        assert exc_info.value.location.line == 3
        assert exc_info.value.original_location.line == 1

    def test_label_shadowing_predefined(self):
        with pytest.raises(DuplicateLabelError) as exc_info:
            SymbolTable().bind_labels(parse_source("(SCREEN)\n@0"))
        assert exc_info.value.original_location is None


# =============================================================================
# Pass 2: Resolution
# =============================================================================

class TestResolve:
    """Test reference resolution and variable allocation."""

    def test_variables_allocated_in_order(self):
        _, values = resolve("@i\n@j\n@i\n@5\n@R3")
        assert values == [16, 17, 16, 5, 3]

    def test_variable_base(self):
        assert VARIABLE_BASE == 16

    def test_forward_reference_is_label(self):
        """A label used before its definition is not a variable."""
        table, values = resolve("@LOOP\n0;JMP\n(LOOP)\n@x")
        assert values == [2, 16]
        assert table.get("x") == 16

    def test_literal_not_added(self):
        table, values = resolve("@100")
        assert values == [100]
        assert "100" not in table

    def test_literal_max(self):
        _, values = resolve("@32767")
        assert values == [32767]

    def test_literal_out_of_range(self):
        with pytest.raises(AddressRangeError):
            resolve("@32768")

    def test_non_decimal_is_variable(self):
        """Only plain decimal digits are literals."""
        table, values = resolve("@0x10")
        assert values == [16]
        assert table.get("0x10") == 16

    def test_predefined_not_reallocated(self):
        table, values = resolve("@SP\n@KBD\n@counter")
        assert values == [0, 24576, 16]

    def test_labels_do_not_consume_variable_slots(self):
        _, values = resolve("(L)\n@L\n@v")
        assert values == [0, 16]


# =============================================================================
# Output
# =============================================================================

class TestFormat:
    """Test the text symbol dump."""

    def test_format_skips_predefined(self):
        table, _ = resolve("(LOOP)\n@LOOP\n@count")
        names = [line.split()[0] for line in table.format().splitlines()[2:]]
        assert names == ["LOOP", "count"]

    def test_format_with_predefined(self):
        table, _ = resolve("@count")
        names = [line.split()[0] for line in table.format(include_predefined=True).splitlines()[2:]]
        assert "SP" in names
        assert "count" in names

    def test_format_columns(self):
        table, _ = resolve("@count")
        line = table.format().splitlines()[2]
        assert line.split() == ["count", "16", "variable"]
