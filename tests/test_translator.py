# =============================================================================
# test_translator.py - VM Translator Integration Tests
# =============================================================================
# End-to-end tests for the VMTranslator driver.
#
# Test coverage includes:
#   - Translating strings, files and directories
#   - Label counters shared across units
#   - Entry-point ordering checks
#   - Output files
#   - Translating, assembling and running a multi-file program
# =============================================================================

import pytest

from hack_sdk.assembler import Assembler
from hack_sdk.config import TranslatorConfig
from hack_sdk.errors import EntryPointError, TranslatorError, VMSyntaxError
from hack_sdk.vm import GeneratorState, VMTranslator, translate


SYS_VM = """
// Sys.vm
function Sys.init 0
    push constant 4
    call Main.triple 1
    pop static 0
label HALT
    goto HALT
"""

MAIN_VM = """
// Main.vm
function Main.triple 0
    push argument 0
    push argument 0
    add
    push argument 0
    add
    pop static 1
    push static 1
    return
"""


@pytest.fixture
def program_dir(tmp_path):
    """Fixture: a directory holding Main.vm and Sys.vm."""
    directory = tmp_path / "Triple"
    directory.mkdir()
    (directory / "Main.vm").write_text(MAIN_VM)
    (directory / "Sys.vm").write_text(SYS_VM)
    return directory


# =============================================================================
# String Translation
# =============================================================================

class TestTranslateString:
    """Test translating in-memory units."""

    def test_convenience_function(self):
        lines = translate("push constant 7\npush constant 8\nadd")
        assert lines[:2] == ["@7", "D=A"]

    def test_output_accumulates(self):
        vm = VMTranslator()
        first = vm.translate_string("push constant 1", unit="A")
        second = vm.translate_string("push constant 2", unit="B")
        assert vm.get_output() == first + second
        assert vm.get_units() == ["A", "B"]

    def test_counters_shared_across_units(self):
        """Generated labels stay unique over the whole program."""
        vm = VMTranslator()
        vm.translate_string("eq\ncall X.f 0", unit="A")
        lines = vm.translate_string("eq\ncall X.f 0", unit="B")
        assert "(__EQ_TRUE_1)" in lines
        assert "(X.f$ret.1)" in lines
        assert vm.get_state() == GeneratorState(comparisons=2, calls=2)

    def test_static_per_unit(self):
        vm = VMTranslator()
        a = vm.translate_string("push static 0", unit="A")
        b = vm.translate_string("push static 0", unit="B")
        assert a[0] == "@A.0"
        assert b[0] == "@B.0"

    def test_reset(self):
        vm = VMTranslator()
        vm.translate_string("eq", unit="A")
        vm.reset()
        assert vm.get_output() == []
        assert vm.get_state() == GeneratorState()

    def test_failed_unit_leaves_output(self):
        """A unit that fails to translate adds nothing."""
        vm = VMTranslator()
        vm.translate_string("push constant 1\neq", unit="A")
        before = vm.get_output()
        with pytest.raises(TranslatorError):
            vm.translate_string("eq\npop constant 0", unit="B")
        assert vm.get_output() == before
        assert vm.get_state() == GeneratorState(comparisons=1, calls=0)
        assert vm.get_units() == ["A"]

    def test_syntax_error_location(self):
        with pytest.raises(VMSyntaxError) as exc_info:
            VMTranslator().translate_string("push constant 1\nmult", filename="Bad.vm")
        assert "Bad.vm:2:1" in str(exc_info.value)


# =============================================================================
# Entry Point
# =============================================================================

class TestEntryPoint:
    """Test the entry-point ordering rules."""

    def test_entry_first(self):
        vm = VMTranslator()
        lines = vm.translate_string("function Sys.init 0\nfunction Main.f 0")
        assert lines[0] == "@256"

    def test_entry_after_other_function(self):
        with pytest.raises(EntryPointError) as exc_info:
            VMTranslator().translate_string("function Main.f 0\nfunction Sys.init 0")
        assert exc_info.value.location.line == 2

    def test_entry_declared_twice(self):
        with pytest.raises(EntryPointError):
            VMTranslator().translate_string("function Sys.init 0\nfunction Sys.init 0")

    def test_entry_order_across_units(self):
        vm = VMTranslator()
        vm.translate_string("function Main.f 0", unit="Main")
        with pytest.raises(EntryPointError):
            vm.translate_string("function Sys.init 0", unit="Sys")

    def test_call_to_entry_point(self):
        """The entry function has no label, so calling it is an error."""
        source = "function Sys.init 0\ncall Sys.init 0"
        with pytest.raises(EntryPointError) as exc_info:
            VMTranslator().translate_string(source)
        assert exc_info.value.location.line == 2
        assert "Sys.init" in str(exc_info.value)

    def test_call_to_entry_point_from_other_unit(self):
        vm = VMTranslator()
        vm.translate_string("function Sys.init 0\ncall Main.f 0", unit="Sys")
        before = vm.get_output()
        with pytest.raises(EntryPointError):
            vm.translate_string("function Main.f 0\ncall Sys.init 0", unit="Main")
        assert vm.get_output() == before

    def test_call_to_custom_entry_point(self):
        vm = VMTranslator(TranslatorConfig(entry_point="Main.main"))
        lines = vm.translate_string("function Main.main 0\ncall Sys.init 0")
        assert "@Sys.init" in lines
        with pytest.raises(EntryPointError):
            vm.translate_string("call Main.main 0")

    def test_no_entry_point(self):
        """Programs without the entry function translate without bootstrap."""
        lines = VMTranslator().translate_string("function Main.f 0")
        assert lines == ["(Main.f)"]

    def test_custom_entry_point(self):
        config = TranslatorConfig(entry_point="Main.main")
        vm = VMTranslator(config)
        lines = vm.translate_string("function Main.main 0\nfunction Sys.init 0")
        assert lines[0] == "@256"
        assert "(Sys.init)" in lines


# =============================================================================
# Files and Directories
# =============================================================================

class TestPaths:
    """Test file and directory inputs."""

    def test_translate_file(self, tmp_path):
        source = tmp_path / "Counter.vm"
        source.write_text("push static 2")
        lines = VMTranslator().translate_file(source)
        assert lines[0] == "@Counter.2"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VMTranslator().translate_paths([tmp_path / "Nope.vm"])

    def test_empty_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VMTranslator().translate_paths([tmp_path])

    def test_directory_puts_entry_unit_first(self, program_dir):
        vm = VMTranslator()
        sources = vm.collect_sources([program_dir])
        assert [s.name for s in sources] == ["Sys.vm", "Main.vm"]

    def test_directory_sorted(self, tmp_path):
        for name in ("Zeta.vm", "Alpha.vm", "Mid.vm"):
            (tmp_path / name).write_text("push constant 0")
        (tmp_path / "notes.txt").write_text("ignored")
        sources = VMTranslator().collect_sources([tmp_path])
        assert [s.name for s in sources] == ["Alpha.vm", "Mid.vm", "Zeta.vm"]

    def test_explicit_files_keep_order(self, program_dir):
        sources = VMTranslator().collect_sources(
            [program_dir / "Main.vm", program_dir / "Sys.vm"]
        )
        assert [s.name for s in sources] == ["Main.vm", "Sys.vm"]

    def test_translate_paths(self, program_dir):
        vm = VMTranslator()
        lines = vm.translate_paths([program_dir])
        assert lines[0] == "@256"
        assert vm.get_units() == ["Sys", "Main"]

    def test_translate_paths_resets(self, program_dir):
        vm = VMTranslator()
        vm.translate_string("eq")
        lines = vm.translate_paths([program_dir])
        assert vm.get_output() == lines
        assert vm.get_state() == GeneratorState(comparisons=0, calls=1)

    def test_write_asm(self, program_dir, tmp_path):
        vm = VMTranslator()
        vm.translate_paths([program_dir])
        out = tmp_path / "Triple.asm"
        vm.write_asm(out)
        text = out.read_text()
        assert text.endswith("\n")
        assert text.splitlines() == vm.get_output()


# =============================================================================
# Whole Program
# =============================================================================

class TestWholeProgram:
    """Translate, assemble and run a two-file program."""

    def test_triple(self, program_dir, hack_machine):
        lines = VMTranslator().translate_paths([program_dir])
        machine = hack_machine("\n".join(lines), max_steps=5000)

        symbols = Assembler()
        symbols.assemble_string("\n".join(lines))
        table = symbols.get_symbols()

        assert machine.ram[table["Sys.0"]] == 12
        assert machine.ram[table["Main.1"]] == 12
        assert machine.ram[0] == 256
