"""
Hack Symbol Table and Two-Pass Resolver
=======================================

Symbols come from three places:

1. **Predefined** register and I/O aliases (SP, LCL, ..., R0-R15, SCREEN,
   KBD). These are fixed and can never be rebound.
2. **Labels**, bound in the first pass to the address of the instruction
   that follows the "(NAME)" line. Labels take no address themselves.
3. **Variables**, allocated in the second pass from RAM address 16 upward,
   in the order they are first referenced.

The first pass must finish before the second begins so that forward
references to labels resolve to the label and not to a fresh variable.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from hack_sdk.assembler.opcodes import MAX_ADDRESS
from hack_sdk.assembler.parser import AddressCommand, AssemblyCommand, LabelDef
from hack_sdk.errors import (
    AddressRangeError,
    DuplicateLabelError,
    SourceLocation,
)

logger = logging.getLogger(__name__)


PREDEFINED_SYMBOLS: dict[str, int] = {
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    **{f"R{n}": n for n in range(16)},
    "SCREEN": 0x4000,
    "KBD": 0x6000,
}

# First RAM address handed out to variables
VARIABLE_BASE = 16


@dataclass
class Symbol:
    """
    Symbol table entry.

    Attributes:
        name: Symbol name (case-sensitive)
        value: Bound address
        kind: "predefined", "label" or "variable"
        location: Where the label was defined or the variable first used
    """
    name: str
    value: int
    kind: str
    location: Optional[SourceLocation] = None


class SymbolTable:
    """
    Name-to-address mapping for one assembly run.

    Usage:
        table = SymbolTable()
        table.bind_labels(commands)      # pass 1
        values = table.resolve(commands) # pass 2
    """

    def __init__(self):
        self._symbols: dict[str, Symbol] = {
            name: Symbol(name, value, "predefined")
            for name, value in PREDEFINED_SYMBOLS.items()
        }
        self._next_variable = VARIABLE_BASE

    def __contains__(self, name: str) -> bool:
        return name in self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def get(self, name: str) -> Optional[int]:
        """Return the address bound to name, or None."""
        symbol = self._symbols.get(name)
        return symbol.value if symbol else None

    def entries(self) -> list[Symbol]:
        """All symbols, ordered by address then name."""
        return sorted(self._symbols.values(), key=lambda s: (s.value, s.name))

    def as_dict(self) -> dict[str, int]:
        return {name: sym.value for name, sym in self._symbols.items()}

    # =========================================================================
    # Pass 1: Label Binding
    # =========================================================================

    def bind_labels(self, commands: list[AssemblyCommand]) -> int:
        """
        Bind every label to the address of the next real instruction.

        Args:
            commands: Parsed commands in source order

        Returns:
            Number of instructions the program will emit

        Raises:
            DuplicateLabelError: If a label is defined twice or shadows a
                                 predefined symbol
        """
        address = 0
        for command in commands:
            if isinstance(command, LabelDef):
                self._define_label(command, address)
            else:
                address += 1
        return address

    def _define_label(self, label: LabelDef, address: int) -> None:
        existing = self._symbols.get(label.name)
        if existing is not None:
            raise DuplicateLabelError(
                label.name,
                location=label.location,
                original_location=existing.location,
                source_line=label.source,
            )

        self._symbols[label.name] = Symbol(label.name, address, "label", label.location)
        logger.debug(f"Label '{label.name}' bound to {address}")

    # =========================================================================
    # Pass 2: Reference Resolution
    # =========================================================================

    def resolve(self, commands: list[AssemblyCommand]) -> list[int]:
        """
        Resolve the value of every address command.

        Lookup order is predefined symbol, bound symbol, decimal literal,
        and finally a newly allocated variable.

        Returns:
            One value per AddressCommand, in source order
        """
        values = []
        for command in commands:
            if isinstance(command, AddressCommand):
                values.append(self.resolve_symbol(command))
        return values

    def resolve_symbol(self, command: AddressCommand) -> int:
        """Resolve a single address command, allocating a variable if needed."""
        name = command.symbol

        bound = self.get(name)
        if bound is not None:
            return bound

        if name.isascii() and name.isdigit():
            value = int(name)
            if value > MAX_ADDRESS:
                raise AddressRangeError(
                    f"address {value} out of range (0..{MAX_ADDRESS})",
                    command.location, source_line=command.source,
                )
            return value

        return self._allocate_variable(command)

    def _allocate_variable(self, command: AddressCommand) -> int:
        address = self._next_variable
        if address > MAX_ADDRESS:
            raise AddressRangeError(
                f"no RAM left for variable '{command.symbol}'",
                command.location, source_line=command.source,
            )

        self._symbols[command.symbol] = Symbol(
            command.symbol, address, "variable", command.location,
        )
        self._next_variable += 1
        logger.debug(f"Variable '{command.symbol}' allocated at {address}")
        return address

    # =========================================================================
    # Output
    # =========================================================================

    def format(self, include_predefined: bool = False) -> str:
        """
        Format the table as aligned text, one symbol per line.

        Args:
            include_predefined: Also list the fixed register aliases
        """
        lines = [f"{'Symbol':<24} {'Address':>7}  Kind", f"{'-' * 24} {'-' * 7}  {'-' * 10}"]
        for sym in self.entries():
            if sym.kind == "predefined" and not include_predefined:
                continue
            lines.append(f"{sym.name:<24} {sym.value:>7}  {sym.kind}")
        return "\n".join(lines)
