"""
Hack Assembler - Main Interface
===============================

This module provides the Assembler class, the primary interface for turning
Hack assembly into binary machine code. It sequences the parser, the
two-pass symbol resolver and the encoder.

Example Usage
-------------
>>> from hack_sdk.assembler import Assembler
>>> asm = Assembler()
>>> asm.assemble_string('''
...     @2
...     D=A
...     @3
...     D=D+A
...     @0
...     M=D
... ''')[0]
'0000000000000010'
>>> asm.write_hack("add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm -o Add.hack -s Add.sym -l Add.lst
"""

import logging
from pathlib import Path
from typing import Optional

from hack_sdk.assembler.opcodes import encode_address, encode_compute
from hack_sdk.assembler.parser import (
    AddressCommand,
    AssemblyCommand,
    ComputeCommand,
    parse_source,
)
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import UnresolvedSymbolError

logger = logging.getLogger(__name__)


class Assembler:
    """
    Hack assembler.

    Each call to assemble_string() or assemble_file() is an independent run
    with a fresh symbol table. The results of the last run stay available
    through get_code(), get_symbols() and get_listing().
    """

    def __init__(self):
        self._code: list[str] = []
        self._commands: list[AssemblyCommand] = []
        self._symbols: Optional[SymbolTable] = None
        self._source_file: Optional[Path] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[str]:
        """
        Assemble source code from a string.

        The pipeline is:
        1. Parse source into commands
        2. Bind labels (pass 1)
        3. Resolve address commands (pass 2)
        4. Encode every non-label command

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            One 16-character binary string per instruction

        Raises:
            AssemblerError: If assembly fails. No partial output is kept.
        """
        self._code = []
        self._commands = []
        self._symbols = None

        commands = parse_source(source, filename)
        logger.debug(f"Parsed {len(commands)} commands from {filename}")

        symbols = SymbolTable()
        instruction_count = symbols.bind_labels(commands)
        values = iter(symbols.resolve(commands))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Symbol table for {filename}:\n{symbols.format()}")

        code = []
        for command in commands:
            if isinstance(command, AddressCommand):
                value = next(values, None)
                if value is None:
                    raise UnresolvedSymbolError(
                        command.symbol, command.location, source_line=command.source,
                    )
                code.append(encode_address(value, command.location, command.source))
            elif isinstance(command, ComputeCommand):
                code.append(encode_compute(
                    command.dest, command.comp, command.jump,
                    command.location, command.source,
                ))

        logger.debug(f"Encoded {len(code)} of {instruction_count} instructions")

        self._code = code
        self._commands = commands
        self._symbols = symbols
        return list(code)

    def assemble_file(self, filepath: str | Path) -> list[str]:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath

        logger.debug(f"Assembling {filepath}")
        source = filepath.read_text()
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> list[str]:
        """Return the binary lines of the last run."""
        return list(self._code)

    def get_symbols(self) -> dict[str, int]:
        """
        Get the symbol table of the last run.

        Returns:
            Dictionary mapping symbol names to addresses, including the
            predefined aliases
        """
        return self._symbols.as_dict() if self._symbols else {}

    def get_listing(self) -> str:
        """
        Get an assembly listing.

        Each instruction line shows its ROM address, binary word and source
        text. Label lines show only the source text.
        """
        lines = []
        address = 0
        for command in self._commands:
            if isinstance(command, (AddressCommand, ComputeCommand)):
                word = self._code[address]
                lines.append(
                    f"{address:5d}  {word}  {command.location.line:5d}  {command.source}"
                )
                address += 1
            else:
                lines.append(f"{'':5}  {'':16}  {command.location.line:5d}  {command.source}")
        return "\n".join(lines)

    def write_hack(self, filepath: str | Path) -> None:
        """Write the binary lines, one per line, to filepath."""
        text = "".join(f"{word}\n" for word in self._code)
        Path(filepath).write_text(text)
        logger.debug(f"Wrote {len(self._code)} instructions to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """Write the labels and variables of the last run."""
        text = self._symbols.format() if self._symbols else ""
        Path(filepath).write_text(text + "\n")
        logger.debug(f"Wrote symbols to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing of the last run."""
        Path(filepath).write_text(self.get_listing() + "\n")
        logger.debug(f"Wrote listing to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[str]:
    """
    Convenience function to assemble source code.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> list[str]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
