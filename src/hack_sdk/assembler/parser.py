"""
Hack Assembly Language Parser
=============================

This module turns Hack assembly source text into a list of commands the
symbol resolver and encoder can process.

Command Types
-------------
1. **AddressCommand**: loads a value or address into A
   ```asm
   @17             // numeric literal
   @LOOP           // label
   @counter        // variable
   ```

2. **ComputeCommand**: computes, stores, and optionally jumps
   ```asm
   D=M             // dest=comp
   D;JGT           // comp;jump
   AM=M-1          // dest=comp
   0;JMP
   ```

3. **LabelDef**: binds a symbol to the next instruction address
   ```asm
   (LOOP)
   ```

Comments start with "//" and run to the end of the line. Blank lines and
comment-only lines produce no command.
"""

from dataclasses import dataclass
from typing import Union

from hack_sdk.errors import AssemblySyntaxError, SourceLocation


# =============================================================================
# Command Data Classes
# =============================================================================

@dataclass(frozen=True)
class Command:
    """
    Base class for all parsed assembly commands.

    Attributes:
        location: Where the command appeared in the source
        source: The command text with comments and surrounding space removed
    """
    location: SourceLocation
    source: str


@dataclass(frozen=True)
class AddressCommand(Command):
    """
    A-instruction: @symbol.

    Attributes:
        symbol: Symbol name or numeric literal text
    """
    symbol: str


@dataclass(frozen=True)
class ComputeCommand(Command):
    """
    C-instruction: dest=comp;jump.

    Attributes:
        dest: Destination register set ("" when absent)
        comp: Computation expression
        jump: Jump condition ("" when absent)
    """
    dest: str
    comp: str
    jump: str


@dataclass(frozen=True)
class LabelDef(Command):
    """
    Label pseudo-command: (name).

    Attributes:
        name: Label name
    """
    name: str


AssemblyCommand = Union[AddressCommand, ComputeCommand, LabelDef]


# =============================================================================
# Line Parsing
# =============================================================================

def strip_comment(line: str) -> str:
    """Remove a trailing // comment and surrounding whitespace."""
    comment = line.find("//")
    if comment >= 0:
        line = line[:comment]
    return line.strip()


def parse_line(line: str, location: SourceLocation) -> AssemblyCommand | None:
    """
    Parse a single line of assembly.

    Args:
        line: Raw source line
        location: Location of the line (column is filled in here)

    Returns:
        The parsed command, or None for blank and comment-only lines

    Raises:
        AssemblySyntaxError: If the line is malformed
    """
    text = strip_comment(line)
    if not text:
        return None

    # Point error carets at the first non-blank character
    column = len(line) - len(line.lstrip()) + 1
    location = SourceLocation(location.filename, location.line, column)

    if text.startswith("@"):
        symbol = text[1:].strip()
        if not symbol or any(ch.isspace() for ch in symbol):
            raise AssemblySyntaxError(
                "address command needs exactly one symbol or number",
                location, source_line=text,
            )
        return AddressCommand(location, text, symbol)

    if text.startswith("("):
        if not text.endswith(")"):
            raise AssemblySyntaxError(
                "label definition is missing ')'",
                location, source_line=text,
            )
        name = text[1:-1].strip()
        if not name or any(ch.isspace() for ch in name):
            raise AssemblySyntaxError(
                "label definition needs a single name",
                location, source_line=text,
            )
        return LabelDef(location, text, name)

    return _parse_compute(text, location)


def _parse_compute(text: str, location: SourceLocation) -> ComputeCommand:
    """Split dest=comp;jump into its three fields."""
    compact = "".join(text.split())

    dest, comp, jump = "", compact, ""
    if ";" in comp:
        comp, jump = comp.split(";", 1)
    if "=" in comp:
        dest, comp = comp.split("=", 1)

    if not comp:
        raise AssemblySyntaxError(
            "compute command has no computation",
            location, source_line=text,
            hint="expected dest=comp;jump, e.g. D=M or 0;JMP",
        )
    if "=" in text and not dest:
        raise AssemblySyntaxError(
            "compute command has an empty destination before '='",
            location, source_line=text,
        )
    if ";" in text and not jump:
        raise AssemblySyntaxError(
            "compute command has an empty jump after ';'",
            location, source_line=text,
        )

    return ComputeCommand(location, text, dest, comp, jump)


def parse_source(source: str, filename: str = "<input>") -> list[AssemblyCommand]:
    """
    Parse a complete assembly source text.

    Args:
        source: Assembly source code
        filename: Name used in error locations

    Returns:
        Commands in source order

    Raises:
        AssemblySyntaxError: On the first malformed line
    """
    commands: list[AssemblyCommand] = []
    for line_no, line in enumerate(source.splitlines(), start=1):
        command = parse_line(line, SourceLocation(filename, line_no))
        if command is not None:
            commands.append(command)
    return commands
