"""
Hack SDK Error Hierarchy
========================

This module defines the exception hierarchy for the entire Hack SDK.
All exceptions inherit from HackError, allowing callers to catch all
toolchain errors with a single except clause if desired.

Exception Hierarchy
-------------------
HackError (base)
├── AssemblerError (assembler-related)
│   ├── AssemblySyntaxError - malformed assembly line
│   ├── UnknownComputationError - comp expression not in the table
│   ├── UnknownDestinationError - dest register set not in the table
│   ├── UnknownJumpError - jump condition not in the table
│   ├── DuplicateLabelError - label defined more than once
│   ├── UnresolvedSymbolError - address command left without a value
│   └── AddressRangeError - literal address does not fit in 15 bits
└── TranslatorError (VM translator)
    ├── VMSyntaxError - unknown command or wrong operand count
    ├── MalformedOperandError - index/count is not a non-negative integer
    ├── InvalidSegmentError - unknown segment, or pop into constant
    ├── InvalidPointerIndexError - pointer index outside {0, 1}
    ├── SegmentIndexError - temp index outside its window
    ├── EntryPointError - entry function repeated, out of order, or called
    └── ConfigError - translator settings that would corrupt memory

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)

Every error is fatal. The drivers abort on the first one and never write
partial output.
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class HackError(Exception):
    """
    Base exception for all Hack SDK errors.

    Captures an optional source location, the offending source text and a
    hint, and renders them into the exception message:

        prog.asm:3:1: error: unknown computation 'D+2'
            D=D+2
            ^
        hint: valid computations include D+1, D+A, D+M
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with location, source context, and hint."""
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(HackError):
    """Base exception for all assembler-related errors."""
    pass


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in assembly source code.

    Examples:
        - "@" with no symbol
        - "(LOOP" without the closing parenthesis
        - "D=" with an empty computation
    """
    pass


class UnknownComputationError(AssemblerError):
    """Computation expression is not one of the 28 Hack computations."""

    def __init__(
        self,
        comp: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.comp = comp
        super().__init__(
            f"unknown computation '{comp}'",
            location=location,
            hint="operands are written D-first and A/M-second, e.g. D+M, D&A",
            source_line=source_line,
        )


class UnknownDestinationError(AssemblerError):
    """Destination register set is not one of the 8 Hack destinations."""

    def __init__(
        self,
        dest: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.dest = dest
        super().__init__(
            f"unknown destination '{dest}'",
            location=location,
            hint="valid destinations: M, D, MD, A, AM, AD, AMD",
            source_line=source_line,
        )


class UnknownJumpError(AssemblerError):
    """Jump condition is not one of the 8 Hack jump mnemonics."""

    def __init__(
        self,
        jump: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.jump = jump
        super().__init__(
            f"unknown jump '{jump}'",
            location=location,
            hint="valid jumps: JGT, JEQ, JGE, JLT, JNE, JLE, JMP",
            source_line=source_line,
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined more than once, or defined with a predefined name.

    Includes the original definition location when available.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        self.original_location = original_location

        if original_location:
            hint = f"'{symbol}' was first defined at {original_location}"
        else:
            hint = f"'{symbol}' is a predefined symbol"

        super().__init__(
            f"duplicate label '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnresolvedSymbolError(AssemblerError):
    """An address command reached encoding without a resolved value."""

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.symbol = symbol
        super().__init__(
            f"unresolved symbol '{symbol}'",
            location=location,
            source_line=source_line,
        )


class AddressRangeError(AssemblerError):
    """A literal address does not fit in the 15-bit address field."""
    pass


# =============================================================================
# VM Translator Exceptions
# =============================================================================

class TranslatorError(HackError):
    """Base exception for all VM translator errors."""
    pass


class VMSyntaxError(TranslatorError):
    """
    Syntax error in VM source code.

    Raised for unknown command mnemonics and for commands with the wrong
    number of operands.
    """
    pass


class MalformedOperandError(TranslatorError):
    """An index or count operand is not a valid non-negative integer."""

    def __init__(
        self,
        operand: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.operand = operand
        super().__init__(
            f"malformed operand '{operand}': expected a non-negative integer",
            location=location,
            source_line=source_line,
        )


class InvalidSegmentError(TranslatorError):
    """Unknown memory segment, or a segment that cannot be written."""
    pass


class InvalidPointerIndexError(TranslatorError):
    """The pointer segment only has slots 0 (THIS) and 1 (THAT)."""

    def __init__(
        self,
        index: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.index = index
        super().__init__(
            f"invalid pointer index {index}",
            location=location,
            hint="pointer 0 selects THIS and pointer 1 selects THAT",
            source_line=source_line,
        )


class SegmentIndexError(TranslatorError):
    """Index falls outside a fixed-size segment such as temp."""
    pass


class EntryPointError(TranslatorError):
    """
    The entry-point function is declared twice, declared after another
    function, or targeted by a call (it has no label to jump to).
    """
    pass


class ConfigError(TranslatorError):
    """
    Translator settings that overlap reserved RAM.

    Examples:
        - a stack base outside 16..32767
        - a temp window reaching into the R13/R14 scratch registers
    """
    pass
