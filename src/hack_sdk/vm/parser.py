"""
VM Language Parser
==================

Turns VM source text into VMCommand values.

Command Grammar
---------------
| Kind       | Syntax                         | name        | index    |
|------------|--------------------------------|-------------|----------|
| ARITHMETIC | add sub neg eq gt lt and or not| mnemonic    | 0        |
| PUSH       | push <segment> <i>             | segment     | i        |
| POP        | pop <segment> <i>              | segment     | i        |
| LABEL      | label <name>                   | label       | 0        |
| GOTO       | goto <name>                    | label       | 0        |
| IF_GOTO    | if-goto <name>                 | label       | 0        |
| FUNCTION   | function <name> <nLocals>      | function    | nLocals  |
| CALL       | call <name> <nArgs>            | function    | nArgs    |
| RETURN     | return                         | ""          | 0        |

Comments start with "//". Tokens are separated by any whitespace.
"""

from dataclasses import dataclass
from enum import Enum, auto

from hack_sdk.errors import (
    InvalidSegmentError,
    MalformedOperandError,
    SourceLocation,
    VMSyntaxError,
)


class CommandType(Enum):
    """The nine VM command variants."""
    ARITHMETIC = auto()
    PUSH = auto()
    POP = auto()
    LABEL = auto()
    GOTO = auto()
    IF_GOTO = auto()
    FUNCTION = auto()
    RETURN = auto()
    CALL = auto()


ARITHMETIC_COMMANDS = frozenset({"add", "sub", "neg", "eq", "gt", "lt", "and", "or", "not"})

SEGMENTS = frozenset({
    "constant", "local", "argument", "this", "that", "pointer", "temp", "static",
})

# mnemonic -> (command type, operand count)
_GRAMMAR: dict[str, tuple[CommandType, int]] = {
    "push": (CommandType.PUSH, 2),
    "pop": (CommandType.POP, 2),
    "label": (CommandType.LABEL, 1),
    "goto": (CommandType.GOTO, 1),
    "if-goto": (CommandType.IF_GOTO, 1),
    "function": (CommandType.FUNCTION, 2),
    "call": (CommandType.CALL, 2),
    "return": (CommandType.RETURN, 0),
    **{op: (CommandType.ARITHMETIC, 0) for op in ARITHMETIC_COMMANDS},
}


@dataclass(frozen=True)
class VMCommand:
    """
    A single parsed VM command.

    Attributes:
        kind: Command variant
        name: Arithmetic mnemonic, segment, label or function name
        index: Segment index, local count or argument count (0 if unused)
        location: Where the command appeared
        source: Command text without comments
    """
    kind: CommandType
    name: str = ""
    index: int = 0
    location: SourceLocation = SourceLocation("<input>", 0)
    source: str = ""

    def __str__(self) -> str:
        return self.source or f"{self.kind.name.lower()} {self.name} {self.index}".strip()


def strip_comment(line: str) -> str:
    """Remove a trailing // comment and surrounding whitespace."""
    comment = line.find("//")
    if comment >= 0:
        line = line[:comment]
    return line.strip()


def parse_line(line: str, location: SourceLocation) -> VMCommand | None:
    """
    Parse a single line of VM code.

    Returns:
        The parsed command, or None for blank and comment-only lines

    Raises:
        VMSyntaxError: Unknown mnemonic or wrong operand count
        MalformedOperandError: Index/count is not a non-negative integer
        InvalidSegmentError: Unknown segment name
    """
    text = strip_comment(line)
    if not text:
        return None

    column = len(line) - len(line.lstrip()) + 1
    location = SourceLocation(location.filename, location.line, column)

    mnemonic, *operands = text.split()
    entry = _GRAMMAR.get(mnemonic)
    if entry is None:
        raise VMSyntaxError(
            f"unknown command '{mnemonic}'",
            location, source_line=text,
        )

    kind, arity = entry
    if len(operands) != arity:
        raise VMSyntaxError(
            f"'{mnemonic}' expects {arity} operand(s), got {len(operands)}",
            location, source_line=text,
        )

    if kind is CommandType.ARITHMETIC:
        return VMCommand(kind, mnemonic, 0, location, text)
    if kind is CommandType.RETURN:
        return VMCommand(kind, "", 0, location, text)
    if arity == 1:
        return VMCommand(kind, operands[0], 0, location, text)

    name, index_text = operands
    if kind in (CommandType.PUSH, CommandType.POP) and name not in SEGMENTS:
        raise InvalidSegmentError(
            f"unknown segment '{name}'",
            location, source_line=text,
            hint="segments: " + ", ".join(sorted(SEGMENTS)),
        )

    return VMCommand(kind, name, _parse_index(index_text, location, text), location, text)


def _parse_index(text: str, location: SourceLocation, source: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise MalformedOperandError(text, location, source_line=source)
    return int(text)


def parse_source(source: str, filename: str = "<input>") -> list[VMCommand]:
    """
    Parse a complete VM source text.

    Raises:
        TranslatorError: On the first malformed line
    """
    commands: list[VMCommand] = []
    for line_no, line in enumerate(source.splitlines(), start=1):
        command = parse_line(line, SourceLocation(filename, line_no))
        if command is not None:
            commands.append(command)
    return commands
