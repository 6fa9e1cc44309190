"""
Hack Code Generator for VM Commands
===================================

This module lowers VM commands into Hack assembly text. Each VM command maps
to a fixed or parameterised run of assembly lines that manipulate a single
global operand stack in RAM.

Stack Model
-----------
RAM[SP] always addresses the next free slot. A push writes to RAM[SP] and
increments SP. A pop decrements SP and reads RAM[SP].

Segment Addressing
------------------
| Segment  | Address of slot i           |
|----------|-----------------------------|
| constant | (value i, not an address)   |
| local    | RAM[LCL] + i                |
| argument | RAM[ARG] + i                |
| this     | RAM[THIS] + i               |
| that     | RAM[THAT] + i               |
| pointer  | 3 + i (THIS or THAT itself) |
| temp     | 5 + i, i in 0..7            |
| static   | variable "<unit>.<i>"       |

Call Frame Layout
-----------------
    ARG ->  argument 0
            ...
            argument nArgs-1
            return address
            saved LCL
            saved ARG
            saved THIS
            saved THAT
    LCL ->  local 0
            ...
    SP  ->  (next free slot)

Label Uniqueness
----------------
Comparisons and call sites need generated labels. Their counters live in a
GeneratorState value that is passed into every lower() call and handed back
updated. The generator itself holds only its configuration, and each
lower() call works in its own context:

    __EQ_TRUE_0 / __EQ_END_0      first comparison (eq)
    __LT_TRUE_1 / __LT_END_1      second comparison (lt)
    Main.fib$ret.0                first call site

Usage
-----
>>> from hack_sdk.vm.codegen import CodeGenerator, GeneratorState
>>> from hack_sdk.vm.parser import parse_source
>>> gen = CodeGenerator()
>>> lines, state = gen.generate(parse_source("push constant 7"))
>>> lines[:2]
['@7', 'D=A']
"""

from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from hack_sdk.assembler.opcodes import MAX_ADDRESS
from hack_sdk.config import TranslatorConfig
from hack_sdk.errors import (
    InvalidPointerIndexError,
    InvalidSegmentError,
    SegmentIndexError,
    VMSyntaxError,
)
from hack_sdk.vm.parser import CommandType, VMCommand


# Segments addressed through a base register
BASE_REGISTERS = {
    "local": "LCL",
    "argument": "ARG",
    "this": "THIS",
    "that": "THAT",
}

POINTER_REGISTERS = ("THIS", "THAT")

# Registers saved by 'call', in push order. 'return' restores them in reverse.
FRAME_REGISTERS = ("LCL", "ARG", "THIS", "THAT")

# Return address + saved registers
FRAME_SIZE = 1 + len(FRAME_REGISTERS)

FRAME_REGISTER = "R13"
RETURN_REGISTER = "R14"
POP_ADDRESS_REGISTER = "R13"

BINARY_OPERATIONS = {
    "add": "M=D+M",
    "sub": "M=M-D",
    "and": "M=D&M",
    "or": "M=D|M",
}

UNARY_OPERATIONS = {
    "neg": "M=-M",
    "not": "M=!M",
}

COMPARISON_JUMPS = {
    "eq": "JEQ",
    "gt": "JGT",
    "lt": "JLT",
}


@dataclass(frozen=True)
class GeneratorState:
    """
    Disambiguation counters threaded through code generation.

    Attributes:
        comparisons: Number of eq/gt/lt commands lowered so far
        calls: Number of call sites lowered so far
    """
    comparisons: int = 0
    calls: int = 0


@dataclass
class _Lowering:
    """Working context of a single lower() call."""
    command: VMCommand
    state: GeneratorState
    unit: str
    output: list[str] = field(default_factory=list)

    def emit(self, *lines: str) -> None:
        self.output.extend(lines)

    def emit_label(self, label: str) -> None:
        self.emit(f"({label})")

    def emit_push_d(self) -> None:
        """RAM[SP] = D; SP++"""
        self.emit("@SP", "A=M", "M=D", "@SP", "M=M+1")

    def emit_pop_d(self) -> None:
        """SP--; D = RAM[SP]. Leaves A pointing at the popped slot."""
        self.emit("@SP", "AM=M-1", "D=M")

    def error_context(self) -> dict:
        return {"location": self.command.location, "source_line": self.command.source}


class CodeGenerator:
    """
    Lowers VM commands to Hack assembly lines.

    The generator holds only its configuration. Everything that changes
    while lowering lives in a per-call _Lowering context and in the
    GeneratorState handed back to the caller, so one generator can serve
    any number of programs.
    """

    def __init__(self, config: Optional[TranslatorConfig] = None):
        self._config = config or TranslatorConfig()
        self._config.validate()

        self._handlers: dict[CommandType, Callable[[_Lowering], None]] = {
            CommandType.ARITHMETIC: self._generate_arithmetic,
            CommandType.PUSH: self._generate_push,
            CommandType.POP: self._generate_pop,
            CommandType.LABEL: self._generate_label,
            CommandType.GOTO: self._generate_goto,
            CommandType.IF_GOTO: self._generate_if_goto,
            CommandType.FUNCTION: self._generate_function,
            CommandType.CALL: self._generate_call,
            CommandType.RETURN: self._generate_return,
        }

    @property
    def config(self) -> TranslatorConfig:
        return self._config

    def lower(
        self,
        command: VMCommand,
        state: GeneratorState,
        unit: str = "",
    ) -> tuple[list[str], GeneratorState]:
        """
        Lower a single VM command.

        Args:
            command: The command to lower
            state: Counters before this command
            unit: Name of the source unit (file stem), used for static symbols

        Returns:
            (assembly lines, counters after this command)

        Raises:
            TranslatorError: If the command cannot be lowered
        """
        lowering = _Lowering(command, state, unit)

        if self._config.annotate:
            lowering.emit(f"// {command}")

        self._handlers[command.kind](lowering)

        return lowering.output, lowering.state

    def generate(
        self,
        commands: list[VMCommand],
        state: Optional[GeneratorState] = None,
        unit: str = "",
    ) -> tuple[list[str], GeneratorState]:
        """
        Lower a sequence of commands in order.

        Args:
            commands: Commands of one unit, in source order
            state: Counters to start from (fresh if None)
            unit: Source unit name for static symbols

        Returns:
            (all assembly lines, final counters)

        Raises:
            ConfigError: If the configuration was changed to an invalid layout
            TranslatorError: If a command cannot be lowered
        """
        self._config.validate()
        if state is None:
            state = GeneratorState()
        lines: list[str] = []
        for command in commands:
            output, state = self.lower(command, state, unit)
            lines.extend(output)
        return lines, state

    # =========================================================================
    # Arithmetic and Logic
    # =========================================================================

    def _generate_arithmetic(self, lowering: _Lowering) -> None:
        op = lowering.command.name

        if op in BINARY_OPERATIONS:
            # y in D, x at the new top, result overwrites x
            lowering.emit_pop_d()
            lowering.emit("A=A-1", BINARY_OPERATIONS[op])

        elif op in UNARY_OPERATIONS:
            lowering.emit("@SP", "A=M-1", UNARY_OPERATIONS[op])

        elif op in COMPARISON_JUMPS:
            self._generate_comparison(lowering, op)

        else:
            raise VMSyntaxError(
                f"unknown arithmetic command '{op}'", **lowering.error_context()
            )

    def _generate_comparison(self, lowering: _Lowering, op: str) -> None:
        """x op y -> -1 (true) or 0 (false), branching on the sign of x - y."""
        n = lowering.state.comparisons
        true_label = f"__{op.upper()}_TRUE_{n}"
        end_label = f"__{op.upper()}_END_{n}"

        lowering.emit_pop_d()
        lowering.emit("A=A-1", "D=M-D")
        lowering.emit(f"@{true_label}", f"D;{COMPARISON_JUMPS[op]}")
        lowering.emit("@SP", "A=M-1", "M=0")
        lowering.emit(f"@{end_label}", "0;JMP")
        lowering.emit_label(true_label)
        lowering.emit("@SP", "A=M-1", "M=-1")
        lowering.emit_label(end_label)

        lowering.state = replace(lowering.state, comparisons=n + 1)

    # =========================================================================
    # Memory Access
    # =========================================================================

    def _generate_push(self, lowering: _Lowering) -> None:
        segment, index = lowering.command.name, lowering.command.index

        if segment == "constant":
            if index > MAX_ADDRESS:
                raise SegmentIndexError(
                    f"constant {index} does not fit in 15 bits (max {MAX_ADDRESS})",
                    **lowering.error_context(),
                )
            lowering.emit(f"@{index}", "D=A")

        elif segment in BASE_REGISTERS:
            lowering.emit(
                f"@{index}", "D=A", f"@{BASE_REGISTERS[segment]}", "A=D+M", "D=M",
            )

        else:
            lowering.emit(f"@{self._fixed_address(lowering, segment, index)}", "D=M")

        lowering.emit_push_d()

    def _generate_pop(self, lowering: _Lowering) -> None:
        segment, index = lowering.command.name, lowering.command.index

        if segment == "constant":
            raise InvalidSegmentError(
                "cannot pop into the constant segment", **lowering.error_context()
            )

        if segment in BASE_REGISTERS:
            # Target address is computed before the pop clobbers D
            lowering.emit(f"@{index}", "D=A", f"@{BASE_REGISTERS[segment]}", "D=D+M")
            lowering.emit(f"@{POP_ADDRESS_REGISTER}", "M=D")
            lowering.emit_pop_d()
            lowering.emit(f"@{POP_ADDRESS_REGISTER}", "A=M", "M=D")
            return

        target = self._fixed_address(lowering, segment, index)
        lowering.emit_pop_d()
        lowering.emit(f"@{target}", "M=D")

    def _fixed_address(self, lowering: _Lowering, segment: str, index: int) -> str:
        """Symbol or literal address for pointer, temp and static slots."""
        if segment == "pointer":
            if index not in (0, 1):
                raise InvalidPointerIndexError(index, **lowering.error_context())
            return POINTER_REGISTERS[index]

        if segment == "temp":
            if index >= self._config.temp_size:
                raise SegmentIndexError(
                    f"temp index {index} out of range (0..{self._config.temp_size - 1})",
                    **lowering.error_context(),
                )
            return str(self._config.temp_base + index)

        if segment == "static":
            return f"{lowering.unit or 'static'}.{index}"

        raise InvalidSegmentError(
            f"unknown segment '{segment}'", **lowering.error_context()
        )

    # =========================================================================
    # Program Flow
    # =========================================================================

    def _generate_label(self, lowering: _Lowering) -> None:
        lowering.emit_label(lowering.command.name)

    def _generate_goto(self, lowering: _Lowering) -> None:
        lowering.emit(f"@{lowering.command.name}", "0;JMP")

    def _generate_if_goto(self, lowering: _Lowering) -> None:
        """Jump when the popped value is non-zero."""
        lowering.emit_pop_d()
        lowering.emit(f"@{lowering.command.name}", "D;JNE")

    # =========================================================================
    # Function Calling
    # =========================================================================

    def _generate_function(self, lowering: _Lowering) -> None:
        command = lowering.command
        if command.name == self._config.entry_point:
            self._emit_bootstrap(lowering)
        else:
            lowering.emit_label(command.name)

        # Locals live directly above the frame, initialised to 0
        for _ in range(command.index):
            lowering.emit("@0", "D=A")
            lowering.emit_push_d()

    def _emit_bootstrap(self, lowering: _Lowering) -> None:
        """SP = LCL = stack base."""
        lowering.emit(
            f"@{self._config.stack_base}", "D=A", "@SP", "M=D", "@LCL", "M=D",
        )

    def _generate_call(self, lowering: _Lowering) -> None:
        command = lowering.command
        n = lowering.state.calls
        return_label = f"{command.name}$ret.{n}"

        lowering.emit(f"@{return_label}", "D=A")
        lowering.emit_push_d()

        for register in FRAME_REGISTERS:
            lowering.emit(f"@{register}", "D=M")
            lowering.emit_push_d()

        # ARG = SP - nArgs - 5
        lowering.emit(
            "@SP", "D=M", f"@{command.index + FRAME_SIZE}", "D=D-A", "@ARG", "M=D",
        )
        # LCL = SP
        lowering.emit("@SP", "D=M", "@LCL", "M=D")

        lowering.emit(f"@{command.name}", "0;JMP")
        lowering.emit_label(return_label)

        lowering.state = replace(lowering.state, calls=n + 1)

    def _generate_return(self, lowering: _Lowering) -> None:
        # FRAME = LCL
        lowering.emit("@LCL", "D=M", f"@{FRAME_REGISTER}", "M=D")
        # RET = RAM[FRAME - 5], saved before *ARG can overwrite it
        lowering.emit(f"@{FRAME_SIZE}", "A=D-A", "D=M", f"@{RETURN_REGISTER}", "M=D")
        # *ARG = pop()
        lowering.emit_pop_d()
        lowering.emit("@ARG", "A=M", "M=D")
        # SP = ARG + 1
        lowering.emit("@ARG", "D=M+1", "@SP", "M=D")

        # Each restore reads FRAME - k, never a register restored before it
        for offset, register in enumerate(reversed(FRAME_REGISTERS), start=1):
            lowering.emit(
                f"@{FRAME_REGISTER}", "D=M", f"@{offset}", "A=D-A", "D=M",
                f"@{register}", "M=D",
            )

        lowering.emit(f"@{RETURN_REGISTER}", "A=M", "0;JMP")
