"""
Hack SDK - Test Configuration
=============================

pytest fixtures shared by the test suite.

It provides:
- HackMachine, a small Hack CPU simulator for running assembled programs
- hack_machine: assemble Hack assembly and run it
- run_vm: translate VM source, assemble it and run it
"""

from typing import Optional

import pytest

from hack_sdk.assembler import Assembler, decode_compute
from hack_sdk.config import TranslatorConfig
from hack_sdk.vm import VMTranslator


RAM_SIZE = 0x8000
WORD_MASK = 0xFFFF


def to_signed(value: int) -> int:
    """Interpret a 16-bit word as two's complement."""
    return value - 0x10000 if value & 0x8000 else value


# ═══════════════════════════════════════════════════════════════════════════════
# HACK CPU SIMULATOR
# ═══════════════════════════════════════════════════════════════════════════════


class HackMachine:
    """
    Executes a list of binary instruction words.

    Jump targets use the value A held before the instruction, as the
    hardware does. Execution stops when the program counter runs past the
    end of ROM or after max_steps instructions (programs that park in an
    infinite loop simply exhaust their steps).
    """

    def __init__(self, rom: list[str], ram: Optional[dict[int, int]] = None):
        self.rom = rom
        self.ram = [0] * RAM_SIZE
        for address, value in (ram or {}).items():
            self.ram[address] = value & WORD_MASK
        self.a = 0
        self.d = 0
        self.pc = 0
        self.steps = 0

    def signed(self, address: int) -> int:
        return to_signed(self.ram[address])

    def step(self) -> None:
        word = self.rom[self.pc]
        if word[0] == "0":
            self.a = int(word, 2)
            self.pc += 1
            return

        dest, comp, jump = decode_compute(word)
        a, d = self.a, self.d
        m = self.ram[a] if a < RAM_SIZE else 0
        value = self._alu(comp, d, a, m) & WORD_MASK

        if "M" in dest:
            self.ram[a] = value
        if "A" in dest:
            self.a = value
        if "D" in dest:
            self.d = value

        result = to_signed(value)
        taken = {
            "": False,
            "JGT": result > 0,
            "JEQ": result == 0,
            "JGE": result >= 0,
            "JLT": result < 0,
            "JNE": result != 0,
            "JLE": result <= 0,
            "JMP": True,
        }[jump]
        self.pc = a if taken else self.pc + 1

    @staticmethod
    def _alu(comp: str, d: int, a: int, m: int) -> int:
        second = m if "M" in comp else a
        expression = comp.replace("M", "A")
        return {
            "0": 0,
            "1": 1,
            "-1": -1,
            "D": d,
            "A": second,
            "!D": ~d,
            "!A": ~second,
            "-D": -d,
            "-A": -second,
            "D+1": d + 1,
            "A+1": second + 1,
            "D-1": d - 1,
            "A-1": second - 1,
            "D+A": d + second,
            "D-A": d - second,
            "A-D": second - d,
            "D&A": d & second,
            "D|A": d | second,
        }[expression]

    def run(self, max_steps: int = 100_000) -> "HackMachine":
        while self.pc < len(self.rom) and self.steps < max_steps:
            self.step()
            self.steps += 1
        return self


# ═══════════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
def hack_machine():
    """
    Fixture: assemble Hack assembly and run it.

    Usage:
        machine = hack_machine("@2\\nD=A\\n@0\\nM=D", ram={})
    """
    def _run(source: str, ram: Optional[dict[int, int]] = None, max_steps: int = 100_000):
        code = Assembler().assemble_string(source)
        return HackMachine(code, ram).run(max_steps)
    return _run


@pytest.fixture
def run_vm():
    """
    Fixture: translate VM source (unit "Test"), assemble, and run it.

    Usage:
        machine = run_vm("push constant 7", ram={0: 256})
    """
    def _run(
        source: str,
        ram: Optional[dict[int, int]] = None,
        max_steps: int = 100_000,
        config: Optional[TranslatorConfig] = None,
    ):
        lines = VMTranslator(config).translate_string(source, unit="Test")
        code = Assembler().assemble_string("\n".join(lines))
        return HackMachine(code, ram).run(max_steps)
    return _run


@pytest.fixture
def stack_ram() -> dict[int, int]:
    """Fixture: RAM with SP and the segment base registers initialised."""
    return {0: 256, 1: 300, 2: 400, 3: 3000, 4: 3010}
