"""
Hack SDK - Translator Configuration
===================================

Settings for the VM translator. Configuration can come from:
- Default values (defined here)
- Environment variables (TranslatorConfig.from_env)
- Command-line options (the hackvm CLI overrides both)

Memory map assumed by the defaults:

| Address | Use                                  |
|---------|--------------------------------------|
| 0..4    | SP, LCL, ARG, THIS, THAT             |
| 5..12   | temp segment                         |
| 13, 14  | scratch registers used by 'return'   |
| 16..    | assembler variables and static slots |
| 256..   | stack                                |

validate() rejects settings that would place the temp window or the stack
on top of the registers above.
"""

from dataclasses import dataclass
import os

from hack_sdk.errors import ConfigError


# First RAM address after SP, LCL, ARG, THIS, THAT
TEMP_WINDOW_START = 5

# R13, the first scratch register; the temp window must end before it
SCRATCH_REGISTER_START = 13

# Lowest and highest stack base: past R15, and still loadable by "@value"
MIN_STACK_BASE = 16
MAX_STACK_BASE = 0x7FFF


def stack_base_in_range(value: int) -> bool:
    """True if value can be used as the initial stack pointer."""
    return MIN_STACK_BASE <= value <= MAX_STACK_BASE


@dataclass
class TranslatorConfig:
    """
    Configuration for the VM-to-Hack code generator.

    Attributes:
        entry_point: Function whose declaration emits the bootstrap sequence
                     instead of a label (default: "Sys.init")
        stack_base: Initial stack pointer set by the bootstrap (default: 256)
        temp_base: First RAM address of the temp segment (default: 5)
        temp_size: Number of temp slots (default: 8, addresses 5..12)
        annotate: Prefix each lowered command with a "// <command>" comment
    """

    entry_point: str = "Sys.init"
    stack_base: int = 256
    temp_base: int = 5
    temp_size: int = 8
    annotate: bool = False

    def __post_init__(self) -> None:
        """Validate parameters after initialization."""
        self.validate()

    def validate(self) -> None:
        """
        Check the memory layout.

        Fields can be changed after construction (the CLI does this), so the
        code generator calls validate() again before using a config.

        Raises:
            ConfigError: If the stack base or the temp window overlaps
                         reserved RAM
        """
        if not stack_base_in_range(self.stack_base):
            raise ConfigError(
                f"stack base {self.stack_base} out of range "
                f"({MIN_STACK_BASE}..{MAX_STACK_BASE})"
            )

        temp_end = self.temp_base + self.temp_size
        if (
            self.temp_base < TEMP_WINDOW_START
            or self.temp_size < 0
            or temp_end > SCRATCH_REGISTER_START
        ):
            raise ConfigError(
                f"temp window {self.temp_base}..{temp_end - 1} overlaps reserved "
                f"registers",
                hint=f"the temp segment must fit in "
                     f"{TEMP_WINDOW_START}..{SCRATCH_REGISTER_START - 1}",
            )

    @classmethod
    def from_env(cls) -> "TranslatorConfig":
        """
        Create TranslatorConfig from environment variables.

        Environment variables (all optional):
            HACK_VM_ENTRY_POINT: Entry-point function name
            HACK_VM_STACK_BASE: Initial stack pointer (integer, 16..32767)
            HACK_VM_ANNOTATE: "1"/"true"/"yes" to emit comment lines

        Returns:
            TranslatorConfig with values from environment variables
        """
        config = cls()

        if entry_point := os.environ.get("HACK_VM_ENTRY_POINT"):
            config.entry_point = entry_point

        if stack_base := os.environ.get("HACK_VM_STACK_BASE"):
            try:
                value = int(stack_base)
            except ValueError:
                value = None  # Ignore invalid values
            if value is not None and stack_base_in_range(value):
                config.stack_base = value

        if annotate := os.environ.get("HACK_VM_ANNOTATE"):
            config.annotate = annotate.strip().lower() in ("1", "true", "yes", "on")

        return config
