"""
VM Translator - Main Interface
==============================

The VMTranslator class drives the VM-to-Hack pipeline: it parses each source
unit, checks the entry-point convention, lowers the commands with a single
shared GeneratorState, and concatenates the results into one assembly
program.

Example Usage
-------------
>>> from hack_sdk.vm import VMTranslator
>>> vm = VMTranslator()
>>> vm.translate_paths(["Sys.vm", "Main.vm"])
>>> vm.write_asm("Program.asm")

Directories expand to their *.vm files in name order, except that the unit
holding the entry point (Sys.vm for Sys.init) is moved to the front.

Command-Line Usage
------------------
    $ hackvm FibonacciElement/ -o FibonacciElement.asm
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from hack_sdk.config import TranslatorConfig
from hack_sdk.errors import EntryPointError
from hack_sdk.vm.codegen import CodeGenerator, GeneratorState
from hack_sdk.vm.parser import CommandType, VMCommand, parse_source

logger = logging.getLogger(__name__)


VM_SUFFIX = ".vm"


class VMTranslator:
    """
    Translates one or more VM units into a single Hack assembly program.

    Units translated through the same instance share their label counters,
    so generated labels stay unique across the whole program. Call reset()
    (translate_paths() does this itself) to start a new program.
    """

    def __init__(self, config: Optional[TranslatorConfig] = None):
        self._config = config or TranslatorConfig()
        self._codegen = CodeGenerator(self._config)
        self._state = GeneratorState()
        self._output: list[str] = []
        self._functions_seen = False
        self._entry_seen = False
        self._units: list[str] = []

    @property
    def config(self) -> TranslatorConfig:
        return self._config

    def reset(self) -> None:
        """Forget all translated units and restart the counters."""
        self._state = GeneratorState()
        self._output = []
        self._functions_seen = False
        self._entry_seen = False
        self._units = []

    # =========================================================================
    # Translation Methods
    # =========================================================================

    def translate_string(
        self,
        source: str,
        unit: str = "Main",
        filename: str = "<input>",
    ) -> list[str]:
        """
        Translate one unit of VM source and append it to the program.

        Args:
            source: VM source code
            unit: Unit name, used to name static variables ("<unit>.<i>")
            filename: Virtual filename for error messages

        Returns:
            The assembly lines generated for this unit

        Raises:
            TranslatorError: If parsing or lowering fails. The program
                             output is left as it was before this call.
        """
        commands = parse_source(source, filename)
        logger.debug(f"Parsed {len(commands)} commands from {filename}")

        functions_seen, entry_seen = self._check_entry_point(commands)
        lines, state = self._codegen.generate(commands, self._state, unit)

        self._functions_seen, self._entry_seen = functions_seen, entry_seen
        self._state = state
        self._output.extend(lines)
        self._units.append(unit)

        logger.debug(
            f"Unit '{unit}': {len(lines)} lines "
            f"({state.comparisons} comparisons, {state.calls} calls so far)"
        )
        return lines

    def translate_file(self, filepath: str | Path) -> list[str]:
        """
        Translate a single .vm file and append it to the program.

        Raises:
            TranslatorError: If translation fails
            FileNotFoundError: If the file does not exist
        """
        filepath = Path(filepath)
        logger.debug(f"Translating {filepath}")
        return self.translate_string(filepath.read_text(), filepath.stem, str(filepath))

    def translate_paths(self, paths: Iterable[str | Path]) -> list[str]:
        """
        Translate files and directories into one fresh program.

        Args:
            paths: .vm files and/or directories containing .vm files

        Returns:
            All assembly lines of the program

        Raises:
            TranslatorError: If any unit fails to translate
            FileNotFoundError: If a path does not exist or a directory holds
                               no .vm files
        """
        self.reset()
        for filepath in self.collect_sources(paths):
            self.translate_file(filepath)
        return self.get_output()

    def collect_sources(self, paths: Iterable[str | Path]) -> list[Path]:
        """Expand directories to their .vm files, entry unit first."""
        files: list[Path] = []
        for path in map(Path, paths):
            if path.is_dir():
                found = sorted(path.glob(f"*{VM_SUFFIX}"))
                if not found:
                    raise FileNotFoundError(f"no {VM_SUFFIX} files in {path}")
                files.extend(self._entry_unit_first(found))
            elif path.is_file():
                files.append(path)
            else:
                raise FileNotFoundError(f"{path} does not exist")
        return files

    def _entry_unit_first(self, files: list[Path]) -> list[Path]:
        entry_unit = self._config.entry_point.split(".", 1)[0]
        return sorted(files, key=lambda f: f.stem != entry_unit)

    def _check_entry_point(self, commands: list[VMCommand]) -> tuple[bool, bool]:
        """
        The entry-point function may be declared once, before any other
        function, and is never the target of a call. Returns the updated
        (functions_seen, entry_seen) flags.
        """
        functions_seen, entry_seen = self._functions_seen, self._entry_seen
        for command in commands:
            if (
                command.kind is CommandType.CALL
                and command.name == self._config.entry_point
            ):
                raise EntryPointError(
                    f"cannot call entry point '{command.name}'",
                    command.location, source_line=command.source,
                    hint="the entry point has no label; it runs once at startup",
                )
            if command.kind is not CommandType.FUNCTION:
                continue
            if command.name == self._config.entry_point:
                if entry_seen:
                    raise EntryPointError(
                        f"entry point '{command.name}' declared more than once",
                        command.location, source_line=command.source,
                    )
                if functions_seen:
                    raise EntryPointError(
                        f"entry point '{command.name}' must be the first function",
                        command.location, source_line=command.source,
                        hint="list the unit that declares it first",
                    )
                entry_seen = True
            functions_seen = True
        return functions_seen, entry_seen

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_output(self) -> list[str]:
        """Return all assembly lines translated since the last reset()."""
        return list(self._output)

    def get_state(self) -> GeneratorState:
        return self._state

    def get_units(self) -> list[str]:
        return list(self._units)

    def write_asm(self, filepath: str | Path) -> None:
        """Write the assembly program, one line per instruction."""
        text = "".join(f"{line}\n" for line in self._output)
        Path(filepath).write_text(text)
        logger.debug(f"Wrote {len(self._output)} lines to {filepath}")


# =============================================================================
# Convenience Functions
# =============================================================================

def translate(
    source: str,
    unit: str = "Main",
    config: Optional[TranslatorConfig] = None,
) -> list[str]:
    """
    Convenience function to translate a single VM unit.

    Raises:
        TranslatorError: If translation fails
    """
    return VMTranslator(config).translate_string(source, unit)
