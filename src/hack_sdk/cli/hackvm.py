"""
hackvm - VM Translator Command-Line Interface
=============================================

Translates VM files, or directories of VM files, into one Hack assembly
program.

Usage Examples
--------------
Single file:
    $ hackvm SimpleAdd.vm

Whole program directory (writes FibonacciElement/FibonacciElement.asm):
    $ hackvm FibonacciElement/

Several files into one output:
    $ hackvm Sys.vm Main.vm -o Program.asm

Different entry point and stack base:
    $ hackvm --entry-point Main.main --stack-base 300 Main.vm

Settings not given on the command line fall back to HACK_VM_ENTRY_POINT,
HACK_VM_STACK_BASE and HACK_VM_ANNOTATE.
"""

from pathlib import Path
from typing import Optional

import click

from hack_sdk import __version__
from hack_sdk.config import MAX_STACK_BASE, MIN_STACK_BASE, TranslatorConfig
from hack_sdk.vm import VMTranslator
from hack_sdk.cli.errors import handle_cli_exception, setup_logging


def default_output(first_input: Path) -> Path:
    """<dir>/<dirname>.asm for a directory, input.asm for a file."""
    if first_input.is_dir():
        resolved = first_input.resolve()
        return first_input / f"{resolved.name}.asm"
    return first_input.with_suffix(".asm")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "inputs",
    nargs=-1,
    required=True,
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .asm file (default: derived from the first input)",
)
@click.option(
    "--entry-point",
    default=None,
    help="Function that starts the program (default: Sys.init)",
)
@click.option(
    "--stack-base",
    type=click.IntRange(MIN_STACK_BASE, MAX_STACK_BASE),
    default=None,
    help="Initial stack pointer set by the bootstrap (default: 256)",
)
@click.option(
    "--annotate/--no-annotate",
    default=None,
    help="Emit a '// <command>' comment before each lowered command",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackvm")
def main(
    inputs: tuple[Path, ...],
    output: Optional[Path],
    entry_point: Optional[str],
    stack_base: Optional[int],
    annotate: Optional[bool],
    verbose: bool,
) -> None:
    """
    Translate VM code into Hack assembly.

    INPUTS are .vm files and/or directories containing .vm files. All units
    are translated into a single assembly program.

    \b
    Examples:
        hackvm StackTest.vm            # Outputs StackTest.asm
        hackvm FibonacciElement/       # Outputs FibonacciElement/FibonacciElement.asm
        hackvm Sys.vm Main.vm -o a.asm # Specify output file
    """
    setup_logging(verbose)

    config = TranslatorConfig.from_env()
    if entry_point is not None:
        config.entry_point = entry_point
    if stack_base is not None:
        config.stack_base = stack_base
    if annotate is not None:
        config.annotate = annotate

    output_file = output if output is not None else default_output(inputs[0])

    try:
        translator = VMTranslator(config)
        sources = translator.collect_sources(inputs)
        if verbose:
            click.echo(f"Translating {len(sources)} file(s), entry point {config.entry_point}")

        translator.reset()
        for source in sources:
            if verbose:
                click.echo(f"  {source}")
            translator.translate_file(source)

        translator.write_asm(output_file)
        if verbose:
            click.echo(f"Wrote {len(translator.get_output())} lines to {output_file}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
