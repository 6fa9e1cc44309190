"""
hackasm - Hack Assembler Command-Line Interface
===============================================

Assembles a Hack assembly file into a .hack file of 16-bit binary words.

Usage Examples
--------------
Basic assembly:
    $ hackasm Pong.asm

With output file:
    $ hackasm Pong.asm -o build/Pong.hack

Generate all output files:
    $ hackasm Pong.asm -o Pong.hack -l Pong.lst -s Pong.sym

Verbose mode:
    $ hackasm -v Pong.asm
"""

from pathlib import Path
from typing import Optional

import click

from hack_sdk import __version__
from hack_sdk.assembler import Assembler
from hack_sdk.cli.errors import handle_cli_exception, setup_logging


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .hack file (default: input.hack)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file (labels and variables)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    listing: Optional[Path],
    symbols: Optional[Path],
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly into binary machine code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        hackasm Max.asm               # Outputs Max.hack
        hackasm Max.asm -o out.hack   # Specify output file
        hackasm Max.asm -s Max.sym    # Also dump the symbol table
    """
    setup_logging(verbose)
    output_file = output if output is not None else input_file.with_suffix(".hack")

    asm = Assembler()

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        code = asm.assemble_file(input_file)
        asm.write_hack(output_file)
        if verbose:
            click.echo(f"Wrote {len(code)} instructions to {output_file}")

        if listing:
            asm.write_listing(listing)
            if verbose:
                click.echo(f"Wrote listing to {listing}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
