"""
funcc - funlang Compiler Command-Line Interface
===============================================

This module implements the command-line interface for the funlang
compiler.

Usage Examples
--------------
Compile to stdout:
    $ funcc main.fn

With output file:
    $ funcc main.fn -o main.s

Inspect intermediate stages:
    $ funcc --tokens main.fn
    $ funcc --ast main.fn
    $ funcc --blob main.fn

Verbose mode (debug logging on stderr):
    $ funcc -v main.fn
"""

import logging
from pathlib import Path
from typing import Optional

import click

from funlang import __version__
from funlang.compiler import Compiler, scan_all, parse_source, generate
from funlang.compiler.instructions import Blob
from funlang.cli.errors import handle_cli_exception


def format_blob(blob: Blob) -> list[str]:
    """Debug dump of a Blob: indexed instructions, then the label table."""
    lines = [f"{index:4d}  {instr!r}" for index, instr in enumerate(blob.instructions)]
    lines.append("labels:")
    lines.extend(f"  {name} -> {index}" for name, index in blob.labels.items())
    return lines


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
    help="Output assembly file (default: stdout)",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream and exit",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--blob",
    is_flag=True,
    help="Print the instruction stream and label table and exit",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging on stderr)",
)
@click.version_option(version=__version__, prog_name="funcc")
def main(
    input_file: Path,
    output: Optional[Path],
    tokens: bool,
    ast: bool,
    blob: bool,
    verbose: bool,
) -> None:
    """
    Compile a funlang source file to an assembly listing.

    INPUT_FILE is the funlang source file to compile.

    \b
    Examples:
        funcc main.fn                # Listing on stdout
        funcc main.fn -o main.s      # Specify output file
        funcc --ast main.fn          # Dump the syntax tree
        funcc -v main.fn             # Verbose output
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    try:
        filename = str(input_file)
        source = input_file.read_text(encoding="utf-8")

        # Debug dumps run only the stages they need
        if tokens:
            for token in scan_all(source, filename):
                click.echo(repr(token))
            return

        if ast:
            from funlang.compiler.ast import ASTPrinter
            click.echo(ASTPrinter().print(parse_source(source, filename)))
            return

        if blob:
            for line in format_blob(generate(parse_source(source, filename))):
                click.echo(line)
            return

        result = Compiler().compile_source(source, filename)

        if output is None:
            click.echo(result.assembly, nl=False)
        else:
            output.write_text(result.assembly, encoding="utf-8")
            if verbose:
                click.echo(f"Compiled {input_file} -> {output}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
