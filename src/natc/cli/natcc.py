"""
natcc - natc Compiler Command-Line Interface
============================================

Compiles one or more natc source files (.nc) into a single HD6303
assembly file.

Usage Examples
--------------
Basic compilation:
    $ natcc calc.nc

With output file:
    $ natcc calc.nc -o calc.asm

Several files, one program:
    $ natcc decls.nc main.nc -o prog.asm

Print the AST instead of assembly:
    $ natcc --ast calc.nc

Verbose mode:
    $ natcc -v calc.nc
"""

import logging
from pathlib import Path
from typing import Optional

import click

from natc import __version__
from natc.cli.errors import handle_cli_exception
from natc.compiler import Compiler, CompilerOptions
from natc.compiler.ast import ASTPrinter
from natc.compiler.expression import DEFAULT_MAX_DEPTH, MAX_EXPRESSION_DEPTH


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "sources",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output assembly file (default: first source with .asm suffix)",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print AST and exit (for debugging)",
)
@click.option(
    "--max-depth",
    type=click.IntRange(min=1, max=MAX_EXPRESSION_DEPTH),
    default=DEFAULT_MAX_DEPTH,
    show_default=True,
    help="Maximum expression depth (splits plus parentheses)",
)
@click.option(
    "--no-comments",
    is_flag=True,
    help="Do not copy source lines into the assembly as comments",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="natcc")
def main(
    sources: tuple[Path, ...],
    output: Optional[Path],
    ast: bool,
    max_depth: int,
    no_comments: bool,
    verbose: bool,
) -> None:
    """
    Compile natc source code to HD6303 assembly.

    SOURCES are one or more .nc files, compiled in order as one program.

    \b
    Examples:
        natcc calc.nc                # Outputs calc.asm
        natcc calc.nc -o out.asm     # Specify output file
        natcc --ast calc.nc          # Dump the AST
    """
    setup_logging(verbose)

    if output is None:
        output = sources[0].with_suffix(".asm")

    options = CompilerOptions(
        output_comments=not no_comments,
        max_expression_depth=max_depth,
    )

    try:
        if verbose:
            click.echo(f"Compiling {', '.join(str(s) for s in sources)}...")

        result = Compiler(options).compile_files(sources)

        if ast:
            click.echo(ASTPrinter().print(result.ast))
            return

        output.write_text(result.assembly)

        if verbose:
            click.echo(f"Tokenized: {result.token_count} tokens")
            click.echo(f"Parsed: {result.statement_count} statements")
            click.echo(f"Wrote {len(result.assembly)} bytes to {output}")

        click.echo(f"Compiled {', '.join(str(s) for s in sources)} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
