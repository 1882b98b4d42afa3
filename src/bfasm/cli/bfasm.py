"""
bfasm - Brainfuck Compiler Command-Line Interface
=================================================

Usage Examples
--------------
Basic compilation:
    $ bfasm hello.bf                # writes hello.asm

With output file:
    $ bfasm hello.bf -o out.asm

Print the assembly:
    $ bfasm hello.bf -o -

Bigger tape, annotated output:
    $ bfasm -t 65536 -c hello.bf

Full pipeline to an executable:
    $ bfasm hello.bf && nasm -f win64 hello.asm -o hello.obj && gcc hello.obj -o hello.exe
"""

import logging
from pathlib import Path
from typing import Optional

import click

from bfasm import __version__
from bfasm.cli.errors import handle_cli_exception
from bfasm.codegen import DEFAULT_ENTRY_SYMBOL, DEFAULT_TAPE_SIZE
from bfasm.compiler import BrainfuckCompiler, CompilerOptions, default_output_path


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
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, allow_dash=True, path_type=Path),
    help="Output assembly file (default: input.asm, '-' for stdout)",
)
@click.option(
    "-t", "--tape-size",
    type=int,
    default=DEFAULT_TAPE_SIZE,
    show_default=True,
    help="Tape size in bytes",
)
@click.option(
    "--entry",
    default=DEFAULT_ENTRY_SYMBOL,
    show_default=True,
    help="Name of the exported entry point",
)
@click.option(
    "-c", "--comments",
    is_flag=True,
    help="Annotate the assembly with the Brainfuck source",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="bfasm")
def main(
    input_file: Path,
    output: Optional[Path],
    tape_size: int,
    entry: str,
    comments: bool,
    verbose: bool,
) -> None:
    """
    Compile a Brainfuck program to x86-64 Windows assembly.

    INPUT_FILE is the Brainfuck source (.bf) to compile. Characters
    other than > < + - . , [ ] are treated as comments.

    The output is NASM (Intel syntax) source that links against the C
    runtime's putchar and _getch.

    \b
    Examples:
        bfasm hello.bf                 # Outputs hello.asm
        bfasm hello.bf -o out.asm      # Specify output file
        bfasm hello.bf -o -            # Print to stdout
        bfasm -t 65536 hello.bf        # Larger tape
    """
    setup_logging(verbose)

    if output is None:
        output = default_output_path(input_file)
    to_stdout = str(output) == "-"

    try:
        options = CompilerOptions(
            tape_size=tape_size,
            entry_symbol=entry,
            output_comments=comments,
        )

        if verbose:
            click.echo(f"Compiling {input_file}...", err=to_stdout)
            click.echo(f"Tape size: {tape_size} bytes", err=to_stdout)

        compiler = BrainfuckCompiler(options)
        result = compiler.compile_file(input_file)

        if to_stdout:
            click.echo(result.assembly, nl=False)
            return

        output.write_text(result.assembly, encoding="utf-8")

        if verbose:
            click.echo(f"Wrote {len(result.assembly)} bytes to {output}")
            click.echo(
                f"Instructions: {result.instruction_count}, loops: {result.loop_count}"
            )

        click.echo(f"Compiled {input_file} -> {output}")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
