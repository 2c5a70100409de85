"""
Command line interface for the Pilcrow front end.

    pilcrow program.pil            print the syntax tree
    pilcrow program.pil --tokens   print the raw token stream
    pilcrow program.pil --compile  not implemented, exits with an error

This is the only place that prints errors or sets an exit status.

Author: xwest
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .driver import compile_file, parse_file, tokenize_file
from .errors import PilcrowError
from .lexer import dump_tokens

error_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Debug records in verbose mode, errors only otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def report_error(exc: Exception, filename: str) -> None:
    if isinstance(exc, PilcrowError):
        message = str(exc).rstrip()
    else:
        message = f"Could not read {filename}. {exc.strerror or exc}"
    error_console.print(f"[bold red]error[/bold red] {escape(message)}", soft_wrap=True)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="pilcrow")
@click.argument("filename", type=click.Path(dir_okay=False))
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose mode")
@click.option(
    "--compile",
    "-c",
    "compile_mode",
    is_flag=True,
    help="Build and run program in compile mode",
)
@click.option(
    "--tokens",
    "-t",
    "show_tokens",
    is_flag=True,
    help="Print the token stream instead of the syntax tree",
)
def main(filename: str, verbose: bool, compile_mode: bool, show_tokens: bool) -> None:
    """Parse a Pilcrow FILENAME and print its syntax tree."""
    configure_logging(verbose)

    try:
        if compile_mode:
            compile_file(filename)
        elif show_tokens:
            click.echo(dump_tokens(tokenize_file(filename)))
        else:
            click.echo(parse_file(filename).dump())
    except (PilcrowError, OSError) as exc:
        report_error(exc, filename)
        sys.exit(1)


if __name__ == "__main__":
    main()
