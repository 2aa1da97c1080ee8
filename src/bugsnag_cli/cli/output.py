"""Console output helpers for the command surface."""

import logging
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from ..core.errors import format_error

# Rich consoles for output
console = Console(soft_wrap=True, emoji=False)
err_console = Console(stderr=True, soft_wrap=True, emoji=False)


def configure_logging(debug: bool) -> None:
    """Route log records to stderr; debug mode lowers the level to DEBUG."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, markup=False)],
        force=True,
    )


def success(message: str) -> None:
    console.print(Text.assemble("\n", ("✓", "green"), f" {message}"))


def warn(message: str) -> None:
    err_console.print(Text(message, style="yellow"))


def fail(message: str) -> None:
    err_console.print(Text.assemble(("✗", "red"), f" {message}"))


def failed(message: str) -> NoReturn:
    """Print a failure and exit with status 1."""
    fail(message)
    raise typer.Exit(1)


def exit_with_error(error: BaseException) -> NoReturn:
    """Render an error on stderr and exit with status 1."""
    err_console.print(format_error(error), markup=False, highlight=False)
    raise typer.Exit(1)
