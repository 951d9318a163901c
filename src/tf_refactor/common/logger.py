"""Logging and console helpers built on rich."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

console = Console()
err_console = Console(stderr=True)


def setup_logging(level: str = "WARNING", verbose: bool = False) -> None:
    """Configure the root logger with a rich handler.

    Called once from the CLI entry point. ``LOG_LEVEL`` overrides ``level``
    and ``verbose`` forces DEBUG.
    """
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", level).upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    handler = RichHandler(
        console=err_console,
        show_time=False,
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)


def progress(message: str) -> None:
    console.print(message)


def success(message: str) -> None:
    console.print(f"[green]✔[/green] {message}")


def warning(message: str) -> None:
    err_console.print(f"[yellow]⚠[/yellow] {message}")


def error(message: str) -> None:
    err_console.print(f"[red]✖[/red] {message}")
