"""Output helpers shared by CLI commands."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗ Error:[/red] {escape(message)}")


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich.

    Args:
        verbose: Log debug messages instead of warnings only.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
