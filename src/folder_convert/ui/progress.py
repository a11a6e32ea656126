"""Rich progress display for folder-convert."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

# Global console instance for consistent output
console = Console()

_TASK_DESCRIPTION_FORMAT = "[bold blue]{task.description}"


def create_batch_progress() -> Progress:
    """Create Rich progress display for a conversion run.

    Displays: spinner, description, progress bar, percentage,
    completed/total files and elapsed time.

    Returns:
        Configured Progress instance for batch mode.
    """
    return Progress(
        SpinnerColumn(),
        TextColumn(_TASK_DESCRIPTION_FORMAT),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )


def print_success(message: str) -> None:
    """Print a success message.

    Args:
        message: The message to print.
    """
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message.

    Args:
        message: The message to print.
    """
    console.print(f"[red]✗[/red] {message}", style="red")


def print_warning(message: str) -> None:
    """Print a warning message.

    Args:
        message: The message to print.
    """
    console.print(f"[yellow]![/yellow] {message}", style="yellow")


def print_info(message: str) -> None:
    """Print an info message.

    Args:
        message: The message to print.
    """
    console.print(f"[blue]→[/blue] {message}")
