"""
Console output for agdex commands.

Status lines, provider tables and host file size reports share one Rich
console so tests can capture everything through the CLI runner.
"""

from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def print_table(
    headers: list[str],
    rows: list[list[Any]],
    title: str | None = None,
) -> None:
    """Print a table."""
    table = Table(title=title)

    for header in headers:
        table.add_column(header)

    for row in rows:
        table.add_row(*[str(cell) for cell in row])

    console.print(table)


def format_size(num_bytes: int) -> str:
    """Human readable size: ``512 B``, ``1.5 KB``, ``2.0 MB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    kb = num_bytes / 1024
    if kb < 1024:
        return f"{kb:.1f} KB"
    return f"{kb / 1024:.1f} MB"


def print_file_written(target_file: str, is_new_file: bool, size_before: int, size_after: int) -> None:
    """Report a created or updated host file with its size change."""
    if is_new_file:
        print_success(f"Created [bold]{target_file}[/bold] ({format_size(size_after)})")
    else:
        sizes = f"{format_size(size_before)} → {format_size(size_after)}"
        print_success(f"Updated [bold]{target_file}[/bold] ({sizes})")
