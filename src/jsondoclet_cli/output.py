"""Console output for the jsondoclet commands.

All messages go through one Rich console. Colors follow the NO_COLOR
environment variable and the ``--no-color`` flag. Message text is escaped,
so type expressions such as ``Map<String, List<[T]>>`` print verbatim.
"""

from __future__ import annotations

import os
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape


def create_console(no_color: bool = False) -> Console:
    """Create a console; NO_COLOR in the environment also disables colors."""
    plain = no_color or os.environ.get("NO_COLOR") is not None
    return Console(
        force_terminal=False if plain else None,
        no_color=plain,
        highlight=False,
        emoji=False,
    )


console = create_console()


def set_no_color(no_color: bool) -> None:
    """Replace the shared console, enabling or disabling colors."""
    global console
    console = create_console(no_color=no_color)


def success(message: str) -> None:
    """Print a success message.

    Example:
        >>> success("Schema written to build/json-doclet/schema.json")
        ✓ Schema written to build/json-doclet/schema.json
    """
    console.print(f"[green]✓[/green] {escape(message)}")


def error(message: str) -> None:
    console.print(f"[red]✗[/red] {escape(message)}")


def info(message: str) -> None:
    console.print(escape(message))


def print_warnings(messages: Sequence[str]) -> None:
    """Print run warnings as a counted list.

    Warnings are not wrapped, so each one stays on a single line and can
    be grepped in build logs. Nothing is printed for an empty list.

    Example:
        >>> print_warnings(["Unsupported type '?': unbounded wildcard"])
        ⚠ 1 warning
          • Unsupported type '?': unbounded wildcard
    """
    if not messages:
        return
    noun = "warning" if len(messages) == 1 else "warnings"
    console.print(f"[yellow]⚠ {len(messages)} {noun}[/yellow]")
    for message in messages:
        console.print(f"  [yellow]•[/yellow] {escape(message)}", soft_wrap=True)
