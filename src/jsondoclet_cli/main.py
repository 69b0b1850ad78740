"""CLI entry point for json-doclet."""

from __future__ import annotations

import click
import rich_click as rclick

from jsondoclet_cli import __version__
from jsondoclet_cli.commands.generate import generate
from jsondoclet_cli.commands.validate import validate
from jsondoclet_cli.output import set_no_color


@click.group(cls=rclick.RichGroup)
@click.version_option(version=__version__, prog_name="jsondoclet")
@click.option("--no-color", is_flag=True, default=False, help="Disable colored output.")
def cli(no_color: bool) -> None:
    """json-doclet - JSON Schema from documented types.

    Turn a documented type model into a deduplicated, cycle-safe JSON Schema.

    Getting started:

    - jsondoclet validate types.yaml
    - jsondoclet generate types.yaml
    - jsondoclet generate types.yaml -d build/schemas
    """
    if no_color:
        set_no_color(True)


cli.add_command(generate)
cli.add_command(validate)


if __name__ == "__main__":
    cli()
