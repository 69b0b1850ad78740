"""jsondoclet generate command - Write JSON Schema for a type model."""

from __future__ import annotations

import click

from jsondoclet_cli.errors import EXIT_SYSTEM_ERROR, EXIT_USER_ERROR, CLIError
from jsondoclet_cli.loader import load_type_model
from jsondoclet_cli.output import error, info, print_warnings, success

DEFAULT_OUTPUT = "./build/json-doclet/schema.json"


@click.command()
@click.argument("model_path", metavar="MODEL", type=click.Path())
@click.option(
    "-r",
    "--root",
    "roots",
    multiple=True,
    help="Root type name (repeatable) [default: model roots, else all public types]",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=DEFAULT_OUTPUT,
    help=f"Output file [default: {DEFAULT_OUTPUT}]",
)
@click.option(
    "-d",
    "--directory",
    "output_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Write one file per type into this directory instead of a single file.",
)
@click.option("--pretty", is_flag=True, default=False, help="Pretty print JSON output.")
@click.option(
    "--include-private",
    is_flag=True,
    default=False,
    help="Include private and package-private members.",
)
@click.option(
    "--dialect",
    type=click.Choice(["2020-12", "draft-07"]),
    default=None,
    help="JSON Schema dialect [default: 2020-12]",
)
@click.option("--id", "schema_id", default=None, help="$id of the generated document.")
@click.option("--title", default=None, help="Title of the generated document.")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Show debug logging.")
def generate(
    model_path: str,
    roots: tuple[str, ...],
    output_path: str,
    output_dir: str | None,
    pretty: bool,
    include_private: bool,
    dialect: str | None,
    schema_id: str | None,
    title: str | None,
    verbose: bool,
) -> None:
    """Generate JSON Schema from a type model.

    Translates the root types, and every type they reach, into one
    JSON Schema document. Types that cannot be represented are replaced by
    permissive schemas and reported as warnings.

    Settings are taken from the command line, then JSONDOCLET_* environment
    variables, then the `settings:` block of the model file.

    Examples:

        jsondoclet generate types.yaml

        jsondoclet generate types.yaml --root com.example.Order --pretty

        jsondoclet generate types.yaml -d build/schemas --dialect draft-07
    """
    # Import here to avoid heavy imports at CLI startup
    from pydantic import ValidationError as PydanticValidationError

    from jsondoclet import (
        DocumentAssembler,
        GeneratorSettings,
        JsonDocletError,
        export_document,
        export_split,
    )
    from jsondoclet.log import configure_logging
    from jsondoclet_cli.errors import format_pydantic_error

    configure_logging(verbose=verbose)
    model = load_type_model(model_path)

    try:
        settings = GeneratorSettings.from_env(model.settings).merged(
            dialect=dialect,
            schema_id=schema_id,
            title=title,
            include_private=True if include_private else None,
            pretty=True if pretty else None,
        )
    except PydanticValidationError as e:
        raise CLIError(f"Invalid settings:\n{format_pydantic_error(e)}") from None
    except ValueError as e:
        raise CLIError(f"Invalid settings: {e}") from None

    try:
        document = DocumentAssembler(model, settings).assemble(list(roots) or None)
    except JsonDocletError as e:
        error(f"Schema generation failed: {e}")
        raise SystemExit(EXIT_USER_ERROR) from None

    print_warnings(document.warnings)

    try:
        if output_dir is not None:
            written = export_split(document, output_dir, pretty=settings.pretty)
            success(f"Wrote {len(written)} files to {output_dir}")
        else:
            export_document(document, output_path, pretty=settings.pretty)
            success(f"Schema written to {output_path}")
    except OSError as e:
        error(f"Cannot write schema: {e}")
        raise SystemExit(EXIT_SYSTEM_ERROR) from None

    info(f"{len(document.definitions)} definitions, {len(document.warnings)} warnings")
