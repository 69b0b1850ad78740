"""jsondoclet validate command - Check a type model file."""

from __future__ import annotations

from collections import Counter

import click

from jsondoclet_cli.errors import EXIT_USER_ERROR
from jsondoclet_cli.loader import load_type_model
from jsondoclet_cli.output import error, info, print_warnings, success


@click.command()
@click.argument("model_path", metavar="MODEL", type=click.Path())
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Fail when a reachable type cannot be represented.",
)
def validate(model_path: str, strict: bool) -> None:
    """Validate a type model file.

    Checks the YAML against the type model schema, resolves the root types
    and every type they reach, and reports the types that would fall back
    to permissive schemas.

    Examples:

        jsondoclet validate types.yaml

        jsondoclet validate types.yaml --strict
    """
    # Import here to avoid heavy imports at CLI startup
    from jsondoclet import DocumentAssembler, JsonDocletError, TypeModelAdapter

    model = load_type_model(model_path)
    assembler = DocumentAssembler(model)
    adapter = TypeModelAdapter(model, assembler.settings)

    try:
        roots = [adapter.root_identity(name) for name in assembler.default_roots()]
    except JsonDocletError as e:
        error(f"Invalid type model in {model_path}: {e}")
        raise SystemExit(EXIT_USER_ERROR) from None

    reachable = adapter.reachable(roots)
    kinds = Counter(declaration.kind.value for declaration in model.types)
    summary = ", ".join(f"{count} {kind}" for kind, count in sorted(kinds.items()))
    info(f"{len(model.types)} declarations ({summary or 'none'})")
    info(f"{len(roots)} roots, {len(reachable)} reachable types")

    print_warnings([str(failure) for failure in adapter.failures.values()])

    if adapter.failures and strict:
        error(f"{len(adapter.failures)} unsupported types")
        raise SystemExit(EXIT_USER_ERROR)
    success("Type model valid")
