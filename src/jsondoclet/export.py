"""Write SchemaDocuments to disk.

Two layouts are supported:

- ``export_document``: one JSON file holding the whole document.
- ``export_split``: one ``<Name>.json`` file per definition, placed in a
  directory per package (``com/example/Point.json``), each a standalone
  schema whose references point at sibling files. A top-level
  ``schema.json`` holds the root, and every directory gets an
  ``index.json`` listing its files and subdirectories, headed by the
  package description when the package is documented.
"""

from __future__ import annotations

import json
import logging
import posixpath
from pathlib import Path, PurePosixPath
from typing import Any

from jsondoclet.assembler import SchemaDocument

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "index.json"
ROOT_FILE_NAME = "schema.json"


def export_document(
    document: SchemaDocument,
    output_path: Path | str,
    pretty: bool = False,
) -> Path:
    """Write *document* to a single JSON file.

    Args:
        document: Document to write.
        output_path: Target file. Parent directories are created as needed.
        pretty: Indent the output.

    Returns:
        The written path.

    Example:
        >>> export_document(document, Path("build/schema.json"), pretty=True)
        PosixPath('build/schema.json')
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(document.to_json(pretty=pretty), encoding="utf-8")
    logger.debug("Wrote schema document to %s", path)
    return path


def export_split(
    document: SchemaDocument,
    output_dir: Path | str,
    pretty: bool = False,
) -> list[Path]:
    """Write one file per definition under per-package directories.

    Args:
        document: Document to write.
        output_dir: Root output directory. Created as needed.
        pretty: Indent the output.

    Returns:
        Written paths: definition files, ``schema.json``, then the
        ``index.json`` files in directory order.
    """
    root_dir = Path(output_dir)
    locations = {
        name: _definition_location(name, document.qualified_names.get(name, name))
        for name in document.definitions
    }
    indexes: dict[PurePosixPath, dict[str, list[dict[str, str]]]] = {}
    written: list[Path] = []

    for name, fragment in document.definitions.items():
        location = locations[name]
        schema = {"$schema": document.dialect.meta_schema}
        schema.update(_rewrite_refs(fragment, document, locations, location.parent))
        written.append(_write_json(root_dir / location, schema, pretty))
        _register_file(
            indexes,
            location.parent,
            {
                "file": location.name,
                "name": name,
                "qualifiedName": document.qualified_names.get(name, name),
                "kind": document.kinds.get(name, "definition"),
            },
        )

    root = _rewrite_refs(document.root, document, locations, PurePosixPath("."))
    written.append(_write_json(root_dir / ROOT_FILE_NAME, root, pretty))
    _register_file(
        indexes,
        PurePosixPath("."),
        {
            "file": ROOT_FILE_NAME,
            "name": str(document.root.get("title", "schema")),
            "qualifiedName": "",
            "kind": "document",
        },
    )

    for directory in sorted(indexes, key=lambda path: path.parts):
        index: dict[str, Any] = dict(indexes[directory])
        description = document.packages.get(".".join(directory.parts))
        if description:
            index = {"description": description, **index}
        written.append(_write_json(root_dir / directory / INDEX_FILE_NAME, index, pretty))

    logger.info("Exported %d definitions to %s", len(document.definitions), root_dir)
    return written


def _definition_location(name: str, qualified_name: str) -> PurePosixPath:
    package = qualified_name.rsplit(".", 1)[0] if "." in qualified_name else ""
    directory = PurePosixPath(*package.split(".")) if package else PurePosixPath(".")
    return directory / f"{name}.json"


def _register_file(
    indexes: dict[PurePosixPath, dict[str, list[dict[str, str]]]],
    directory: PurePosixPath,
    entry: dict[str, str],
) -> None:
    index = indexes.setdefault(directory, {"files": [], "subdirectories": []})
    if entry not in index["files"]:
        index["files"].append(entry)

    # Make every ancestor list the directory leading here
    current = directory
    while current.parts:
        parent = current.parent
        parent_index = indexes.setdefault(parent, {"files": [], "subdirectories": []})
        subdirectory = {"name": current.name, "path": current.name}
        if subdirectory not in parent_index["subdirectories"]:
            parent_index["subdirectories"].append(subdirectory)
        current = parent


def _rewrite_refs(
    value: Any,
    document: SchemaDocument,
    locations: dict[str, PurePosixPath],
    base: PurePosixPath,
) -> Any:
    prefix = document.dialect.ref_prefix
    if isinstance(value, dict):
        rewritten: dict[str, Any] = {}
        for key, item in value.items():
            if key == "$ref" and isinstance(item, str) and item.startswith(prefix):
                target = locations[item[len(prefix) :]]
                rewritten[key] = posixpath.relpath(str(target), str(base))
            else:
                rewritten[key] = _rewrite_refs(item, document, locations, base)
        return rewritten
    if isinstance(value, list):
        return [_rewrite_refs(item, document, locations, base) for item in value]
    return value


def _write_json(path: Path, payload: Any, pretty: bool) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if pretty:
        text = json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    else:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
    path.write_text(text, encoding="utf-8")
    return path
