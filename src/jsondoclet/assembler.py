"""Document Assembler: one generation run from root types to a SchemaDocument."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog

from jsondoclet.adapter import TypeModelAdapter
from jsondoclet.comments import CommentExtractor
from jsondoclet.descriptors import TypeIdentity
from jsondoclet.errors import JsonDocletError, ModelError
from jsondoclet.registry import SchemaFragment, SchemaRegistry
from jsondoclet.schemas import TypeModel
from jsondoclet.settings import GeneratorSettings, SchemaDialect
from jsondoclet.translator import Translator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SchemaDocument:
    """Result of one generation run.

    Attributes:
        root: Top-level keywords (``$schema``, ``$id``, ``title`` and the
            root ``$ref`` or ``anyOf``).
        definitions: Schema name to fragment, in first-discovery order.
        dialect: Dialect the document is written in.
        warnings: Warnings explaining fallbacks and lossy mappings.
        qualified_names: Schema name to qualified type name.
        kinds: Schema name to type kind.
        packages: Package name to package description.
    """

    root: SchemaFragment
    definitions: dict[str, SchemaFragment]
    dialect: SchemaDialect = SchemaDialect.DRAFT_2020_12
    warnings: tuple[str, ...] = ()
    qualified_names: dict[str, str] = field(default_factory=dict)
    kinds: dict[str, str] = field(default_factory=dict)
    packages: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the document as a JSON-ready dictionary."""
        document = dict(self.root)
        if self.definitions:
            document[self.dialect.definitions_key] = dict(self.definitions)
        return document

    def to_json(self, pretty: bool = False) -> str:
        """Serialize the document. Key order is preserved, so output is stable."""
        if pretty:
            return json.dumps(self.to_dict(), indent=2, ensure_ascii=False) + "\n"
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)


class DocumentAssembler:
    """Build SchemaDocuments from a TypeModel.

    Every ``assemble()`` call constructs its own adapter, registry and
    translator, so repeated runs never share state.

    Args:
        model: Host type model.
        settings: Generator settings. Defaults to the model's settings.

    Example:
        >>> document = DocumentAssembler(model).assemble(["com.example.Point"])
        >>> document.to_dict()["$ref"]
        '#/$defs/Point'
    """

    def __init__(self, model: TypeModel, settings: GeneratorSettings | None = None) -> None:
        self.model = model
        self.settings = settings or model.settings or GeneratorSettings()

    def default_roots(self) -> list[str]:
        """The model's ``roots``, or every exported declaration in source order."""
        if self.model.roots:
            return list(self.model.roots)
        return [
            declaration.name
            for declaration in self.model.types
            if declaration.visibility.is_exported
        ]

    def assemble(self, roots: Sequence[str] | None = None) -> SchemaDocument:
        """Translate *roots* and everything they reach into one document.

        Args:
            roots: Root type names. Defaults to ``default_roots()``.

        Returns:
            The assembled SchemaDocument.

        Raises:
            ModelError: If there are no roots or a root is not declared.
            DuplicateDefinitionError: If two types collide on a schema name.
        """
        names = list(roots) if roots else self.default_roots()
        if not names:
            raise ModelError("No root types to generate a schema for")

        adapter = TypeModelAdapter(self.model, self.settings, CommentExtractor())
        registry = SchemaRegistry(self.settings.dialect)
        translator = Translator(adapter, registry, self.settings)

        identities: list[TypeIdentity] = []
        for name in names:
            identity = adapter.root_identity(name)
            if identity not in identities:
                identities.append(identity)
        references = [translator.translate(identity) for identity in identities]

        unfinished = registry.unfinished()
        if unfinished:
            raise JsonDocletError(
                "Schema generation ended with unfinished definitions",
                internal_details=", ".join(str(identity) for identity in unfinished),
            )

        root: SchemaFragment = {"$schema": self.settings.dialect.meta_schema}
        if self.settings.schema_id:
            root["$id"] = self.settings.schema_id
        if self.settings.title:
            root["title"] = self.settings.title
        if len(references) > 1:
            root["anyOf"] = references
        elif "$ref" in references[0] and not self.settings.dialect.ref_allows_siblings:
            root["allOf"] = references
        else:
            root.update(references[0])

        document = SchemaDocument(
            root=root,
            definitions=registry.definitions(),
            dialect=self.settings.dialect,
            warnings=tuple(translator.warnings),
            qualified_names=registry.qualified_names(),
            kinds=registry.kinds(),
            packages=self._package_descriptions(adapter.extractor),
        )
        logger.info(
            "schema_assembled",
            roots=len(identities),
            definitions=len(document.definitions),
            warnings=len(document.warnings),
        )
        return document

    def _package_descriptions(self, extractor: CommentExtractor) -> dict[str, str]:
        descriptions: dict[str, str] = {}
        for package in self.model.packages:
            description = extractor.extract(package.doc).description
            if description:
                descriptions[package.name] = description
        return descriptions
