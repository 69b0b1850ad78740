"""json-doclet: JSON Schema generation from documented type models.

This package provides:
- TypeModel: Pydantic schema for the host type model (types.yaml)
- TypeModelAdapter: Normalizes declarations into TypeDescriptors
- CommentExtractor: Parses documentation comments into DocComments
- SchemaRegistry / Translator: Cycle-safe, deduplicated translation
- DocumentAssembler: Builds a SchemaDocument for a set of root types
- export_document / export_split: Write documents to disk
"""

from __future__ import annotations

__version__ = "0.1.0"

from jsondoclet.adapter import TypeModelAdapter, TypeScope
from jsondoclet.assembler import DocumentAssembler, SchemaDocument
from jsondoclet.comments import CommentExtractor, DocComment, parse_doc_comment
from jsondoclet.descriptors import (
    EnumValue,
    MemberDescriptor,
    TypeDescriptor,
    TypeIdentity,
    TypeKind,
)

# Error types
from jsondoclet.errors import (
    DuplicateDefinitionError,
    JsonDocletError,
    MalformedCommentWarning,
    ModelError,
    UnsupportedTypeError,
)
from jsondoclet.export import export_document, export_split
from jsondoclet.registry import SchemaRegistry
from jsondoclet.schemas import (
    AccessorDeclaration,
    DeclarationKind,
    EnumConstantDeclaration,
    FieldDeclaration,
    PackageDeclaration,
    TypeDeclaration,
    TypeModel,
    Visibility,
)
from jsondoclet.settings import GeneratorSettings, SchemaDialect
from jsondoclet.translator import Translator

__all__ = [
    "__version__",
    # Host model
    "TypeModel",
    "TypeDeclaration",
    "FieldDeclaration",
    "AccessorDeclaration",
    "EnumConstantDeclaration",
    "PackageDeclaration",
    "DeclarationKind",
    "Visibility",
    # Engine
    "TypeModelAdapter",
    "TypeScope",
    "CommentExtractor",
    "DocComment",
    "parse_doc_comment",
    "SchemaRegistry",
    "Translator",
    "DocumentAssembler",
    "SchemaDocument",
    # Descriptors
    "TypeIdentity",
    "TypeKind",
    "TypeDescriptor",
    "MemberDescriptor",
    "EnumValue",
    # Settings
    "GeneratorSettings",
    "SchemaDialect",
    # Export
    "export_document",
    "export_split",
    # Errors
    "JsonDocletError",
    "ModelError",
    "UnsupportedTypeError",
    "DuplicateDefinitionError",
    "MalformedCommentWarning",
]
