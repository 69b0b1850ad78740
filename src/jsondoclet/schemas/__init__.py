"""Host type model schemas.

- TypeModel: complete model for one generation run (loaded from YAML)
- TypeDeclaration: one documented type
- FieldDeclaration / AccessorDeclaration / EnumConstantDeclaration: members
- PackageDeclaration: package-level documentation
"""

from __future__ import annotations

from jsondoclet.schemas.declarations import (
    AccessorDeclaration,
    DeclarationKind,
    EnumConstantDeclaration,
    FieldDeclaration,
    PackageDeclaration,
    TypeDeclaration,
    Visibility,
)
from jsondoclet.schemas.type_model import TypeModel

__all__: list[str] = [
    "AccessorDeclaration",
    "DeclarationKind",
    "EnumConstantDeclaration",
    "FieldDeclaration",
    "PackageDeclaration",
    "TypeDeclaration",
    "TypeModel",
    "Visibility",
]
