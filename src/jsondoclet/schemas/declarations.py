"""Host type declaration models.

These models describe the documented types handed over by the host
documentation tool: classes, interfaces, records, enums and unions, with
their generic parameters, fields, accessors and raw documentation text.
Type references are kept as source-level type expressions
(e.g. ``Map<String, List<Order>>``) and resolved by the adapter.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

QUALIFIED_NAME_PATTERN = r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$"
IDENTIFIER_PATTERN = r"^[A-Za-z_$][\w$]*$"

_TYPE_PARAMETER = re.compile(r"^([A-Za-z_$][\w$]*)(?:\s+extends\s+(.+))?$")


class DeclarationKind(str, Enum):
    """Kind of a declared type."""

    CLASS = "class"
    INTERFACE = "interface"
    RECORD = "record"
    ENUM = "enum"
    UNION = "union"


class Visibility(str, Enum):
    """Declared visibility of a type or member."""

    PUBLIC = "public"
    PROTECTED = "protected"
    PACKAGE = "package"
    PRIVATE = "private"

    @property
    def is_exported(self) -> bool:
        """Visible to library users (public or protected)."""
        return self in (Visibility.PUBLIC, Visibility.PROTECTED)


class FieldDeclaration(BaseModel):
    """A field (or record component) of a composite type.

    Attributes:
        name: Field name, used as the property name.
        type: Type expression of the field.
        required: Required flag. None means the kind default
            (record components are required, other fields are not).
        default: Default value, when declared.
        doc: Raw documentation comment.
        visibility: Declared visibility.

    Example:
        >>> FieldDeclaration(name="x", type="int", required=True)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=IDENTIFIER_PATTERN, description="Field name")
    type: str = Field(..., min_length=1, description="Type expression")
    required: bool | None = Field(default=None, description="Required flag")
    default: Any = Field(default=None, description="Default value")
    doc: str | None = Field(default=None, description="Raw documentation comment")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="Visibility")

    @property
    def has_default(self) -> bool:
        """True when a default was declared, even an explicit null."""
        return "default" in self.model_fields_set


class AccessorDeclaration(BaseModel):
    """An accessor method exposing a property (``getName()``, ``isActive()``).

    Attributes:
        name: Method name.
        type: Return type expression.
        required: Required flag of the exposed property.
        doc: Raw documentation comment.
        visibility: Declared visibility.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=IDENTIFIER_PATTERN, description="Method name")
    type: str = Field(..., min_length=1, description="Return type expression")
    required: bool | None = Field(default=None, description="Required flag")
    doc: str | None = Field(default=None, description="Raw documentation comment")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="Visibility")

    @property
    def property_name(self) -> str:
        """Property exposed by this accessor: ``getFooBar`` -> ``fooBar``."""
        for prefix in ("get", "is"):
            rest = self.name[len(prefix) :]
            if self.name.startswith(prefix) and rest[:1].isupper():
                return rest[0].lower() + rest[1:]
        return self.name


class EnumConstantDeclaration(BaseModel):
    """An enum constant.

    Attributes:
        name: Constant name.
        value: Serialized value, when it differs from the name.
        doc: Raw documentation comment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=IDENTIFIER_PATTERN, description="Constant name")
    value: str | int | None = Field(default=None, description="Serialized value")
    doc: str | None = Field(default=None, description="Raw documentation comment")

    @property
    def serialized(self) -> str | int:
        return self.name if self.value is None else self.value


class PackageDeclaration(BaseModel):
    """Documentation of a package (``package-info``).

    Attributes:
        name: Qualified package name.
        doc: Raw documentation comment.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=QUALIFIED_NAME_PATTERN, description="Package name")
    doc: str | None = Field(default=None, description="Raw documentation comment")


class TypeDeclaration(BaseModel):
    """A documented type declaration.

    Attributes:
        name: Fully-qualified name (nested types use ``Outer$Inner``).
        kind: Declaration kind.
        doc: Raw documentation comment.
        visibility: Declared visibility.
        abstract: Abstract class or interface.
        type_parameters: Generic parameters, ``"T"`` or ``"T extends Bound"``.
        extends: Supertype expression.
        implements: Implemented interface expressions.
        fields: Fields or record components.
        accessors: Accessor methods.
        constants: Enum constants (enums only).
        variants: Variant type expressions (unions only).
        exclusive: Variants are mutually exclusive by construction.

    Example:
        >>> TypeDeclaration(
        ...     name="com.example.Point",
        ...     fields=[{"name": "x", "type": "int", "required": True}],
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., pattern=QUALIFIED_NAME_PATTERN, description="Qualified name")
    kind: DeclarationKind = Field(default=DeclarationKind.CLASS, description="Kind")
    doc: str | None = Field(default=None, description="Raw documentation comment")
    visibility: Visibility = Field(default=Visibility.PUBLIC, description="Visibility")
    abstract: bool = Field(default=False, description="Abstract type")
    type_parameters: list[str] = Field(default_factory=list, description="Generic parameters")
    extends: str | None = Field(default=None, description="Supertype expression")
    implements: list[str] = Field(default_factory=list, description="Interfaces")
    fields: list[FieldDeclaration] = Field(default_factory=list, description="Fields")
    accessors: list[AccessorDeclaration] = Field(default_factory=list, description="Accessors")
    constants: list[EnumConstantDeclaration] = Field(
        default_factory=list, description="Enum constants"
    )
    variants: list[str] = Field(default_factory=list, description="Union variants")
    exclusive: bool = Field(default=False, description="Variants are mutually exclusive")

    @field_validator("constants", mode="before")
    @classmethod
    def expand_constant_shorthand(cls, v: Any) -> Any:
        """Accept ``constants: [RED, GREEN]`` as shorthand for name-only constants."""
        if isinstance(v, list):
            return [{"name": item} if isinstance(item, str) else item for item in v]
        return v

    @field_validator("type_parameters")
    @classmethod
    def validate_type_parameters(cls, v: list[str]) -> list[str]:
        """Validate ``T`` / ``T extends Bound`` syntax and uniqueness."""
        seen: set[str] = set()
        for raw in v:
            match = _TYPE_PARAMETER.match(raw.strip())
            if not match:
                raise ValueError(f"invalid type parameter '{raw}'")
            if match.group(1) in seen:
                raise ValueError(f"duplicate type parameter '{match.group(1)}'")
            seen.add(match.group(1))
        return v

    @model_validator(mode="after")
    def validate_kind_members(self) -> TypeDeclaration:
        """Check that members fit the declaration kind and names are unique."""
        if self.kind == DeclarationKind.ENUM and not self.constants:
            raise ValueError(f"enum '{self.name}' must declare constants")
        if self.kind != DeclarationKind.ENUM and self.constants:
            raise ValueError(f"only enums may declare constants ('{self.name}')")
        if self.kind == DeclarationKind.UNION and not self.variants:
            raise ValueError(f"union '{self.name}' must declare variants")
        if self.kind != DeclarationKind.UNION and self.variants:
            raise ValueError(f"only unions may declare variants ('{self.name}')")

        _check_unique(self.name, "field", [f.name for f in self.fields])
        _check_unique(self.name, "accessor property", [a.property_name for a in self.accessors])
        _check_unique(self.name, "enum constant", [c.name for c in self.constants])
        return self

    @property
    def simple_name(self) -> str:
        """Name without package or enclosing types: ``a.b.Outer$Inner`` -> ``Inner``."""
        return self.name.rsplit(".", 1)[-1].rsplit("$", 1)[-1]

    @property
    def package(self) -> str:
        return self.name.rsplit(".", 1)[0] if "." in self.name else ""

    @property
    def parameters(self) -> list[tuple[str, str | None]]:
        """Parsed type parameters as ``(name, bound)`` pairs."""
        parsed: list[tuple[str, str | None]] = []
        for raw in self.type_parameters:
            match = _TYPE_PARAMETER.match(raw.strip())
            assert match is not None  # checked by validate_type_parameters
            parsed.append((match.group(1), match.group(2)))
        return parsed


def _check_unique(owner: str, what: str, names: list[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValueError(f"duplicate {what} '{name}' in '{owner}'")
        seen.add(name)
