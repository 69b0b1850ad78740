"""Language-agnostic type descriptors.

The adapter normalizes host declarations into these descriptors; the
translator consumes nothing else. A TypeDescriptor is a tagged variant
over TypeKind: only the attributes of its kind are populated.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from jsondoclet.comments import EMPTY_COMMENT, DocComment

# Identity names used for built-in structural types
ARRAY_TYPE_NAME = "[]"
WILDCARD_TYPE_NAME = "?"


class TypeKind(str, Enum):
    """Structural kind of a type descriptor."""

    PRIMITIVE = "primitive"
    ENUM = "enum"
    COLLECTION = "collection"
    MAP = "map"
    COMPOSITE = "composite"
    UNION = "union"

    @property
    def is_named(self) -> bool:
        """Kinds that become named entries of the definitions table."""
        return self in (TypeKind.ENUM, TypeKind.COMPOSITE, TypeKind.UNION)


@dataclass(frozen=True)
class TypeIdentity:
    """Identity of one concrete type usage: qualified name + generic arguments.

    ``Box<String>`` and ``Box<Integer>`` are distinct identities.

    Example:
        >>> identity = TypeIdentity("com.example.Box", (TypeIdentity("java.lang.String"),))
        >>> str(identity)
        'com.example.Box<java.lang.String>'
    """

    name: str
    arguments: tuple[TypeIdentity, ...] = ()

    def __str__(self) -> str:
        if self.name == ARRAY_TYPE_NAME and len(self.arguments) == 1:
            return f"{self.arguments[0]}[]"
        if not self.arguments:
            return self.name
        return f"{self.name}<{', '.join(str(arg) for arg in self.arguments)}>"

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1].rsplit("$", 1)[-1]

    @property
    def display_name(self) -> str:
        """Compact name usable in schema names: ``Box<List<String>>`` -> ``BoxOfListOfString``."""
        if self.name == WILDCARD_TYPE_NAME:
            return "Any"
        if self.name == ARRAY_TYPE_NAME and len(self.arguments) == 1:
            return f"{self.arguments[0].display_name}Array"
        base = self.simple_name
        if not self.arguments:
            return base
        return f"{base}Of{'And'.join(arg.display_name for arg in self.arguments)}"


@dataclass(frozen=True)
class MemberDescriptor:
    """One property of a composite.

    Attributes:
        name: Property name, unique within the owning composite.
        type: Identity of the property type.
        required: Required flag.
        doc: Parsed documentation comment.
        has_default: Whether ``default`` carries a declared value.
        default: Declared default value.
    """

    name: str
    type: TypeIdentity
    required: bool = False
    doc: DocComment = EMPTY_COMMENT
    has_default: bool = False
    default: Any = None


@dataclass(frozen=True)
class EnumValue:
    """One enum constant: serialized value plus its documentation."""

    name: str
    value: str | int
    doc: DocComment = EMPTY_COMMENT


@dataclass(frozen=True)
class TypeDescriptor:
    """Normalized representation of one concrete type usage.

    Attributes:
        identity: Unique identity of this instantiation.
        kind: Structural kind; selects which attributes below are populated.
        doc: Type-level documentation.
        json_type: JSON type of a primitive (None accepts any value).
        format: JSON Schema format of a primitive.
        extra: Additional keywords for a primitive (e.g. length bounds).
        enum_values: Enum constants in declaration order.
        element: Element type of a collection.
        unique_items: Collection rejects duplicates (sets).
        key: Key type of a map.
        value: Value type of a map.
        members: Own members of a composite in declaration order.
        supertypes: Direct supertypes of a composite.
        variants: Variant types of a union.
        exclusive: Union variants are mutually exclusive by construction.
    """

    identity: TypeIdentity
    kind: TypeKind
    doc: DocComment = EMPTY_COMMENT
    json_type: str | None = None
    format: str | None = None
    extra: tuple[tuple[str, Any], ...] = ()
    enum_values: tuple[EnumValue, ...] = ()
    element: TypeIdentity | None = None
    unique_items: bool = False
    key: TypeIdentity | None = None
    value: TypeIdentity | None = None
    members: tuple[MemberDescriptor, ...] = ()
    supertypes: tuple[TypeIdentity, ...] = ()
    variants: tuple[TypeIdentity, ...] = ()
    exclusive: bool = False

    @property
    def qualified_name(self) -> str:
        return self.identity.name

    @property
    def simple_name(self) -> str:
        return self.identity.simple_name

    def referenced(self) -> tuple[TypeIdentity, ...]:
        """Identities this descriptor points at, in translation order."""
        if self.kind == TypeKind.COLLECTION:
            return (self.element,) if self.element else ()
        if self.kind == TypeKind.MAP:
            return tuple(ref for ref in (self.key, self.value) if ref is not None)
        if self.kind == TypeKind.COMPOSITE:
            return self.supertypes + tuple(member.type for member in self.members)
        if self.kind == TypeKind.UNION:
            return self.variants
        return ()
