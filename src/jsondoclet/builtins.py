"""Built-in host types understood without a declaration.

Each entry maps a canonical qualified name to its structural kind and, for
primitives, the JSON type, format and extra keywords it translates to.
Entries are reachable by qualified name, simple name and primitive alias.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsondoclet.descriptors import TypeIdentity, TypeKind

OBJECT_TYPE = "java.lang.Object"
STRING_TYPE = "java.lang.String"
OPTIONAL_TYPE = "java.util.Optional"
BYTE_TYPE = "java.lang.Byte"
BYTE_ARRAY_TYPE = "byte[]"

OBJECT = TypeIdentity(OBJECT_TYPE)
STRING = TypeIdentity(STRING_TYPE)


@dataclass(frozen=True)
class BuiltinType:
    """Translation facts for one built-in type."""

    name: str
    kind: TypeKind
    json_type: str | None = None
    format: str | None = None
    extra: tuple[tuple[str, Any], ...] = ()
    unique_items: bool = False
    arity: int = 0


def _primitive(
    name: str,
    json_type: str | None,
    format: str | None = None,
    *aliases: str,
    extra: tuple[tuple[str, Any], ...] = (),
) -> tuple[BuiltinType, tuple[str, ...]]:
    return BuiltinType(name, TypeKind.PRIMITIVE, json_type, format, extra), aliases


def _collection(name: str, unique: bool = False) -> tuple[BuiltinType, tuple[str, ...]]:
    return BuiltinType(name, TypeKind.COLLECTION, unique_items=unique, arity=1), ()


def _map(name: str) -> tuple[BuiltinType, tuple[str, ...]]:
    return BuiltinType(name, TypeKind.MAP, arity=2), ()


_DEFINITIONS: list[tuple[BuiltinType, tuple[str, ...]]] = [
    _primitive(STRING_TYPE, "string", None, "java.lang.CharSequence", "CharSequence"),
    _primitive("java.lang.Character", "string", None, "char", extra=(("minLength", 1), ("maxLength", 1))),
    _primitive("java.lang.Boolean", "boolean", None, "boolean"),
    _primitive("java.lang.Integer", "integer", None, "int"),
    _primitive("java.lang.Short", "integer", None, "short"),
    _primitive(BYTE_TYPE, "integer", None, "byte"),
    _primitive("java.lang.Long", "integer", "int64", "long"),
    _primitive("java.lang.Float", "number", "float", "float"),
    _primitive("java.lang.Double", "number", None, "double"),
    _primitive("java.lang.Number", "number"),
    _primitive("java.math.BigDecimal", "number"),
    _primitive("java.math.BigInteger", "integer"),
    _primitive("java.util.UUID", "string", "uuid"),
    _primitive("java.net.URI", "string", "uri"),
    _primitive("java.net.URL", "string", "uri"),
    _primitive("java.time.LocalDate", "string", "date"),
    _primitive("java.time.LocalTime", "string", "time"),
    _primitive("java.time.LocalDateTime", "string", "date-time"),
    _primitive("java.time.Instant", "string", "date-time"),
    _primitive("java.time.OffsetDateTime", "string", "date-time"),
    _primitive("java.time.ZonedDateTime", "string", "date-time"),
    _primitive("java.time.Duration", "string", "duration"),
    _primitive(OBJECT_TYPE, None),
    _primitive(BYTE_ARRAY_TYPE, "string", None, extra=(("contentEncoding", "base64"),)),
    _collection("java.lang.Iterable"),
    _collection("java.util.Collection"),
    _collection("java.util.List"),
    _collection("java.util.ArrayList"),
    _collection("java.util.LinkedList"),
    _collection("java.util.Queue"),
    _collection("java.util.Deque"),
    _collection("java.util.ArrayDeque"),
    _collection("java.util.Set", unique=True),
    _collection("java.util.HashSet", unique=True),
    _collection("java.util.LinkedHashSet", unique=True),
    _collection("java.util.SortedSet", unique=True),
    _collection("java.util.NavigableSet", unique=True),
    _collection("java.util.TreeSet", unique=True),
    _collection("java.util.EnumSet", unique=True),
    _map("java.util.Map"),
    _map("java.util.HashMap"),
    _map("java.util.LinkedHashMap"),
    _map("java.util.SortedMap"),
    _map("java.util.NavigableMap"),
    _map("java.util.TreeMap"),
    _map("java.util.EnumMap"),
    _map("java.util.concurrent.ConcurrentMap"),
    _map("java.util.concurrent.ConcurrentHashMap"),
]

BUILTINS: dict[str, BuiltinType] = {}
_ALIASES: dict[str, str] = {}

for _builtin, _aliases in _DEFINITIONS:
    BUILTINS[_builtin.name] = _builtin
    _ALIASES[_builtin.name.rsplit(".", 1)[-1]] = _builtin.name
    for _alias in _aliases:
        _ALIASES[_alias] = _builtin.name
_ALIASES["Optional"] = OPTIONAL_TYPE
_ALIASES[OPTIONAL_TYPE] = OPTIONAL_TYPE


def canonical_builtin(name: str) -> str | None:
    """Return the canonical name of built-in *name* (or alias), or None.

    Example:
        >>> canonical_builtin("int"), canonical_builtin("List")
        ('java.lang.Integer', 'java.util.List')
    """
    return _ALIASES.get(name)
