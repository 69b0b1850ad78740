"""Schema Registry: identity to schema name, in-progress tracking, fragments.

One registry serves exactly one generation run. It is an arena of entries
keyed by TypeIdentity; each entry moves through three states:

    pending  ->  resolving  ->  resolved
    (named)      (building)     (fragment stored)

An identity in the ``resolving`` state is the reference-cycle marker: the
translator answers it with a ``$ref`` instead of recursing.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog

from jsondoclet.descriptors import TypeDescriptor, TypeIdentity, TypeKind
from jsondoclet.errors import DuplicateDefinitionError, JsonDocletError
from jsondoclet.settings import SchemaDialect

logger = structlog.get_logger(__name__)

SchemaFragment = dict[str, Any]


class EntryState(str, Enum):
    """Lifecycle state of a registry entry."""

    PENDING = "pending"
    RESOLVING = "resolving"
    RESOLVED = "resolved"


@dataclass
class RegistryEntry:
    """Arena slot for one named type."""

    identity: TypeIdentity
    name: str
    kind: TypeKind
    state: EntryState = EntryState.PENDING
    fragment: SchemaFragment | None = None


class SchemaRegistry:
    """Stable, collision-free schema names and single-definition storage.

    Args:
        dialect: Dialect whose reference prefix is used by ``reference()``.

    Example:
        >>> registry = SchemaRegistry()
        >>> name = registry.resolve(point_descriptor)
        >>> registry.begin(point_descriptor.identity)
        >>> registry.register(name, {"type": "object"})
        >>> registry.reference(point_descriptor.identity)
        {'$ref': '#/$defs/Point'}
    """

    def __init__(self, dialect: SchemaDialect = SchemaDialect.DRAFT_2020_12) -> None:
        self.dialect = dialect
        self._entries: dict[TypeIdentity, RegistryEntry] = {}
        self._names: dict[str, RegistryEntry] = {}

    def resolve(self, descriptor: TypeDescriptor) -> str:
        """Return the schema name of *descriptor*, assigning one on first sight.

        The base name is the simple type name. When it is taken by another
        identity, a generic instantiation tries its argument signature
        (``BoxOfString``); anything still colliding gets ``_`` plus the
        first 8 hex digits of the SHA-256 of the full identity.
        """
        entry = self._entries.get(descriptor.identity)
        if entry is not None:
            return entry.name

        name = self._unique_name(descriptor.identity)
        entry = RegistryEntry(descriptor.identity, name, descriptor.kind)
        self._entries[descriptor.identity] = entry
        self._names[name] = entry
        return name

    def contains(self, identity: TypeIdentity) -> bool:
        return identity in self._entries

    def name_of(self, identity: TypeIdentity) -> str | None:
        entry = self._entries.get(identity)
        return entry.name if entry is not None else None

    def is_in_progress(self, identity: TypeIdentity) -> bool:
        entry = self._entries.get(identity)
        return entry is not None and entry.state == EntryState.RESOLVING

    def begin(self, identity: TypeIdentity) -> None:
        """Mark *identity* as being built."""
        self._entry(identity).state = EntryState.RESOLVING

    def register(self, name: str, fragment: SchemaFragment) -> None:
        """Store the fragment of *name* exactly once and clear its in-progress mark.

        Raises:
            DuplicateDefinitionError: If *name* already holds a different fragment.
        """
        entry = self._names.get(name)
        if entry is None:
            raise JsonDocletError(
                f"Schema definition '{name}' was registered before being named",
                internal_details=f"known names: {sorted(self._names)}",
            )
        if entry.fragment is not None:
            if entry.fragment == fragment:
                return
            raise DuplicateDefinitionError(
                name,
                str(entry.identity),
                internal_details=f"stored={entry.fragment!r} new={fragment!r}",
            )

        entry.fragment = fragment
        entry.state = EntryState.RESOLVED
        logger.debug("definition_registered", name=name, type=str(entry.identity))

    def reference(self, identity: TypeIdentity) -> SchemaFragment:
        """Return a fresh ``$ref`` fragment pointing at *identity*'s definition."""
        return {"$ref": f"{self.dialect.ref_prefix}{self._entry(identity).name}"}

    def unfinished(self) -> list[TypeIdentity]:
        """Identities that were named but never registered."""
        return [
            identity
            for identity, entry in self._entries.items()
            if entry.state != EntryState.RESOLVED
        ]

    def definitions(self) -> dict[str, SchemaFragment]:
        """Registered fragments by name, in first-seen order."""
        return {
            entry.name: entry.fragment
            for entry in self._entries.values()
            if entry.fragment is not None
        }

    def qualified_names(self) -> dict[str, str]:
        """Schema name to qualified type name, in first-seen order."""
        return {entry.name: entry.identity.name for entry in self._entries.values()}

    def kinds(self) -> dict[str, str]:
        """Schema name to type kind, in first-seen order."""
        return {entry.name: entry.kind.value for entry in self._entries.values()}

    def __len__(self) -> int:
        return len(self._entries)

    def _entry(self, identity: TypeIdentity) -> RegistryEntry:
        entry = self._entries.get(identity)
        if entry is None:
            raise JsonDocletError(f"Type '{identity}' has no schema name")
        return entry

    def _unique_name(self, identity: TypeIdentity) -> str:
        digest = hashlib.sha256(str(identity).encode("utf-8")).hexdigest()[:8]
        candidates = [identity.simple_name]
        if identity.arguments:
            candidates.append(identity.display_name)
        candidates.append(f"{candidates[-1]}_{digest}")

        for candidate in candidates:
            if candidate not in self._names:
                if candidate != identity.simple_name:
                    logger.debug(
                        "schema_name_disambiguated",
                        type=str(identity),
                        name=candidate,
                        taken=identity.simple_name,
                    )
                return candidate

        # Only reachable on a truncated-digest collision
        suffix = 2
        while f"{candidates[-1]}_{suffix}" in self._names:
            suffix += 1
        return f"{candidates[-1]}_{suffix}"
