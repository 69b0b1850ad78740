"""Translator: TypeDescriptors to JSON Schema fragments.

Enum, composite and union types become named definitions in the registry
and are referenced with ``$ref``; primitives, collections and maps are
inlined at each use site. All kind handling goes through ``_build``.

Cycles terminate because a named type is marked in progress before its
members are translated: re-entering it yields a ``$ref`` to the name that
is still being built. Types the adapter cannot represent are replaced by
a permissive fragment whose description carries an ``@warning`` tag.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from jsondoclet.adapter import TypeModelAdapter
from jsondoclet.comments import DocComment
from jsondoclet.descriptors import MemberDescriptor, TypeDescriptor, TypeIdentity, TypeKind
from jsondoclet.errors import JsonDocletError, UnsupportedTypeError
from jsondoclet.registry import SchemaFragment, SchemaRegistry
from jsondoclet.settings import GeneratorSettings

logger = structlog.get_logger(__name__)

WARNING_TAG = "@warning"

_NO_DEFAULT = object()


class Translator:
    """Convert type identities into schema fragments for one run.

    Args:
        adapter: Source of descriptors (pulled on demand).
        registry: Registry owned by the current run.
        settings: Generator settings. Defaults to the adapter's settings.

    Attributes:
        warnings: Run warnings in first-occurrence order, without duplicates.
    """

    def __init__(
        self,
        adapter: TypeModelAdapter,
        registry: SchemaRegistry,
        settings: GeneratorSettings | None = None,
    ) -> None:
        self.adapter = adapter
        self.registry = registry
        self.settings = settings or adapter.settings
        self.warnings: list[str] = []

    def translate(self, identity: TypeIdentity) -> SchemaFragment:
        """Return the fragment for *identity*.

        Named kinds return a ``$ref``; their definition is built and
        registered the first time they are seen.
        """
        try:
            descriptor = self.adapter.descriptor(identity)
        except UnsupportedTypeError as exc:
            return self._fallback(exc)

        if descriptor.kind.is_named:
            return self._named(descriptor)
        return self._build(descriptor)

    def _named(self, descriptor: TypeDescriptor) -> SchemaFragment:
        identity = descriptor.identity
        if self.registry.contains(identity):
            if self.registry.is_in_progress(identity):
                logger.debug("cycle_reference", type=str(identity))
            return self.registry.reference(identity)

        name = self.registry.resolve(descriptor)
        self.registry.begin(identity)
        fragment = self._annotate(self._build(descriptor), descriptor.doc, str(identity))
        self.registry.register(name, fragment)
        return self.registry.reference(identity)

    def _build(self, descriptor: TypeDescriptor) -> SchemaFragment:
        kind = descriptor.kind
        if kind == TypeKind.PRIMITIVE:
            return self._primitive(descriptor)
        if kind == TypeKind.ENUM:
            return self._enum(descriptor)
        if kind == TypeKind.COLLECTION:
            return self._collection(descriptor)
        if kind == TypeKind.MAP:
            return self._map(descriptor)
        if kind == TypeKind.COMPOSITE:
            return self._composite(descriptor)
        if kind == TypeKind.UNION:
            return self._union(descriptor)
        raise ValueError(f"Unhandled type kind: {kind}")

    def _primitive(self, descriptor: TypeDescriptor) -> SchemaFragment:
        fragment: SchemaFragment = {}
        if descriptor.json_type:
            fragment["type"] = descriptor.json_type
        if descriptor.format:
            fragment["format"] = descriptor.format
        fragment.update(descriptor.extra)
        return fragment

    def _enum(self, descriptor: TypeDescriptor) -> SchemaFragment:
        values = [value.value for value in descriptor.enum_values]
        fragment: SchemaFragment = {}
        if all(isinstance(value, str) for value in values):
            fragment["type"] = "string"
        elif all(isinstance(value, int) for value in values):
            fragment["type"] = "integer"
        fragment["enum"] = values

        if any(value.doc.description for value in descriptor.enum_values):
            fragment["x-enum-descriptions"] = [
                value.doc.summary for value in descriptor.enum_values
            ]
        return fragment

    def _collection(self, descriptor: TypeDescriptor) -> SchemaFragment:
        if descriptor.element is None:
            raise _malformed(descriptor, "element")
        fragment: SchemaFragment = {"type": "array", "items": self.translate(descriptor.element)}
        if descriptor.unique_items:
            fragment["uniqueItems"] = True
        return fragment

    def _map(self, descriptor: TypeDescriptor) -> SchemaFragment:
        if descriptor.key is None or descriptor.value is None:
            raise _malformed(descriptor, "key or value")
        fragment: SchemaFragment = {"type": "object"}

        key = self._key_descriptor(descriptor)
        if key is not None and key.kind == TypeKind.ENUM:
            fragment["propertyNames"] = self.translate(key.identity)
        elif key is None or key.json_type != "string":
            self._warn(
                f"Map key type '{descriptor.key}' in '{descriptor.identity}' is not a "
                "string; keys are assumed to be serialized as strings"
            )

        fragment["additionalProperties"] = self.translate(descriptor.value)
        return fragment

    def _key_descriptor(self, descriptor: TypeDescriptor) -> TypeDescriptor | None:
        if descriptor.key is None:
            return None
        try:
            return self.adapter.descriptor(descriptor.key)
        except UnsupportedTypeError:
            return None

    def _composite(self, descriptor: TypeDescriptor) -> SchemaFragment:
        parents = [self.translate(supertype) for supertype in descriptor.supertypes]

        properties: dict[str, SchemaFragment] = {}
        required: list[str] = []
        for member in descriptor.members:
            properties[member.name] = self._member(descriptor, member)
            if member.required:
                required.append(member.name)

        own: SchemaFragment = {"type": "object"}
        if properties:
            own["properties"] = properties
        if required:
            own["required"] = required

        if parents:
            return {"allOf": [*parents, own]}
        if not self.settings.additional_properties:
            own["additionalProperties"] = False
        return own

    def _union(self, descriptor: TypeDescriptor) -> SchemaFragment:
        keyword = "oneOf" if descriptor.exclusive else "anyOf"
        return {keyword: [self.translate(variant) for variant in descriptor.variants]}

    def _member(self, owner: TypeDescriptor, member: MemberDescriptor) -> SchemaFragment:
        default: Any = _NO_DEFAULT
        if member.has_default:
            default = member.default
        elif member.doc.first("default") is not None:
            default = _literal(member.doc.first("default") or "")
        return self._annotate(
            self.translate(member.type),
            member.doc,
            f"{owner.identity}.{member.name}",
            default=default,
        )

    def _annotate(
        self,
        fragment: SchemaFragment,
        doc: DocComment,
        owner: str,
        *,
        default: Any = _NO_DEFAULT,
    ) -> SchemaFragment:
        """Attach documentation-derived keywords to *fragment*."""
        for problem in doc.problems:
            self._warn(f"Malformed documentation comment on '{owner}': {problem}")

        dialect = self.settings.dialect
        text = doc.description or doc.first("return") or ""
        if doc.is_deprecated and not dialect.supports_deprecated:
            text = _join(text, f"Deprecated. {doc.first('deprecated') or ''}".strip())

        annotations: SchemaFragment = {}
        description = _join(text, fragment.get("description", ""))
        if description:
            annotations["description"] = description
        if default is not _NO_DEFAULT:
            annotations["default"] = default
        if doc.is_deprecated and dialect.supports_deprecated:
            annotations["deprecated"] = True
        examples = [_literal(example) for example in doc.all("example")]
        if examples:
            annotations["examples"] = examples

        if not annotations:
            return fragment
        if "$ref" in fragment and not dialect.ref_allows_siblings:
            return {"allOf": [fragment], **annotations}
        return {**fragment, **annotations}

    def _fallback(self, error: UnsupportedTypeError) -> SchemaFragment:
        logger.warning("unsupported_type", type=error.identity, reason=error.reason)
        self._warn(error.user_message)
        return {"description": f"{WARNING_TAG} {error.user_message}"}

    def _warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)


def _malformed(descriptor: TypeDescriptor, missing: str) -> JsonDocletError:
    return JsonDocletError(
        f"Type '{descriptor.identity}' has no {missing} type",
        internal_details=f"{descriptor.kind.value} descriptor: {descriptor!r}",
    )


def _join(*parts: str) -> str:
    return "\n\n".join(part for part in parts if part)


def _literal(text: str) -> Any:
    """Parse a tag body as JSON, keeping it as a string when it is not JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return text
