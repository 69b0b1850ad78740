"""Type Model Adapter: host declarations to TypeDescriptors.

The adapter is pulled by the translator: ``descriptor(identity)`` builds
(and caches) the descriptor of one concrete type usage on demand. Generic
parameters are substituted at each use site, so ``Box<String>`` and
``Box<Integer>`` yield two distinct descriptors.

Type references that cannot be represented (unknown names, unbounded
wildcards, wrong generic arity, unparseable expressions) still get an
identity; asking for their descriptor raises UnsupportedTypeError. The
failure is per type and never aborts the run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from jsondoclet.builtins import (
    BUILTINS,
    BYTE_ARRAY_TYPE,
    OBJECT,
    OPTIONAL_TYPE,
    STRING,
    BuiltinType,
    canonical_builtin,
)
from jsondoclet.comments import CommentExtractor
from jsondoclet.descriptors import (
    ARRAY_TYPE_NAME,
    WILDCARD_TYPE_NAME,
    EnumValue,
    MemberDescriptor,
    TypeDescriptor,
    TypeIdentity,
    TypeKind,
)
from jsondoclet.errors import ModelError, UnsupportedTypeError
from jsondoclet.schemas import DeclarationKind, TypeDeclaration, TypeModel, Visibility
from jsondoclet.settings import GeneratorSettings
from jsondoclet.type_expressions import TypeExpression, parse_type_expression

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeScope:
    """Name resolution context of a type expression.

    Attributes:
        package: Package of the declaring type.
        owner: Qualified name of the declaring type (for nested lookups).
        bindings: Type variable name to bound argument identity.
    """

    package: str = ""
    owner: str = ""
    bindings: Mapping[str, TypeIdentity] = field(default_factory=dict)


class TypeModelAdapter:
    """Normalize a TypeModel into language-agnostic TypeDescriptors.

    Args:
        model: Host type model.
        settings: Generator settings. Defaults to the model's settings.
        extractor: Comment extractor shared with the rest of the run.

    Attributes:
        failures: Identities found unsupported by ``reachable()``, with
            the error raised for each.

    Example:
        >>> adapter = TypeModelAdapter(model)
        >>> root = adapter.root_identity("Point")
        >>> [d.simple_name for d in adapter.reachable([root])]
        ['Point', 'Integer']
    """

    def __init__(
        self,
        model: TypeModel,
        settings: GeneratorSettings | None = None,
        extractor: CommentExtractor | None = None,
    ) -> None:
        self.model = model
        self.settings = settings or model.settings or GeneratorSettings()
        self.extractor = extractor or CommentExtractor()
        self.failures: dict[TypeIdentity, UnsupportedTypeError] = {}
        self._descriptors: dict[TypeIdentity, TypeDescriptor] = {}
        self._unsupported: dict[TypeIdentity, UnsupportedTypeError] = {}
        self._binding: set[str] = set()

    def root_identity(self, name: str) -> TypeIdentity:
        """Resolve a root type name to its identity.

        Args:
            name: Qualified name, unique simple name, or a generic
                instantiation such as ``Box<String>``.

        Returns:
            Identity of the root. A generic declaration named without
            arguments is used raw.

        Raises:
            ModelError: If the name matches no declaration or several.
        """
        if "<" in name or "[" in name:
            identity = self.identity_of(name)
            if self.model.get(identity.name) is None:
                raise ModelError(f"Root type '{name}' is not declared in the type model")
            return identity

        declaration = self.model.get(name)
        if declaration is None:
            matches = self.model.find_simple(name)
            if len(matches) > 1:
                candidates = ", ".join(match.name for match in matches)
                raise ModelError(f"Root type '{name}' is ambiguous: {candidates}")
            if not matches:
                raise ModelError(f"Root type '{name}' is not declared in the type model")
            declaration = matches[0]
        return TypeIdentity(declaration.name)

    def identity_of(self, expression: str, scope: TypeScope | None = None) -> TypeIdentity:
        """Resolve a type expression to the identity it denotes in *scope*."""
        return self._member_type(expression, scope or TypeScope())[0]

    def descriptor(self, identity: TypeIdentity) -> TypeDescriptor:
        """Return the descriptor of *identity*, building it on first request.

        Raises:
            UnsupportedTypeError: If the type cannot be represented.
        """
        cached = self._descriptors.get(identity)
        if cached is not None:
            return cached
        error = self._unsupported.get(identity)
        if error is not None:
            raise error

        try:
            descriptor = self._describe(identity)
        except UnsupportedTypeError as exc:
            logger.debug("Unsupported type %s: %s", identity, exc.reason)
            self._unsupported[identity] = exc
            raise
        self._descriptors[identity] = descriptor
        return descriptor

    def reachable(self, roots: Iterable[TypeIdentity]) -> list[TypeDescriptor]:
        """Return the closed set of descriptors reachable from *roots*.

        Members, elements, keys, values, variants and supertypes are
        followed transitively. Order is first discovery (depth first).
        Unsupported identities are skipped and recorded in ``failures``.
        """
        ordered: list[TypeDescriptor] = []
        seen: set[TypeIdentity] = set()
        stack = list(reversed(list(roots)))
        while stack:
            identity = stack.pop()
            if identity in seen:
                continue
            seen.add(identity)
            try:
                descriptor = self.descriptor(identity)
            except UnsupportedTypeError as exc:
                self.failures[identity] = exc
                continue
            ordered.append(descriptor)
            stack.extend(reversed(descriptor.referenced()))
        return ordered

    def _describe(self, identity: TypeIdentity) -> TypeDescriptor:
        if identity.name == WILDCARD_TYPE_NAME:
            raise UnsupportedTypeError(str(identity), "unbounded wildcard has no resolvable bound")
        if identity.name == ARRAY_TYPE_NAME:
            return TypeDescriptor(identity, TypeKind.COLLECTION, element=identity.arguments[0])
        if identity.name == OPTIONAL_TYPE:
            raise UnsupportedTypeError(str(identity), "Optional takes exactly one type argument")

        declaration = self.model.get(identity.name)
        if declaration is not None:
            return self._describe_declaration(declaration, identity)
        builtin = BUILTINS.get(identity.name)
        if builtin is not None:
            return self._describe_builtin(builtin, identity)

        matches = [] if "." in identity.name else self.model.find_simple(identity.name)
        if len(matches) > 1:
            candidates = ", ".join(match.name for match in matches)
            raise UnsupportedTypeError(str(identity), f"ambiguous type name ({candidates})")
        raise UnsupportedTypeError(str(identity), "not declared in the type model")

    def _describe_builtin(self, builtin: BuiltinType, identity: TypeIdentity) -> TypeDescriptor:
        arguments = identity.arguments
        if builtin.kind == TypeKind.PRIMITIVE:
            if arguments:
                raise UnsupportedTypeError(str(identity), "type takes no type arguments")
            return TypeDescriptor(
                identity,
                TypeKind.PRIMITIVE,
                json_type=builtin.json_type,
                format=builtin.format,
                extra=builtin.extra,
            )

        if not arguments:
            arguments = (OBJECT,) if builtin.kind == TypeKind.COLLECTION else (STRING, OBJECT)
        elif len(arguments) != builtin.arity:
            raise UnsupportedTypeError(
                str(identity),
                f"expected {builtin.arity} type argument(s), got {len(arguments)}",
            )

        if builtin.kind == TypeKind.COLLECTION:
            return TypeDescriptor(
                identity,
                TypeKind.COLLECTION,
                element=arguments[0],
                unique_items=builtin.unique_items,
            )
        return TypeDescriptor(identity, TypeKind.MAP, key=arguments[0], value=arguments[1])

    def _describe_declaration(
        self, declaration: TypeDeclaration, identity: TypeIdentity
    ) -> TypeDescriptor:
        parameters = declaration.parameters
        arguments = identity.arguments
        if arguments and len(arguments) != len(parameters):
            raise UnsupportedTypeError(
                str(identity),
                f"expected {len(parameters)} type argument(s), got {len(arguments)}",
            )
        if not arguments:
            arguments = self._raw_bindings(declaration)

        scope = TypeScope(
            package=declaration.package,
            owner=declaration.name,
            bindings={name: argument for (name, _), argument in zip(parameters, arguments)},
        )
        doc = self.extractor.extract(declaration.doc)

        if declaration.kind == DeclarationKind.ENUM:
            values = tuple(
                EnumValue(constant.name, constant.serialized, self.extractor.extract(constant.doc))
                for constant in declaration.constants
            )
            return TypeDescriptor(identity, TypeKind.ENUM, doc=doc, enum_values=values)

        if declaration.kind == DeclarationKind.UNION:
            variants = tuple(self.identity_of(variant, scope) for variant in declaration.variants)
            return TypeDescriptor(
                identity,
                TypeKind.UNION,
                doc=doc,
                variants=variants,
                exclusive=declaration.exclusive,
            )

        supertypes = [
            self.identity_of(expression, scope)
            for expression in ([declaration.extends] if declaration.extends else [])
            + declaration.implements
        ]
        return TypeDescriptor(
            identity,
            TypeKind.COMPOSITE,
            doc=doc,
            members=self._members(declaration, scope),
            supertypes=tuple(supertype for supertype in supertypes if supertype != OBJECT),
        )

    def _raw_bindings(self, declaration: TypeDeclaration) -> tuple[TypeIdentity, ...]:
        """Bind each type variable of a raw use to its bound, or Object."""
        bound_identities: list[TypeIdentity] = []
        recursive = declaration.name in self._binding
        self._binding.add(declaration.name)
        try:
            for _, bound in declaration.parameters:
                bound_identities.append(OBJECT if recursive else self._bound(declaration, bound))
        finally:
            if not recursive:
                self._binding.discard(declaration.name)
        return tuple(bound_identities)

    def _bound(self, declaration: TypeDeclaration, bound: str | None) -> TypeIdentity:
        if bound is None:
            return OBJECT
        try:
            expression = parse_type_expression(bound)
        except ValueError:
            return OBJECT
        # A bound over the declaration's own variables (T extends Node<T>) has no concrete form
        if _mentions(expression, {name for name, _ in declaration.parameters}):
            return OBJECT

        scope = TypeScope(package=declaration.package, owner=declaration.name)
        identity = self._identity(expression, scope)
        try:
            self.descriptor(identity)
        except UnsupportedTypeError:
            return OBJECT
        return identity

    def _members(
        self, declaration: TypeDeclaration, scope: TypeScope
    ) -> tuple[MemberDescriptor, ...]:
        members: dict[str, MemberDescriptor] = {}
        is_record = declaration.kind == DeclarationKind.RECORD

        for declared in declaration.fields:
            if not self._visible(declared.visibility):
                continue
            identity, optional = self._member_type(declared.type, scope)
            required = declared.required
            if required is None:
                required = is_record and not optional
            members[declared.name] = MemberDescriptor(
                declared.name,
                identity,
                required=required,
                doc=self.extractor.extract(declared.doc),
                has_default=declared.has_default,
                default=declared.default,
            )

        for accessor in declaration.accessors:
            if not self._visible(accessor.visibility):
                continue
            name = accessor.property_name
            identity, _ = self._member_type(accessor.type, scope)
            doc = self.extractor.extract(accessor.doc)
            existing = members.get(name)
            if existing is None:
                members[name] = MemberDescriptor(
                    name, identity, required=bool(accessor.required), doc=doc
                )
                continue
            # Field keeps its position, the accessor refines it
            members[name] = MemberDescriptor(
                name,
                identity,
                required=existing.required or bool(accessor.required),
                doc=existing.doc if doc.is_empty else doc,
                has_default=existing.has_default,
                default=existing.default,
            )

        return tuple(members.values())

    def _visible(self, visibility: Visibility) -> bool:
        return self.settings.include_private or visibility.is_exported

    def _member_type(self, text: str, scope: TypeScope) -> tuple[TypeIdentity, bool]:
        """Resolve *text*, also reporting whether it was wrapped in Optional."""
        try:
            expression = parse_type_expression(text)
        except ValueError as exc:
            identity = TypeIdentity(text.strip())
            self._unsupported.setdefault(
                identity,
                UnsupportedTypeError(str(identity), f"cannot parse type expression: {exc}"),
            )
            return identity, False

        optional = (
            not expression.is_wildcard
            and expression.array_depth == 0
            and expression.name not in scope.bindings
            and self._resolve_name(expression.name, scope) == OPTIONAL_TYPE
        )
        return self._identity(expression, scope), optional

    def _identity(self, expression: TypeExpression, scope: TypeScope) -> TypeIdentity:
        if expression.is_wildcard:
            if expression.bound is None:
                return TypeIdentity(WILDCARD_TYPE_NAME)
            return self._identity(expression.bound, scope)

        depth = expression.array_depth
        if expression.name in scope.bindings and not expression.arguments:
            identity = scope.bindings[expression.name]
        elif expression.name == "byte" and depth:
            identity = TypeIdentity(BYTE_ARRAY_TYPE)
            depth -= 1
        else:
            name = self._resolve_name(expression.name, scope)
            arguments = tuple(self._identity(argument, scope) for argument in expression.arguments)
            if name == OPTIONAL_TYPE and len(arguments) <= 1:
                identity = arguments[0] if arguments else OBJECT
            else:
                identity = TypeIdentity(name, arguments)

        for _ in range(depth):
            identity = TypeIdentity(ARRAY_TYPE_NAME, (identity,))
        return identity

    def _resolve_name(self, name: str, scope: TypeScope) -> str:
        """Resolve a written type name to a declaration or built-in name.

        Lookup order: nested member of the declaring type, exact qualified
        name, same package, built-ins, then a unique simple name. Names
        that resolve to nothing are returned unchanged.
        """
        prefixes = []
        if scope.owner:
            prefixes.append(f"{scope.owner}$")
        prefixes.append("")
        if scope.package:
            prefixes.append(f"{scope.package}.")

        for prefix in prefixes:
            for candidate in _nested_variants(name):
                if self.model.get(prefix + candidate) is not None:
                    return prefix + candidate

        builtin = canonical_builtin(name)
        if builtin is not None:
            return builtin

        if "." not in name:
            matches = self.model.find_simple(name)
            if len(matches) == 1:
                return matches[0].name
        return name


def _mentions(expression: TypeExpression, names: set[str]) -> bool:
    """Whether *expression* refers to any of the type variables in *names*."""
    if expression.name in names:
        return True
    if expression.bound is not None and _mentions(expression.bound, names):
        return True
    return any(_mentions(argument, names) for argument in expression.arguments)


def _nested_variants(name: str) -> list[str]:
    """``a.Outer.Inner`` -> ``a.Outer.Inner``, ``a.Outer$Inner``, ``a$Outer$Inner``."""
    parts = name.split(".")
    return [
        ".".join(parts[:index]) + "".join(f"${part}" for part in parts[index:])
        for index in range(len(parts), 0, -1)
    ]

