"""Unit tests for the Type Model Adapter."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from jsondoclet.adapter import TypeModelAdapter, TypeScope
from jsondoclet.descriptors import TypeIdentity, TypeKind
from jsondoclet.errors import ModelError, UnsupportedTypeError
from jsondoclet.schemas import TypeModel
from jsondoclet.settings import GeneratorSettings

STRING = TypeIdentity("java.lang.String")
INTEGER = TypeIdentity("java.lang.Integer")
OBJECT = TypeIdentity("java.lang.Object")

BOX = {
    "name": "com.example.Box",
    "type_parameters": ["T"],
    "fields": [{"name": "value", "type": "T", "required": True}],
}


class TestIdentityResolution:
    """Tests for resolving type expressions to identities."""

    def test_builtin_aliases(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        assert adapter.identity_of("int") == INTEGER
        assert adapter.identity_of("String") == STRING
        assert adapter.identity_of("java.lang.String") == STRING
        assert adapter.identity_of("List<String>") == TypeIdentity("java.util.List", (STRING,))

    def test_same_package_declaration(self, make_model: Callable[..., TypeModel]) -> None:
        """Simple names resolve within the declaring package first."""
        model = make_model({"name": "a.Item"}, {"name": "b.Item"})
        adapter = TypeModelAdapter(model)
        assert adapter.identity_of("Item", TypeScope(package="b")) == TypeIdentity("b.Item")

    def test_unique_simple_name(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model({"name": "com.example.Order"}))
        assert adapter.identity_of("Order") == TypeIdentity("com.example.Order")

    def test_nested_type(self, make_model: Callable[..., TypeModel]) -> None:
        """Outer.Inner and bare Inner inside Outer both find Outer$Inner."""
        model = make_model({"name": "a.Outer"}, {"name": "a.Outer$Inner"}, {"name": "b.Inner"})
        adapter = TypeModelAdapter(model)
        inner = TypeIdentity("a.Outer$Inner")
        assert adapter.identity_of("a.Outer.Inner") == inner
        assert adapter.identity_of("Outer.Inner", TypeScope(package="a")) == inner
        assert adapter.identity_of("Inner", TypeScope(package="a", owner="a.Outer")) == inner

    def test_arrays(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        assert adapter.identity_of("String[]") == TypeIdentity("[]", (STRING,))
        assert adapter.identity_of("byte[]") == TypeIdentity("byte[]")
        assert adapter.identity_of("byte[][]") == TypeIdentity("[]", (TypeIdentity("byte[]"),))

    def test_optional_unwrapped(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        assert adapter.identity_of("Optional<String>") == STRING
        assert adapter.identity_of("Optional") == OBJECT

    def test_bounded_wildcard_uses_bound(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model({"name": "a.Shape"}))
        assert adapter.identity_of("List<? extends Shape>") == TypeIdentity(
            "java.util.List", (TypeIdentity("a.Shape"),)
        )
        assert adapter.identity_of("? super Shape") == TypeIdentity("a.Shape")

    def test_type_variable_binding(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        scope = TypeScope(bindings={"T": STRING})
        assert adapter.identity_of("List<T>", scope) == TypeIdentity("java.util.List", (STRING,))


class TestDescriptors:
    """Tests for descriptor construction."""

    def test_primitive(self, make_model: Callable[..., TypeModel]) -> None:
        descriptor = TypeModelAdapter(make_model()).descriptor(TypeIdentity("java.lang.Long"))
        assert descriptor.kind == TypeKind.PRIMITIVE
        assert (descriptor.json_type, descriptor.format) == ("integer", "int64")

    def test_set_is_unique_collection(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        descriptor = adapter.descriptor(adapter.identity_of("Set<String>"))
        assert descriptor.kind == TypeKind.COLLECTION
        assert descriptor.element == STRING
        assert descriptor.unique_items

    def test_raw_map_defaults(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model())
        descriptor = adapter.descriptor(adapter.identity_of("Map"))
        assert (descriptor.key, descriptor.value) == (STRING, OBJECT)

    def test_generic_instantiations_are_distinct(self, make_model: Callable[..., TypeModel]) -> None:
        """Box<String> and Box<Integer> yield different member types."""
        adapter = TypeModelAdapter(make_model(BOX))
        strings = adapter.descriptor(adapter.identity_of("Box<String>"))
        integers = adapter.descriptor(adapter.identity_of("Box<Integer>"))
        assert strings.identity != integers.identity
        assert strings.members[0].type == STRING
        assert integers.members[0].type == INTEGER

    def test_raw_generic_binds_bound(self, make_model: Callable[..., TypeModel]) -> None:
        model = make_model(
            {"name": "a.Shape"},
            {
                "name": "a.Holder",
                "type_parameters": ["S extends Shape", "T"],
                "fields": [{"name": "shape", "type": "S"}, {"name": "other", "type": "T"}],
            },
        )
        adapter = TypeModelAdapter(model)
        members = adapter.descriptor(TypeIdentity("a.Holder")).members
        assert [member.type for member in members] == [TypeIdentity("a.Shape"), OBJECT]

    def test_self_referential_bound_terminates(self, make_model: Callable[..., TypeModel]) -> None:
        model = make_model(
            {"name": "a.Node", "type_parameters": ["T extends Node"], "fields": [{"name": "next", "type": "T"}]}
        )
        adapter = TypeModelAdapter(model)
        descriptor = adapter.descriptor(TypeIdentity("a.Node"))
        assert descriptor.members[0].type == TypeIdentity("a.Node")

    def test_record_components_required(self, make_model: Callable[..., TypeModel]) -> None:
        """Record components are required unless Optional; explicit flags win."""
        model = make_model(
            {
                "name": "a.Person",
                "kind": "record",
                "fields": [
                    {"name": "name", "type": "String"},
                    {"name": "nickname", "type": "Optional<String>"},
                    {"name": "age", "type": "int", "required": False},
                ],
            }
        )
        members = TypeModelAdapter(model).descriptor(TypeIdentity("a.Person")).members
        assert [(member.name, member.required) for member in members] == [
            ("name", True),
            ("nickname", False),
            ("age", False),
        ]
        assert members[1].type == STRING

    def test_class_fields_optional_by_default(self, make_model: Callable[..., TypeModel]) -> None:
        model = make_model({"name": "a.Point", "fields": [{"name": "x", "type": "int"}]})
        members = TypeModelAdapter(model).descriptor(TypeIdentity("a.Point")).members
        assert not members[0].required

    def test_accessors_merge_with_fields(self, make_model: Callable[..., TypeModel]) -> None:
        """An accessor refines the field exposing the same property."""
        model = make_model(
            {
                "name": "a.Account",
                "fields": [
                    {"name": "id", "type": "long", "doc": "Account id."},
                    {"name": "owner", "type": "String"},
                ],
                "accessors": [
                    {"name": "getOwner", "type": "String", "required": True, "doc": "Owner."},
                    {"name": "isActive", "type": "boolean"},
                    {"name": "getId", "type": "long"},
                ],
            }
        )
        members = TypeModelAdapter(model).descriptor(TypeIdentity("a.Account")).members
        assert [member.name for member in members] == ["id", "owner", "active"]
        assert members[0].doc.description == "Account id."
        assert members[1].required
        assert members[1].doc.description == "Owner."

    def test_private_members_filtered(self, make_model: Callable[..., TypeModel]) -> None:
        declaration = {
            "name": "a.Secret",
            "fields": [
                {"name": "visible", "type": "int"},
                {"name": "hidden", "type": "int", "visibility": "private"},
                {"name": "internal", "type": "int", "visibility": "package"},
            ],
        }
        model = make_model(declaration)
        identity = TypeIdentity("a.Secret")

        default = TypeModelAdapter(model).descriptor(identity)
        assert [member.name for member in default.members] == ["visible"]

        everything = TypeModelAdapter(model, GeneratorSettings(include_private=True)).descriptor(identity)
        assert [member.name for member in everything.members] == ["visible", "hidden", "internal"]

    def test_supertypes(self, make_model: Callable[..., TypeModel]) -> None:
        model = make_model(
            {"name": "a.Shape", "kind": "interface"},
            {"name": "a.Named", "kind": "interface"},
            {"name": "a.Circle", "extends": "Object", "implements": ["Shape", "Named"]},
        )
        descriptor = TypeModelAdapter(model).descriptor(TypeIdentity("a.Circle"))
        assert descriptor.supertypes == (TypeIdentity("a.Shape"), TypeIdentity("a.Named"))

    def test_enum_and_union(self, make_model: Callable[..., TypeModel]) -> None:
        model = make_model(
            {"name": "a.Color", "kind": "enum", "constants": ["RED", {"name": "GREEN", "value": "green"}]},
            {"name": "a.Pet", "kind": "union", "variants": ["Cat", "Dog"], "exclusive": True},
            {"name": "a.Cat"},
            {"name": "a.Dog"},
        )
        adapter = TypeModelAdapter(model)
        color = adapter.descriptor(TypeIdentity("a.Color"))
        assert color.kind == TypeKind.ENUM
        assert [value.value for value in color.enum_values] == ["RED", "green"]

        pet = adapter.descriptor(TypeIdentity("a.Pet"))
        assert pet.kind == TypeKind.UNION
        assert pet.exclusive
        assert pet.variants == (TypeIdentity("a.Cat"), TypeIdentity("a.Dog"))


class TestUnsupportedTypes:
    """Tests for per-type failures."""

    @pytest.mark.parametrize(
        ("expression", "reason"),
        [
            ("?", "unbounded wildcard"),
            ("Missing", "not declared"),
            ("List<String, String>", "expected 1 type argument"),
            ("String<Integer>", "takes no type arguments"),
            ("Box<String, String>", "expected 1 type argument"),
            ("Optional<String, String>", "exactly one type argument"),
            ("List<", "cannot parse"),
        ],
    )
    def test_unsupported(
        self, make_model: Callable[..., TypeModel], expression: str, reason: str
    ) -> None:
        adapter = TypeModelAdapter(make_model(BOX))
        identity = adapter.identity_of(expression)
        with pytest.raises(UnsupportedTypeError, match=reason):
            adapter.descriptor(identity)

    def test_ambiguous_simple_name(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model({"name": "a.Item"}, {"name": "b.Item"}))
        with pytest.raises(UnsupportedTypeError, match="ambiguous"):
            adapter.descriptor(adapter.identity_of("Item"))

    def test_reachable_records_failures(self, make_model: Callable[..., TypeModel]) -> None:
        """Unsupported members are collected, the rest is still reachable."""
        model = make_model(
            {
                "name": "a.Bag",
                "fields": [
                    {"name": "anything", "type": "?"},
                    {"name": "items", "type": "List<Item>"},
                ],
            },
            {"name": "a.Item", "fields": [{"name": "owner", "type": "Bag"}]},
        )
        adapter = TypeModelAdapter(model)
        reachable = adapter.reachable([TypeIdentity("a.Bag")])
        assert [str(descriptor.identity) for descriptor in reachable] == [
            "a.Bag",
            "java.util.List<a.Item>",
            "a.Item",
        ]
        assert list(adapter.failures) == [TypeIdentity("?")]


class TestRootIdentity:
    """Tests for root name resolution."""

    def test_qualified_and_simple(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model({"name": "a.Point"}))
        assert adapter.root_identity("a.Point") == TypeIdentity("a.Point")
        assert adapter.root_identity("Point") == TypeIdentity("a.Point")

    def test_generic_root(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model(BOX))
        assert adapter.root_identity("Box<String>") == TypeIdentity("com.example.Box", (STRING,))

    def test_unknown_root(self, make_model: Callable[..., TypeModel]) -> None:
        with pytest.raises(ModelError, match="not declared"):
            TypeModelAdapter(make_model()).root_identity("Nope")

    def test_ambiguous_root(self, make_model: Callable[..., TypeModel]) -> None:
        adapter = TypeModelAdapter(make_model({"name": "a.Item"}, {"name": "b.Item"}))
        with pytest.raises(ModelError, match="ambiguous"):
            adapter.root_identity("Item")
