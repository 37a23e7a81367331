"""
Unit tests for type descriptors.

Tests cover:
- Field and argument coercion
- Dictionary definitions
- Snapshots
"""

import pytest
from graphql import GraphQLList, GraphQLNonNull, GraphQLString

from engine.typegraph.schema.types import (
    EnumTypeDef,
    FieldDef,
    InputObjectTypeDef,
    NamedResolver,
    ObjectTypeDef,
    TypeKind,
    coerce_field,
    named_type_name,
    type_def_from_dict,
    type_ref,
)


def resolve(source, info, **args):
    return None


class TestTypeRef:
    """Tests for type references."""

    def test_graphql_types(self):
        assert type_ref(GraphQLNonNull(GraphQLList(GraphQLString))) == "[String]!"

    def test_descriptor(self):
        assert type_ref(ObjectTypeDef("Author")) == "Author"

    def test_rejects_empty_and_unknown(self):
        with pytest.raises(ValueError):
            type_ref("  ")
        with pytest.raises(TypeError):
            type_ref(3)

    def test_named_type_name(self):
        assert named_type_name("[Pet!]!") == "Pet"


class TestCoerceField:
    """Tests for coerce_field."""

    def test_mapping(self):
        field = coerce_field(
            "books",
            {"type": "[Book]", "args": {"first": {"type": "Int", "default": 5}}, "resolve": resolve},
        )
        assert field.args["first"].default == 5
        assert field.resolver.base is resolve

    def test_field_def_renamed(self):
        assert coerce_field("b", FieldDef("a", "Int")).name == "b"

    def test_mapping_without_type(self):
        with pytest.raises(TypeError, match="has no 'type'"):
            coerce_field("books", {"resolve": resolve})

    def test_empty_field_name(self):
        with pytest.raises(ValueError):
            FieldDef("", "Int")


class TestTypeDefs:
    """Tests for type definition dataclasses."""

    def test_enum_from_names(self):
        assert EnumTypeDef("Color", values=("RED", "BLUE")).values == {"RED": "RED", "BLUE": "BLUE"}

    def test_clone_is_shallow_copy_of_fields(self):
        author = ObjectTypeDef("Author", fields={"name": "String"})
        clone = author.clone()
        clone.add_fields({"bio": "String"})
        assert not author.has_field("bio")

    def test_extend_field(self):
        author = ObjectTypeDef("Author", fields={"name": "String"})
        author.extend_field("name", type="String!")
        assert author.get_field("name").type == "String!"
        with pytest.raises(KeyError):
            author.extend_field("missing", type="Int")

    def test_named_resolver_to_field(self):
        resolver = NamedResolver("findOne", "Author", {"id": "ID"}, resolve)
        field = resolver.to_field("author")
        assert field.name == "author"
        assert field.args["id"].type == "ID"
        assert field.resolver.compose() is resolve

    def test_to_dict_is_deterministic(self):
        author = ObjectTypeDef("Author", fields={"name": "String"}, interfaces=("Node",))
        assert author.to_dict() == {
            "kind": "object",
            "name": "Author",
            "fields": {"name": {"type": "String"}},
            "interfaces": ["Node"],
        }


class TestTypeDefFromDict:
    """Tests for type_def_from_dict."""

    def test_input_object(self):
        type_def = type_def_from_dict(
            {"kind": "input_object", "name": "AuthorInput", "fields": {"name": "String!"}}
        )
        assert isinstance(type_def, InputObjectTypeDef)
        assert type_def.kind is TypeKind.INPUT_OBJECT

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="Illegal type definition kind"):
            type_def_from_dict({"kind": "table", "name": "A"})

    def test_missing_name(self):
        with pytest.raises(ValueError, match="Illegal type definition"):
            type_def_from_dict({"kind": "object"})
