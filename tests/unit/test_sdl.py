"""
Unit tests for SDL parsing.

Tests cover:
- Named type definitions of every kind
- Descriptions, defaults and deprecation
- Parse errors with code frames
- Rejection of non-type definitions
"""

import pytest
from graphql import GraphQLSyntaxError, Source
from graphql.pyutils import Undefined

from engine.typegraph.errors import ParseFailureError
from engine.typegraph.schema import sdl
from engine.typegraph.schema.sdl import PARSE_ERROR_HEADER, parse_type_defs
from engine.typegraph.schema.types import (
    EnumTypeDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    ObjectTypeDef,
    ScalarTypeDef,
    UnionTypeDef,
)


class TestParseTypeDefs:
    """Tests for successful parsing."""

    def test_object_type(self):
        """Object types keep fields, interfaces and argument defaults."""
        (person,) = parse_type_defs(
            """
            "A person"
            type Person implements Node & Named {
              name: String!
              friends(first: Int = 10): [Person!]
            }
            """
        )
        assert isinstance(person, ObjectTypeDef)
        assert person.description == "A person"
        assert person.interfaces == ("Node", "Named")
        assert person.get_field("name").type == "String!"
        friends = person.get_field("friends")
        assert friends.type == "[Person!]"
        assert friends.args["first"].type == "Int"
        assert friends.args["first"].default == 10

    def test_every_kind(self):
        """Each named definition kind maps to its descriptor."""
        type_defs = parse_type_defs(
            """
            interface Named { name: String }
            union Pet = Cat | Dog
            input PetInput { name: String = "Rex" }
            enum Color { RED GREEN }
            scalar Url
            """
        )
        kinds = [type(t) for t in type_defs]
        assert kinds == [InterfaceTypeDef, UnionTypeDef, InputObjectTypeDef, EnumTypeDef, ScalarTypeDef]
        assert type_defs[1].types == ("Cat", "Dog")
        assert type_defs[2].get_field("name").default == "Rex"
        assert list(type_defs[3].values) == ["RED", "GREEN"]

    def test_deprecation(self):
        """@deprecated sets the reason; without one the standard reason is used."""
        (author,) = parse_type_defs(
            """
            type Author {
              old: String @deprecated
              legacy: String @deprecated(reason: "Use name")
              name: String
            }
            """
        )
        assert author.get_field("old").deprecation_reason == "No longer supported"
        assert author.get_field("legacy").deprecation_reason == "Use name"
        assert author.get_field("name").deprecation_reason is None

    def test_no_default_is_undefined(self):
        """Arguments without a default keep Undefined."""
        (query,) = parse_type_defs("type Search { hits(term: String): [String] }")
        assert query.get_field("hits").args["term"].default is Undefined


class TestParseErrors:
    """Tests for malformed definitions."""

    def test_syntax_error_has_code_frame(self):
        """A located syntax error carries line, column and a code frame."""
        body = "type A {\n  a: String\n  b String\n}"
        with pytest.raises(ParseFailureError) as exc:
            parse_type_defs(body)

        error = exc.value
        assert error.line == 3
        assert error.column == 5
        assert error.code == "PARSE_FAILURE"
        assert error.message.startswith(PARSE_ERROR_HEADER)
        assert "> 3 |   b String" in error.excerpt
        assert "  1 | type A {" in error.excerpt
        assert error.excerpt in error.message

    def test_code_frame_window(self):
        """The frame shows the configured number of lines around the error."""
        body = "\n".join(f"type T{i} {{ f: Int }}" for i in range(1, 10)) + "\ntype Broken {"
        with pytest.raises(ParseFailureError) as exc:
            parse_type_defs(body, lines_above=2, lines_below=2)
        frame_lines = [line for line in exc.value.excerpt.split("\n") if "|" in line and "^" not in line]
        assert len(frame_lines) == 3

    def test_unlocated_error_propagates_unchanged(self, monkeypatch):
        """Parser errors without a location are re-raised as-is."""
        original = GraphQLSyntaxError(Source("x"), 0, "boom")
        original.locations = None

        def fail(source):
            raise original

        monkeypatch.setattr(sdl, "parse", fail)
        with pytest.raises(GraphQLSyntaxError) as exc:
            parse_type_defs("type A { a: Int }")
        assert exc.value is original

    def test_schema_definition_rejected(self):
        """Only named type definitions are accepted."""
        with pytest.raises(ParseFailureError, match="only named types are supported") as exc:
            parse_type_defs("type A { a: Int }\nschema { query: A }")
        assert exc.value.line == 2

    def test_executable_definition_rejected(self):
        """Queries are not type definitions."""
        with pytest.raises(ParseFailureError, match="OperationDefinition|operation_definition"):
            parse_type_defs("{ allPerson { totalCount } }")
