"""
Unit tests for the createResolvers overlay.

Tests cover:
- Adding new fields
- Extending existing fields and chaining resolvers
- Warnings for missing, non-object and mismatched targets
"""

from types import SimpleNamespace

import pytest

from engine.typegraph.reporting import DiagnosticKind
from engine.typegraph.schema.overlay import ResolverPatch, apply_resolver_patches
from engine.typegraph.schema.types import EnumTypeDef, FieldDef, ObjectTypeDef


def shout(source, info, **args):
    return info.original_resolver(source, info, **args).upper()


@pytest.fixture
def author_registry(registry):
    registry.register(
        ObjectTypeDef(
            "Author",
            fields={"name": "String", "born": FieldDef("born", "Int", description="Year")},
        )
    )
    registry.register(EnumTypeDef("Genre", values=["POETRY"]))
    return registry


def resolve_field(registry, type_name, field_name, source):
    resolver = registry.get_object(type_name).get_field(field_name).resolver.compose()
    return resolver(source, SimpleNamespace(field_name=field_name, context=None))


class TestResolverPatch:
    """Tests for ResolverPatch.coerce."""

    def test_callable(self):
        assert ResolverPatch.coerce(shout) == ResolverPatch(resolve=shout)

    def test_mapping(self):
        patch = ResolverPatch.coerce({"type": " [String] ", "description": "Tags"})
        assert patch.type == "[String]"
        assert patch.description == "Tags"

    def test_rejects_other_values(self):
        with pytest.raises(TypeError):
            ResolverPatch.coerce(42)


class TestApplyResolverPatches:
    """Tests for apply_resolver_patches."""

    def test_adds_new_field(self, author_registry, reporter):
        """A new field is added with the patch resolver as its base."""
        applied = apply_resolver_patches(
            author_registry,
            {"Author": {"slug": {"type": "String!", "resolve": lambda s, i, **a: "ada"}}},
            reporter,
        )
        assert applied == 1
        assert author_registry.get_object("Author").get_field("slug").type == "String!"
        assert resolve_field(author_registry, "Author", "slug", {}) == "ada"

    def test_new_field_without_type_warns(self, author_registry, reporter):
        applied = apply_resolver_patches(author_registry, {"Author": {"slug": shout}}, reporter)
        assert applied == 0
        assert not author_registry.get_object("Author").has_field("slug")
        assert reporter.warnings[0].kind is DiagnosticKind.INCOMPLETE_PATCH

    def test_extends_existing_resolver(self, author_registry, reporter):
        """A replacement resolver sees the previous one as original_resolver."""
        apply_resolver_patches(author_registry, {"Author": {"name": {"resolve": shout}}}, reporter)
        assert resolve_field(author_registry, "Author", "name", {"name": "ada"}) == "ADA"
        assert reporter.warnings == []

    def test_patches_stack(self, author_registry, reporter):
        """Each patch wraps the previous ones."""

        def exclaim(source, info, **args):
            return info.original_resolver(source, info, **args) + "!"

        apply_resolver_patches(author_registry, {"Author": {"name": shout}}, reporter)
        apply_resolver_patches(author_registry, {"Author": {"name": exclaim}}, reporter)
        assert resolve_field(author_registry, "Author", "name", {"name": "ada"}) == "ADA!"

    def test_same_type_is_allowed(self, author_registry, reporter):
        apply_resolver_patches(
            author_registry, {"Author": {"born": {"type": "Int", "description": "Birth year"}}}, reporter
        )
        born = author_registry.get_object("Author").get_field("born")
        assert born.description == "Birth year"
        assert reporter.warnings == []

    def test_type_mismatch_warns(self, author_registry, reporter):
        """Changing the type of a local field is refused."""
        apply_resolver_patches(author_registry, {"Author": {"born": {"type": "String"}}}, reporter)
        assert author_registry.get_object("Author").get_field("born").type == "Int"
        (warning,) = reporter.warnings
        assert warning.kind is DiagnosticKind.TYPE_MISMATCH
        assert "Use `createTypes` to override type fields" in warning.message

    def test_foreign_type_can_be_retyped(self, author_registry, reporter):
        """Fields of third-party types may change type."""
        author_registry.add_foreign(ObjectTypeDef("Weather", fields={"temp": "Float"}))
        apply_resolver_patches(author_registry, {"Weather": {"temp": {"type": "String"}}}, reporter)
        assert author_registry.get_object("Weather").get_field("temp").type == "String"
        assert reporter.warnings == []

    def test_missing_type_warns(self, author_registry, reporter):
        apply_resolver_patches(author_registry, {"Book": {"title": shout}}, reporter)
        (warning,) = reporter.warnings
        assert warning.kind is DiagnosticKind.MISSING_TARGET
        assert "`Book`" in warning.message

    def test_non_object_type_warns(self, author_registry, reporter):
        apply_resolver_patches(author_registry, {"Genre": {"POETRY": shout}}, reporter)
        (warning,) = reporter.warnings
        assert warning.kind is DiagnosticKind.UNKNOWN_TARGET_TYPE

    def test_args_replaced(self, author_registry, reporter):
        apply_resolver_patches(
            author_registry,
            {"Author": {"name": {"args": {"upper": {"type": "Boolean", "default": False}}}}},
            reporter,
        )
        arg = author_registry.get_object("Author").get_field("name").args["upper"]
        assert arg.type == "Boolean"
        assert arg.default is False
