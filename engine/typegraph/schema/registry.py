"""
Type Registry for typegraph.

The TypeRegistry is the in-progress schema of a single build. It provides:
- Registration of caller-supplied types with reserved-name validation
- Internal registration for built-in and generated types
- Gap-filling merge of inferred types
- Lookup, snapshotting and fingerprinting

Invariants:
    - One registry per build; builds never share or mutate another's registry
    - Caller-supplied names never collide with Node, built-in scalars or
      the generated *FilterInput / *SortInput suffixes
    - Every registered type is kept in the final schema even if unreferenced
    - Generated types are owned by the node type that caused them, so
      re-enrichment can discard and recreate them
    - child<T>/children<T> fields are recorded per node type and replaced,
      never accumulated, when the type is enriched again

Example:
    >>> registry = TypeRegistry()
    >>> registry.register(ObjectTypeDef("Author", fields={"name": "String"}))
    'Author'
    >>> registry.get("Author").get_field("name").type
    'String'
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set

from graphql import GraphQLError, assert_name

from ..errors import NameConflictError
from .types import (
    FIELD_BEARING,
    EnumTypeDef,
    FieldSpec,
    InterfaceTypeDef,
    ObjectTypeDef,
    TypeDef,
    UnionTypeDef,
    coerce_field,
    named_type_name,
)

logger = logging.getLogger(__name__)

NODE_INTERFACE = "Node"
RESERVED_SUFFIXES = ("FilterInput", "SortInput")
RESERVED_SCALARS = ("Boolean", "Date", "Float", "ID", "Int", "JSON", "String")
SPECIFIED_SCALARS = frozenset(("Boolean", "Float", "ID", "Int", "String"))


def check_type_name(name: str) -> None:
    """Validate a caller-supplied type name.

    Raises:
        NameConflictError: Naming the rule that was violated
    """
    if name == NODE_INTERFACE:
        raise NameConflictError(
            "The GraphQL type `Node` is reserved for internal use.",
            type_name=name,
            rule="reserved-node",
        )
    if name.endswith(RESERVED_SUFFIXES):
        raise NameConflictError(
            'GraphQL type names ending with "FilterInput" or "SortInput" are '
            f"reserved for internal use. Please rename `{name}`.",
            type_name=name,
            rule="reserved-suffix",
        )
    if name in RESERVED_SCALARS:
        raise NameConflictError(
            f"The GraphQL type `{name}` is reserved for internal use by built-in scalar types.",
            type_name=name,
            rule="reserved-scalar",
        )
    try:
        assert_name(name)
    except GraphQLError as e:
        raise NameConflictError(
            f"Invalid GraphQL type name `{name}`: {e.message}",
            type_name=name,
            rule="invalid-name",
        ) from e


def default_resolve_type(value: Any, info: Any, abstract_type: Any) -> Optional[str]:
    """Pick the concrete type of a node-like value from its internal type tag."""
    internal = value.get("internal") if isinstance(value, Mapping) else getattr(value, "internal", None)
    if isinstance(internal, Mapping):
        return internal.get("type")
    return getattr(internal, "type", None)


class TypeRegistry:
    """Working set of all type descriptors for one build.

    Attributes:
        query_type_name: Name of the shared root query type
    """

    def __init__(self, query_type_name: str = "Query") -> None:
        """Initialize a registry holding only the root query type."""
        self.query_type_name = query_type_name
        self._types: Dict[str, TypeDef] = {}
        self._must_have: List[str] = []
        self._generated: Dict[str, Set[str]] = {}
        self._shared: Set[str] = set()
        self._relationship_fields: Dict[str, Set[str]] = {}
        self._types[query_type_name] = ObjectTypeDef(query_type_name)

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)

    @property
    def query(self) -> ObjectTypeDef:
        """The root query type."""
        return self._types[self.query_type_name]  # type: ignore[return-value]

    @property
    def must_have(self) -> List[str]:
        """Names that must appear in the final schema even if unreferenced."""
        return list(self._must_have)

    def register(self, type_def: TypeDef) -> str:
        """Register a caller-supplied type.

        Args:
            type_def: The type to register

        Returns:
            The registered type name

        Raises:
            NameConflictError: If the name is reserved, invalid or taken
        """
        name = type_def.name
        check_type_name(name)
        if name in self._types:
            raise NameConflictError(
                f"Type `{name}` is already defined. Type names must be unique.",
                type_name=name,
                rule="duplicate-name",
            )
        self._install(type_def)
        logger.debug(f"Registered type: {name} ({type_def.kind.value})")
        return name

    def add_internal(self, type_def: TypeDef) -> str:
        """Add a built-in type, bypassing name validation.

        An existing type of the same name is replaced.
        """
        self._install(type_def)
        return type_def.name

    def add_generated(self, type_def: TypeDef, owner: Optional[str] = None) -> str:
        """Add a synthesized type.

        With an `owner` the type is discarded by remove_generated(owner);
        without one it is shared by all node types and kept.

        Raises:
            NameConflictError: If a caller-supplied type already has the name
        """
        name = type_def.name
        if name in self._types and not self.is_generated(name):
            raise NameConflictError(
                f"Type `{name}` clashes with a type generated for `{owner or 'all node types'}`. "
                "Please rename it.",
                type_name=name,
                rule="generated-name",
            )
        self._install(type_def)
        if owner is None:
            self._shared.add(name)
        else:
            self._generated.setdefault(owner, set()).add(name)
        return name

    def ensure_shared(self, type_def: TypeDef) -> str:
        """Add a shared generated type unless it already exists."""
        if type_def.name in self._shared:
            return type_def.name
        return self.add_generated(type_def)

    def is_generated(self, name: str) -> bool:
        return name in self._shared or any(name in names for names in self._generated.values())

    def add_foreign(self, type_def: TypeDef) -> str:
        """Add a type imported from a third-party schema.

        Raises:
            NameConflictError: If the name is already registered
        """
        if type_def.name in self._types:
            raise NameConflictError(
                f"Third-party type `{type_def.name}` collides with an existing type.",
                type_name=type_def.name,
                rule="duplicate-name",
            )
        type_def.foreign = True
        self._install(type_def)
        logger.debug(f"Imported third-party type: {type_def.name}")
        return type_def.name

    def _install(self, type_def: TypeDef) -> None:
        if isinstance(type_def, (InterfaceTypeDef, UnionTypeDef)) and type_def.resolve_type is None:
            type_def.resolve_type = default_resolve_type
        self._types[type_def.name] = type_def
        if type_def.name not in self._must_have:
            self._must_have.append(type_def.name)

    def remove_generated(self, owner: str) -> List[str]:
        """Drop every type previously generated for `owner`.

        Returns:
            Names of the removed types
        """
        owned = self._generated.pop(owner, set())
        # Nested filter types can be shared with other owners.
        still_owned = set().union(*self._generated.values())
        removed = sorted(owned - still_owned)
        for name in removed:
            self._types.pop(name, None)
            if name in self._must_have:
                self._must_have.remove(name)
        return removed

    def generated_for(self, owner: str) -> Set[str]:
        return set(self._generated.get(owner, set()))

    def record_relationship_fields(self, type_name: str, field_names: Iterable[str]) -> None:
        self._relationship_fields[type_name] = set(field_names)

    def take_relationship_fields(self, type_name: str) -> Set[str]:
        """Forget and return the relationship fields recorded for `type_name`."""
        return self._relationship_fields.pop(type_name, set())

    def merge_inferred(self, type_def: TypeDef) -> List[str]:
        """Accept an inferred type, filling gaps only.

        A new name is registered with full validation. For an existing
        field-bearing type, only fields (and interfaces) it lacks are added;
        fields already present are never replaced.

        Returns:
            Names of the fields that were added

        Raises:
            NameConflictError: If a new name is invalid, or the existing type
                has a different kind
        """
        existing = self._types.get(type_def.name)
        if existing is None:
            self.register(type_def)
            return list(getattr(type_def, "fields", {}))

        if existing.kind is not type_def.kind or not isinstance(existing, FIELD_BEARING):
            raise NameConflictError(
                f"Inferred {type_def.kind.value} type `{type_def.name}` conflicts with "
                f"existing {existing.kind.value} type of the same name.",
                type_name=type_def.name,
                rule="kind-mismatch",
            )

        added = []
        for field_name, field_def in type_def.fields.items():  # type: ignore[union-attr]
            if existing.has_field(field_name):
                continue
            existing.fields[field_name] = field_def
            added.append(field_name)
        if isinstance(existing, ObjectTypeDef) and isinstance(type_def, ObjectTypeDef):
            for interface in type_def.interfaces:
                existing.add_interface(interface)
        if added:
            logger.debug(f"Inference added fields to {type_def.name}: {added}")
        return added

    def add_nested_fields(self, type_name: str, fields: Mapping[str, FieldSpec]) -> None:
        """Add fields by dotted path, e.g. {"frontmatter.published": "Boolean"}.

        Missing intermediate fields get a new object type named
        `<Parent><Field>`.

        Raises:
            KeyError: If `type_name` is not registered
            TypeError: If a path walks through a type without fields
        """
        for path, spec in fields.items():
            parts = path.split(".")
            current = self.get_fields_type(type_name)
            for part in parts[:-1]:
                existing = current.get_field(part)
                if existing is None:
                    nested_name = current.name + part[:1].upper() + part[1:]
                    if nested_name not in self._types:
                        self.add_internal(ObjectTypeDef(nested_name))
                    current.fields[part] = coerce_field(part, nested_name)
                    current = self.get_fields_type(nested_name)
                else:
                    current = self.get_fields_type(existing.named_type)
            current.fields[parts[-1]] = coerce_field(parts[-1], spec)

    def has(self, name: str) -> bool:
        return name in self._types

    def get(self, name: str) -> Optional[TypeDef]:
        return self._types.get(name)

    def get_object(self, name: str) -> ObjectTypeDef:
        """Get an object type.

        Raises:
            KeyError: If not registered
            TypeError: If registered with another kind
        """
        type_def = self._types[name]
        if not isinstance(type_def, ObjectTypeDef):
            raise TypeError(f"Type `{name}` is a {type_def.kind.value} type, not an object type")
        return type_def

    def get_fields_type(self, name: str):
        type_def = self._types[name]
        if not isinstance(type_def, FIELD_BEARING):
            raise TypeError(f"Type `{name}` is a {type_def.kind.value} type and has no fields")
        return type_def

    def names(self) -> List[str]:
        return list(self._types)

    def values(self) -> Iterator[TypeDef]:
        yield from list(self._types.values())

    def node_types(self) -> List[ObjectTypeDef]:
        """All object types implementing the Node interface."""
        return [t for t in self._types.values() if isinstance(t, ObjectTypeDef) and t.is_node_type]

    def copy(self) -> TypeRegistry:
        """Independent copy for a rebuild; descriptors are cloned."""
        clone = TypeRegistry.__new__(TypeRegistry)
        clone.query_type_name = self.query_type_name
        clone._types = {name: t.clone() for name, t in self._types.items()}
        clone._must_have = list(self._must_have)
        clone._generated = {owner: set(names) for owner, names in self._generated.items()}
        clone._shared = set(self._shared)
        clone._relationship_fields = {
            name: set(fields) for name, fields in self._relationship_fields.items()
        }
        return clone

    def validate_all(self) -> List[str]:
        """Validate all type references for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        known = set(self._types) | SPECIFIED_SCALARS

        for type_def in self._types.values():
            if isinstance(type_def, FIELD_BEARING):
                for f in type_def.fields.values():
                    if f.named_type not in known:
                        errors.append(
                            f"Field '{f.name}' in type '{type_def.name}' "
                            f"references unknown type '{f.named_type}'"
                        )
                    for arg_name, arg in f.args.items():
                        arg_type = named_type_name(arg.type)
                        if arg_type not in known:
                            errors.append(
                                f"Argument '{arg_name}' of '{type_def.name}.{f.name}' "
                                f"references unknown type '{arg_type}'"
                            )
            if isinstance(type_def, (ObjectTypeDef, InterfaceTypeDef)):
                for interface in type_def.interfaces:
                    if not isinstance(self._types.get(interface), InterfaceTypeDef):
                        errors.append(
                            f"Type '{type_def.name}' implements unknown interface '{interface}'"
                        )
            if isinstance(type_def, UnionTypeDef):
                for member in type_def.types:
                    if not isinstance(self._types.get(member), ObjectTypeDef):
                        errors.append(
                            f"Union '{type_def.name}' references unknown object type '{member}'"
                        )
            if isinstance(type_def, EnumTypeDef) and not type_def.values:
                errors.append(f"Enum '{type_def.name}' has no values")

        return errors

    def to_dict(self) -> dict:
        """Convert registry to a deterministic dictionary representation."""
        return {name: self._types[name].to_dict() for name in sorted(self._types)}

    def fingerprint(self) -> str:
        """SHA-256 fingerprint of the registry contents.

        Returns:
            Fingerprint string in format 'sha256:<hash>'
        """
        canonical = json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"), default=str)
        return "sha256:" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()

