"""
Core type descriptors for the typegraph schema system.

This module defines the in-progress shape of every named type before it is
finalized into graphql-core objects:
- FieldDef / ArgumentDef: fields and arguments, with type references kept
  as SDL text ("[Pet!]!") and resolved lazily at finalization
- ObjectTypeDef, InputObjectTypeDef, InterfaceTypeDef, UnionTypeDef,
  EnumTypeDef, ScalarTypeDef: one dataclass per type kind, each carrying
  only what its kind needs

Invariants:
    - Type references are names, never object references, so declaration
      order across sources does not matter
    - FieldDef and ArgumentDef are immutable; types change by replacing them
    - Union members and implemented interfaces are stored as names

How to change safely:
    - Add attributes with defaults so programmatic definitions keep working
    - Keep to_dict() deterministic; registry fingerprints depend on it

Example:
    >>> Person = ObjectTypeDef(
    ...     name="Person",
    ...     fields={"name": "String", "pets": FieldDef("pets", "[Pet!]")},
    ...     interfaces=("Node",),
    ... )
    >>> Person.get_field("name").type
    'String'
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional, Tuple, Union

from graphql import GraphQLScalarType, GraphQLType
from graphql.pyutils import Undefined

from .chain import Resolver, ResolverChain


class TypeKind(Enum):
    """Kinds of named types a registry can hold."""

    OBJECT = "object"
    INPUT_OBJECT = "input_object"
    UNION = "union"
    INTERFACE = "interface"
    ENUM = "enum"
    SCALAR = "scalar"

    @classmethod
    def from_str(cls, value: str) -> TypeKind:
        """Convert string representation to TypeKind.

        Raises:
            ValueError: If value is not a valid type kind
        """
        for kind in cls:
            if kind.value == value:
                return kind
        valid = [k.value for k in cls]
        raise ValueError(f"Illegal type definition kind '{value}'. Valid kinds: {valid}")


def type_ref(value: Any) -> str:
    """Normalize a type reference to SDL text.

    Accepts SDL strings, graphql-core types and type descriptors.
    """
    if isinstance(value, str):
        ref = value.strip()
        if not ref:
            raise ValueError("Type reference cannot be empty")
        return ref
    if isinstance(value, GraphQLType):
        return str(value)
    name = getattr(value, "name", None)
    if isinstance(name, str) and hasattr(value, "kind"):
        return name
    raise TypeError(f"Cannot use {value!r} as a type reference")


def named_type_name(ref: str) -> str:
    """Strip list and non-null wrappers: '[Pet!]!' -> 'Pet'."""
    return ref.replace("[", "").replace("]", "").replace("!", "").strip()


def _names(values: Any) -> Tuple[str, ...]:
    if isinstance(values, str):
        values = (values,)
    return tuple(type_ref(v) for v in values)


@dataclass(frozen=True)
class ArgumentDef:
    """Definition of a field argument.

    Attributes:
        type: SDL type reference
        default: Default value (Undefined when absent)
        description: Human-readable description
    """

    type: str
    default: Any = Undefined
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"type": self.type}
        if self.default is not Undefined:
            result["default"] = self.default
        if self.description:
            result["description"] = self.description
        return result


@dataclass(frozen=True)
class FieldDef:
    """Definition of a single field on an object, interface or input type.

    Attributes:
        name: Field name
        type: SDL type reference, resolved at finalization
        args: Argument definitions by name
        resolver: Resolver chain (default lookup when empty)
        default: Default value, for input object fields
        description: Human-readable description
        deprecation_reason: Set when the field is deprecated
    """

    name: str
    type: str
    args: Mapping[str, ArgumentDef] = dataclass_field(default_factory=dict)
    resolver: ResolverChain = dataclass_field(default_factory=ResolverChain)
    default: Any = Undefined
    description: str = ""
    deprecation_reason: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name cannot be empty")
        object.__setattr__(self, "type", type_ref(self.type))
        object.__setattr__(
            self, "args", {name: coerce_argument(spec) for name, spec in self.args.items()}
        )

    @property
    def named_type(self) -> str:
        """Name of the innermost type."""
        return named_type_name(self.type)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation for snapshots."""
        result: Dict[str, Any] = {"type": self.type}
        if self.args:
            result["args"] = {name: arg.to_dict() for name, arg in self.args.items()}
        if not self.resolver.is_default:
            result["resolver"] = {
                "base": self.resolver.base is not None,
                "steps": len(self.resolver.steps),
            }
        if self.default is not Undefined:
            result["default"] = self.default
        if self.description:
            result["description"] = self.description
        if self.deprecation_reason:
            result["deprecation_reason"] = self.deprecation_reason
        return result


FieldSpec = Union[str, FieldDef, GraphQLType, Mapping[str, Any]]


def coerce_argument(spec: Any) -> ArgumentDef:
    """Build an ArgumentDef from a type reference, mapping or ArgumentDef."""
    if isinstance(spec, ArgumentDef):
        return spec
    if isinstance(spec, Mapping):
        if "type" not in spec:
            raise TypeError(f"Argument definition {dict(spec)!r} has no 'type'")
        return ArgumentDef(
            type=type_ref(spec["type"]),
            default=spec.get("default", spec.get("default_value", Undefined)),
            description=spec.get("description", ""),
        )
    return ArgumentDef(type=type_ref(spec))


def coerce_field(name: str, spec: FieldSpec) -> FieldDef:
    """Build a FieldDef from any accepted field specification.

    Accepted forms:
        - "String!" or a graphql-core type
        - FieldDef (renamed to `name` if needed)
        - {"type": ..., "args": {...}, "resolve": fn, "description": ...}

    Raises:
        TypeError: If the specification has no usable type
    """
    if isinstance(spec, FieldDef):
        return spec if spec.name == name else replace(spec, name=name)
    if isinstance(spec, Mapping):
        if "type" not in spec:
            raise TypeError(f"Field '{name}' definition has no 'type'")
        resolve = spec.get("resolve")
        return FieldDef(
            name=name,
            type=type_ref(spec["type"]),
            args=dict(spec.get("args") or {}),
            resolver=ResolverChain(base=resolve) if resolve else ResolverChain(),
            default=spec.get("default", spec.get("default_value", Undefined)),
            description=spec.get("description", ""),
            deprecation_reason=spec.get("deprecation_reason"),
        )
    return FieldDef(name=name, type=type_ref(spec))


def coerce_fields(fields: Mapping[str, FieldSpec]) -> Dict[str, FieldDef]:
    return {name: coerce_field(name, spec) for name, spec in fields.items()}


@dataclass(frozen=True)
class NamedResolver:
    """A resolver attached to a type, ready to be exposed as a field.

    Attributes:
        name: Resolver name (e.g. "findOne")
        type: SDL type reference of the result
        args: Accepted arguments
        resolve: The resolver function
    """

    name: str
    type: str
    args: Mapping[str, ArgumentDef]
    resolve: Resolver

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", type_ref(self.type))
        object.__setattr__(
            self, "args", {name: coerce_argument(spec) for name, spec in self.args.items()}
        )

    def to_field(self, field_name: str) -> FieldDef:
        return FieldDef(
            name=field_name,
            type=self.type,
            args=dict(self.args),
            resolver=ResolverChain(base=self.resolve),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "args": {name: arg.to_dict() for name, arg in self.args.items()},
        }


class _FieldsMixin:
    """Field map operations shared by object, interface and input types."""

    fields: Dict[str, FieldDef]

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get_field(self, name: str) -> Optional[FieldDef]:
        return self.fields.get(name)

    def get_field_names(self) -> list[str]:
        return list(self.fields)

    def add_fields(self, fields: Mapping[str, FieldSpec]) -> None:
        """Add fields, replacing same-named ones."""
        self.fields.update(coerce_fields(fields))

    def extend_field(self, name: str, **changes: Any) -> FieldDef:
        """Replace attributes of an existing field.

        Raises:
            KeyError: If the field does not exist
        """
        updated = replace(self.fields[name], **changes)
        self.fields[name] = updated
        return updated

    def remove_field(self, name: str) -> None:
        self.fields.pop(name, None)

    def _fields_dict(self) -> Dict[str, Any]:
        return {name: f.to_dict() for name, f in self.fields.items()}


@dataclass
class ObjectTypeDef(_FieldsMixin):
    """Definition of an object type.

    Attributes:
        name: Type name
        fields: Field definitions by name
        interfaces: Names of implemented interfaces
        description: Human-readable description
        foreign: Whether the type was imported from a third-party schema
        is_type_of: Optional runtime type check
        resolvers: Named resolvers (findOne, findManyPaginated) for node types
    """

    name: str
    fields: Dict[str, FieldDef] = dataclass_field(default_factory=dict)
    interfaces: Tuple[str, ...] = ()
    description: str = ""
    foreign: bool = False
    is_type_of: Optional[Callable[..., Any]] = None
    resolvers: Dict[str, NamedResolver] = dataclass_field(default_factory=dict)

    kind: ClassVar[TypeKind] = TypeKind.OBJECT

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        self.fields = coerce_fields(self.fields)
        self.interfaces = _names(self.interfaces)

    def implements(self, interface: str) -> bool:
        return interface in self.interfaces

    def add_interface(self, interface: str) -> None:
        if interface not in self.interfaces:
            self.interfaces = self.interfaces + (interface,)

    @property
    def is_node_type(self) -> bool:
        """Whether the type conforms to the Node capability."""
        return self.implements("Node")

    def add_resolver(self, resolver: NamedResolver) -> None:
        self.resolvers[resolver.name] = resolver

    def get_resolver(self, name: str) -> NamedResolver:
        return self.resolvers[name]

    def clone(self) -> ObjectTypeDef:
        return replace(self, fields=dict(self.fields), resolvers=dict(self.resolvers))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "fields": self._fields_dict(),
        }
        if self.interfaces:
            result["interfaces"] = list(self.interfaces)
        if self.resolvers:
            result["resolvers"] = {n: r.to_dict() for n, r in self.resolvers.items()}
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class InputObjectTypeDef(_FieldsMixin):
    """Definition of an input object type."""

    name: str
    fields: Dict[str, FieldDef] = dataclass_field(default_factory=dict)
    description: str = ""
    foreign: bool = False

    kind: ClassVar[TypeKind] = TypeKind.INPUT_OBJECT

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        self.fields = coerce_fields(self.fields)

    def clone(self) -> InputObjectTypeDef:
        return replace(self, fields=dict(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "fields": self._fields_dict(),
        }
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class InterfaceTypeDef(_FieldsMixin):
    """Definition of an interface type.

    resolve_type picks the concrete object type name for a runtime value; the
    registry installs a default that reads `internal.type` when none is set.
    """

    name: str
    fields: Dict[str, FieldDef] = dataclass_field(default_factory=dict)
    interfaces: Tuple[str, ...] = ()
    description: str = ""
    foreign: bool = False
    resolve_type: Optional[Callable[..., Any]] = None

    kind: ClassVar[TypeKind] = TypeKind.INTERFACE

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        self.fields = coerce_fields(self.fields)
        self.interfaces = _names(self.interfaces)

    def clone(self) -> InterfaceTypeDef:
        return replace(self, fields=dict(self.fields))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "fields": self._fields_dict(),
        }
        if self.interfaces:
            result["interfaces"] = list(self.interfaces)
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class UnionTypeDef:
    """Definition of a union type. Members are object type names."""

    name: str
    types: Tuple[str, ...] = ()
    description: str = ""
    foreign: bool = False
    resolve_type: Optional[Callable[..., Any]] = None

    kind: ClassVar[TypeKind] = TypeKind.UNION

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        self.types = _names(self.types)

    def clone(self) -> UnionTypeDef:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "types": list(self.types),
        }
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class EnumTypeDef:
    """Definition of an enum type.

    Attributes:
        values: Enum value name -> internal value. A list or tuple of names
            maps each name to itself.
    """

    name: str
    values: Dict[str, Any] = dataclass_field(default_factory=dict)
    description: str = ""
    foreign: bool = False

    kind: ClassVar[TypeKind] = TypeKind.ENUM

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")
        if isinstance(self.values, (list, tuple)):
            self.values = {v: v for v in self.values}
        else:
            self.values = dict(self.values)

    def clone(self) -> EnumTypeDef:
        return replace(self, values=dict(self.values))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "name": self.name,
            "values": list(self.values),
        }
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class ScalarTypeDef:
    """Definition of a custom scalar.

    Attributes:
        native: A ready graphql-core scalar to use as-is; when None an
            identity-serializing scalar is created at finalization
    """

    name: str
    description: str = ""
    foreign: bool = False
    native: Optional[GraphQLScalarType] = None

    kind: ClassVar[TypeKind] = TypeKind.SCALAR

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Type name cannot be empty")

    def clone(self) -> ScalarTypeDef:
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"kind": self.kind.value, "name": self.name}
        if self.foreign:
            result["foreign"] = True
        if self.description:
            result["description"] = self.description
        return result


TypeDef = Union[
    ObjectTypeDef,
    InputObjectTypeDef,
    InterfaceTypeDef,
    UnionTypeDef,
    EnumTypeDef,
    ScalarTypeDef,
]

TYPE_DEF_CLASSES: Dict[TypeKind, type] = {
    TypeKind.OBJECT: ObjectTypeDef,
    TypeKind.INPUT_OBJECT: InputObjectTypeDef,
    TypeKind.INTERFACE: InterfaceTypeDef,
    TypeKind.UNION: UnionTypeDef,
    TypeKind.ENUM: EnumTypeDef,
    TypeKind.SCALAR: ScalarTypeDef,
}

FIELD_BEARING = (ObjectTypeDef, InterfaceTypeDef, InputObjectTypeDef)


def is_type_def(value: Any) -> bool:
    return isinstance(value, tuple(TYPE_DEF_CLASSES.values()))


def type_def_from_dict(data: Mapping[str, Any]) -> TypeDef:
    """Create a type descriptor from a kind-tagged dictionary.

    Example:
        >>> type_def_from_dict({
        ...     "kind": "object",
        ...     "name": "Author",
        ...     "interfaces": ["Node"],
        ...     "fields": {"name": "String!"},
        ... })
    """
    if "kind" not in data or "name" not in data:
        raise ValueError(f"Illegal type definition: {dict(data)!r}")
    kind = TypeKind.from_str(data["kind"])
    common = {"name": data["name"], "description": data.get("description", "")}

    if kind is TypeKind.OBJECT:
        return ObjectTypeDef(
            fields=dict(data.get("fields") or {}),
            interfaces=tuple(data.get("interfaces") or ()),
            **common,
        )
    if kind is TypeKind.INPUT_OBJECT:
        return InputObjectTypeDef(fields=dict(data.get("fields") or {}), **common)
    if kind is TypeKind.INTERFACE:
        return InterfaceTypeDef(
            fields=dict(data.get("fields") or {}),
            interfaces=tuple(data.get("interfaces") or ()),
            **common,
        )
    if kind is TypeKind.UNION:
        return UnionTypeDef(types=tuple(data.get("types") or ()), **common)
    if kind is TypeKind.ENUM:
        return EnumTypeDef(values=data.get("values") or {}, **common)
    return ScalarTypeDef(**common)
