"""
Resolver overlay applied through the createResolvers hook.

A patch targets one (type, field) pair:

    create_resolvers({
        "Person": {
            "fullName": {"type": "String", "resolve": full_name},
            "name": {"resolve": shout},
        }
    })

Rules, in order:
    - unknown type: warned and skipped
    - type without output fields (union, enum, scalar, input): warned and skipped
    - field absent: added as given; a patch with no type is warned and skipped
    - field present: extended when the patch gives no type, the same type, or
      the target type is foreign; otherwise warned and left unchanged

Invariants:
    - A replacement resolver is appended to the field's ResolverChain, so it
      sees the previous resolver as `info.original_resolver`
    - Patches never remove fields or change a type's kind
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from ..reporting import DiagnosticKind, Reporter
from .chain import ResolverChain
from .registry import TypeRegistry
from .types import FieldDef, InterfaceTypeDef, ObjectTypeDef, coerce_argument, type_ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolverPatch:
    """Override for a single field.

    Attributes:
        type: SDL type reference; None keeps the field's type
        args: Argument definitions; None keeps the field's arguments
        resolve: Resolver step; None keeps the field's resolution
        description: New description; None keeps the current one
    """

    type: Optional[str] = None
    args: Optional[Mapping[str, Any]] = None
    resolve: Optional[Callable[..., Any]] = None
    description: Optional[str] = None

    @classmethod
    def coerce(cls, spec: Any) -> ResolverPatch:
        """Accept a ResolverPatch, a bare resolver function or a config mapping."""
        if isinstance(spec, ResolverPatch):
            return spec
        if callable(spec):
            return cls(resolve=spec)
        if not isinstance(spec, Mapping):
            raise TypeError(f"Resolver patch must be a mapping or callable, got {spec!r}")
        return cls(
            type=type_ref(spec["type"]) if spec.get("type") is not None else None,
            args=spec.get("args"),
            resolve=spec.get("resolve"),
            description=spec.get("description"),
        )


def _add_field(
    target: Any, type_name: str, field_name: str, patch: ResolverPatch, reporter: Reporter
) -> bool:
    if patch.type is None:
        reporter.warn(
            f"`createResolvers` passed a new field `{type_name}.{field_name}` without a type. "
            "The field was not added.",
            DiagnosticKind.INCOMPLETE_PATCH,
            type_name=type_name,
            field_name=field_name,
        )
        return False
    target.fields[field_name] = FieldDef(
        name=field_name,
        type=patch.type,
        args=dict(patch.args or {}),
        resolver=ResolverChain(base=patch.resolve) if patch.resolve else ResolverChain(),
        description=patch.description or "",
    )
    return True


def _extend_field(
    target: Any, type_name: str, field_name: str, patch: ResolverPatch, reporter: Reporter
) -> bool:
    existing = target.get_field(field_name)
    if patch.type is not None and patch.type != existing.type and not target.foreign:
        reporter.warn(
            f"`createResolvers` passed resolvers for field `{type_name}.{field_name}` with "
            f"type `{patch.type}`. Such a field with type `{existing.type}` already exists "
            "on the type. Use `createTypes` to override type fields.",
            DiagnosticKind.TYPE_MISMATCH,
            type_name=type_name,
            field_name=field_name,
        )
        return False

    changes: Dict[str, Any] = {}
    if patch.type is not None:
        changes["type"] = patch.type
    if patch.args is not None:
        changes["args"] = {name: coerce_argument(spec) for name, spec in patch.args.items()}
    if patch.resolve is not None:
        changes["resolver"] = existing.resolver.then(patch.resolve)
    if patch.description is not None:
        changes["description"] = patch.description
    if changes:
        target.extend_field(field_name, **changes)
    return True


def apply_resolver_patches(
    registry: TypeRegistry,
    patches: Mapping[str, Mapping[str, Any]],
    reporter: Reporter,
) -> int:
    """Apply {type: {field: patch}} to the registry.

    Returns:
        Number of patches applied
    """
    applied = 0
    for type_name, fields in patches.items():
        target = registry.get(type_name)
        if target is None:
            reporter.warn(
                f"`createResolvers` passed resolvers for type `{type_name}` that doesn't "
                "exist in the schema. Use `createTypes` to add the type before adding resolvers.",
                DiagnosticKind.MISSING_TARGET,
                type_name=type_name,
            )
            continue
        if not isinstance(target, (ObjectTypeDef, InterfaceTypeDef)):
            reporter.warn(
                f"`createResolvers` passed resolvers for `{type_name}`, which is a "
                f"{target.kind.value} type and has no resolvable fields.",
                DiagnosticKind.UNKNOWN_TARGET_TYPE,
                type_name=type_name,
            )
            continue

        for field_name, spec in fields.items():
            patch = ResolverPatch.coerce(spec)
            if target.has_field(field_name):
                ok = _extend_field(target, type_name, field_name, patch, reporter)
            else:
                ok = _add_field(target, type_name, field_name, patch, reporter)
            if ok:
                applied += 1
                logger.debug(f"Applied resolver patch to {type_name}.{field_name}")
    return applied
