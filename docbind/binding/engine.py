# ------------------------------------------------------------
# Module: docbind/binding/engine.py
# Purpose: Walk a DocumentNode tree and populate a target type from it.
# ------------------------------------------------------------

"""Structured deserializer.

Summary:
    `bind(root, target, ctx)` resolves the optional root path, then binds the
    target: composites member by member, sequences through the collection
    materializer, leaves through the value converter.

Member resolution (per composite, current level only)
-----------------------------------------------------
list member       -> `sequences.materialize` (never None)
content member    -> the node's own text
composite member  -> best matching child element, bound recursively
leaf member       -> best matching child element (full text) or attribute
member `value`    -> the node's own text when nothing else matched
otherwise         -> declared default, else a zero value, else None

Details:
    - Instances are constructed only after every member has bound, so a
      failed call never hands out a partially populated object.
    - Error paths read like `Person.friends[3].since`.
    - The engine holds no mutable state; concurrent calls share only the
      descriptor cache.
"""

from __future__ import annotations

import logging
from typing import Any

from docbind.binding.context import DeserializationContext
from docbind.binding.converters import convert, type_name
from docbind.binding.descriptors import (
    BindingKind,
    Construction,
    MemberDescriptor,
    ShapeKind,
    TypeDescriptor,
    TypeShape,
    describe,
    descriptor_for,
    zero_value,
)
from docbind.binding.names import Candidate, best_match, candidates_for, match, normalize
from docbind.binding.sequences import materialize
from docbind.document.node import DocumentNode

log = logging.getLogger(__name__)

_VALUE = "value"


# -----------------------------------------------------------------------------
# Root path
# -----------------------------------------------------------------------------
def resolve_root(root: DocumentNode, path: str | None) -> DocumentNode | None:
    """Descend a dot-separated path; each segment matches self or any descendant."""
    if not path:
        return root
    node = root
    for segment in path.split("."):
        segment = segment.strip()
        if not segment:
            continue
        found = best_match(node.iter(), segment, key=lambda n: n.name)
        if found is None:
            return None
        node = found
    return node


# -----------------------------------------------------------------------------
# Construction
# -----------------------------------------------------------------------------
def construct(desc: TypeDescriptor, values: dict[str, Any]) -> Any:
    """Build an instance of `desc.cls` from fully bound member values."""
    cls = desc.cls
    if desc.construction in (Construction.DATACLASS, Construction.PYDANTIC):
        kwargs = dict(values)
        for name, shape in desc.required:
            kwargs.setdefault(name, zero_value(shape))
        if desc.construction is Construction.PYDANTIC:
            # values are already converted; skip re-validation
            return cls.model_construct(**kwargs)
        return cls(**kwargs)

    obj = cls()
    for member in desc.members:
        if member.name in values:
            setattr(obj, member.name, values[member.name])
        elif not hasattr(obj, member.name):
            setattr(obj, member.name, zero_value(member.shape))
    return obj


def empty_value(shape: TypeShape) -> Any:
    """Default instance for a target whose root path is missing."""
    if shape.kind is ShapeKind.LIST_SUBCLASS:
        return shape.py_type()
    if shape.kind is ShapeKind.COMPOSITE:
        return construct(descriptor_for(shape.py_type), {})
    return zero_value(shape)


# -----------------------------------------------------------------------------
# Members
# -----------------------------------------------------------------------------
def _bind_member(
    node: DocumentNode,
    member: MemberDescriptor,
    candidates: tuple[Candidate, ...],
    ctx: DeserializationContext,
    path: str,
) -> tuple[bool, Any]:
    """Return (found, value) for one member of `node`."""
    shape = member.shape

    if shape.is_sequence:
        return True, materialize(
            node, shape, member.name, ctx, path,
            bind_composite, bind_members, hints=member.hints,
        )

    if member.kind is BindingKind.CONTENT:
        return True, convert(node.text, shape, ctx, path)

    if shape.kind is ShapeKind.COMPOSITE:
        # composites only ever come from elements
        hit = match([c for c in candidates if not c.is_attribute], member.name, member.hints)
        if hit is None:
            return False, None
        return True, bind_composite(hit.node, shape.py_type, ctx, path)

    hit = match(candidates, member.name, member.hints)
    if hit is not None:
        return True, convert(hit.text, shape, ctx, path)

    if member.hints is None and normalize(member.name) == _VALUE and node.text:
        return True, convert(node.text, shape, ctx, path)
    return False, None


def bind_members(
    node: DocumentNode,
    desc: TypeDescriptor,
    ctx: DeserializationContext,
    path: str,
) -> dict[str, Any]:
    """Bind every member of `desc` against `node`; unmatched members are omitted."""
    candidates = candidates_for(node, ctx.namespace)
    values: dict[str, Any] = {}
    for member in desc.members:
        member_path = f"{path}.{member.name}" if path else member.name
        found, value = _bind_member(node, member, candidates, ctx, member_path)
        if found:
            values[member.name] = value
        elif log.isEnabledFor(logging.DEBUG):
            log.debug("no match path=%s node=%s", member_path, node.name)
    return values


def bind_composite(
    node: DocumentNode,
    cls: type,
    ctx: DeserializationContext,
    path: str,
) -> Any:
    desc = descriptor_for(cls)
    return construct(desc, bind_members(node, desc, ctx, path))


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------
def bind(root: DocumentNode, target: Any, ctx: DeserializationContext | None = None) -> Any:
    """Populate `target` (a type or generic alias) from a parsed document.

    Args:
        root: parsed document root.
        target: composite class, `list[T]`/`tuple[T, ...]`/..., `list[T]`
            subclass, or a leaf type.
        ctx: per-call options; invariant culture when omitted.

    Returns:
        A fully constructed value. A missing root path yields an empty default.

    Raises:
        ConversionError: a matched value could not be converted.
        SchemaConflictError: a type declares more than one content member.
        TypeError: `target` cannot be bound at all.
    """
    ctx = ctx or DeserializationContext()
    shape = describe(target)
    if shape.kind is ShapeKind.UNSUPPORTED:
        raise TypeError(f"cannot deserialize into {type_name(target)}")

    node = resolve_root(root, ctx.root_element)
    inner = ctx.nested()
    if node is None:
        log.warning(
            "root element not found path=%s document_root=%s target=%s",
            ctx.root_element, root.name, type_name(target),
        )
        return empty_value(shape)

    path = shape.element_name if shape.kind is ShapeKind.COMPOSITE else ""
    if shape.is_sequence:
        return materialize(
            node, shape, node.name, inner, path,
            bind_composite, bind_members, as_root=True,
        )
    if shape.kind is ShapeKind.COMPOSITE:
        return bind_composite(node, shape.py_type, inner, path)
    return convert(node.value, shape, inner, path)
