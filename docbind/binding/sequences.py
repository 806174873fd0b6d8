# ------------------------------------------------------------
# Module: docbind/binding/sequences.py
# Purpose: Locate list items in a document and build the target container.
# ------------------------------------------------------------

"""Collection materializer.

Summary:
    Decides which on-wire shape a list member has and returns a populated,
    never-None container of the declared type.

Shapes
------
nested
    A child named like the member wraps the items: `<Friends><Friend/>...`.
    A child that also carries the item's element name, or that repeats,
    is an item, not a wrapper, unless it is a JSON array node (`is_array`).
inline
    No wrapper: siblings named like the item type or the member are the items.
root-as-list
    The call's target is itself a sequence: the root acts as the wrapper.

Details:
    - Item nodes bind through callbacks into the engine (composite items) or
      the value converter (leaf items, using the node's full text).
    - `list[T]` subclasses are filled with the items, then their own declared
      members are bound from the wrapper node (or the current node).

Developer Guidance:
    - This module must not import `engine`; the engine passes its binders in.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from docbind.binding.context import DeserializationContext
from docbind.binding.converters import convert
from docbind.binding.descriptors import BindAs, ShapeKind, TypeShape, descriptor_for
from docbind.binding.names import best_match, same_name
from docbind.document.node import DocumentNode

log = logging.getLogger(__name__)

# (node, composite class, context, path) -> instance
CompositeBinder = Callable[[DocumentNode, type, DeserializationContext, str], Any]
# (node, descriptor, context, path) -> {member name: value}
MemberBinder = Callable[[DocumentNode, Any, DeserializationContext, str], dict[str, Any]]


def _elements(node: DocumentNode, ctx: DeserializationContext) -> list[DocumentNode]:
    if ctx.namespace is None:
        return list(node.children)
    return [c for c in node.children if c.namespace in (None, ctx.namespace)]


def _named_or_all(nodes: list[DocumentNode], item_name: str) -> list[DocumentNode]:
    named = [c for c in nodes if same_name(c.name, item_name)]
    return named or nodes


def locate_items(
    node: DocumentNode,
    shape: TypeShape,
    member_name: str,
    ctx: DeserializationContext,
    hints: BindAs | None = None,
    as_root: bool = False,
) -> tuple[list[DocumentNode], DocumentNode | None]:
    """Return (item nodes, wrapper node or None) for a list member of `node`.

    With `as_root` the node itself is the wrapper.
    """
    children = _elements(node, ctx)
    item_name = shape.item.element_name
    if as_root:
        return _named_or_all(children, item_name), None

    exact = bool(hints and hints.name)
    wanted = hints.name if exact else member_name

    wrapper = best_match(children, wanted, key=lambda c: c.name, exact_only=exact)
    if wrapper is not None and not wrapper.is_array:
        # a repeated member-named child is an inline item, not a wrapper
        repeated = sum(c.name == wrapper.name for c in children) > 1
        if repeated or same_name(wrapper.name, item_name):
            wrapper = None
    if wrapper is not None:
        return _named_or_all(_elements(wrapper, ctx), item_name), wrapper

    def is_item(child: DocumentNode) -> bool:
        if same_name(child.name, item_name):
            return True
        return child.name == wanted if exact else same_name(child.name, wanted)

    items: list[DocumentNode] = []
    for child in children:
        if not is_item(child):
            continue
        if child.is_array:
            items.extend(_named_or_all(_elements(child, ctx), item_name))
        else:
            items.append(child)
    return items, None


def _bind_item(
    item_node: DocumentNode,
    item: TypeShape,
    ctx: DeserializationContext,
    path: str,
    bind_composite: CompositeBinder,
) -> Any:
    if item.kind is ShapeKind.COMPOSITE:
        return bind_composite(item_node, item.py_type, ctx, path)
    return convert(item_node.value, item, ctx, path)


def build(
    shape: TypeShape,
    items: list[Any],
    source: DocumentNode,
    ctx: DeserializationContext,
    path: str,
    bind_members: MemberBinder,
) -> Any:
    """Wrap bound items in the container `shape` asks for."""
    if shape.kind is ShapeKind.LIST_SUBCLASS:
        container = shape.py_type()
        container.extend(items)
        desc = descriptor_for(shape.py_type)
        if desc.members:
            for name, value in bind_members(source, desc, ctx, path).items():
                setattr(container, name, value)
        return container
    return shape.container(items)


def materialize(
    node: DocumentNode,
    shape: TypeShape,
    member_name: str,
    ctx: DeserializationContext,
    path: str,
    bind_composite: CompositeBinder,
    bind_members: MemberBinder,
    hints: BindAs | None = None,
    as_root: bool = False,
) -> Any:
    """Build the sequence for a list member (or for the root when `as_root`).

    Returns an empty container, never None, when nothing matches.
    """
    item_nodes, wrapper = locate_items(node, shape, member_name, ctx, hints, as_root)

    items = [
        _bind_item(n, shape.item, ctx, f"{path}[{i}]", bind_composite)
        for i, n in enumerate(item_nodes)
    ]
    if log.isEnabledFor(logging.DEBUG):
        log.debug(
            "materialized path=%s shape=%s items=%d",
            path,
            "root" if as_root else ("nested" if wrapper is not None else "inline"),
            len(items),
        )
    return build(shape, items, wrapper or node, ctx, path, bind_members)
