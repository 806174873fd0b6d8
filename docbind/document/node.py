# ------------------------------------------------------------
# Module: docbind/document/node.py
# Purpose: Read-only tree node shared by every document source (XML, JSON).
# ------------------------------------------------------------

"""Immutable document tree used by the binding engine.

Summary:
    A `DocumentNode` is a namespace-agnostic view over one parsed element:
    local name, attributes, ordered children and text. Parsers build the whole
    tree up front, so binding is a pure walk over in-memory data.

Details:
    - `text` is the node's own direct text (whitespace-only runs dropped).
    - `value` concatenates the text of the node and all of its descendants.
    - Attribute keys are local names; duplicate local names keep the first.
    - `is_array` marks a node whose children are the items of a JSON array;
      it is always a list wrapper, whatever its name.

Developer Guidance:
    - Keep this module free of lxml/json imports; parsers adapt into it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping


def local_name(tag: str) -> tuple[str | None, str]:
    """Split a Clark-notation tag into (namespace, local name).

    Example:
        '{urn:x}Row' → ('urn:x', 'Row')
    """
    if tag.startswith("{") and "}" in tag:
        ns, name = tag[1:].split("}", 1)
        return ns, name
    return None, tag


@dataclass(frozen=True, eq=False)
class DocumentNode:
    """One element of a parsed document."""

    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    children: tuple["DocumentNode", ...] = ()
    text: str = ""
    namespace: str | None = None
    # parsers that know the interleaved text order pass it here
    full_text: str | None = None
    # set by the JSON adapter on nodes built from an array
    is_array: bool = False

    def __post_init__(self) -> None:
        # freeze the attribute mapping so nodes can be shared across threads
        if not isinstance(self.attributes, MappingProxyType):
            object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def value(self) -> str:
        """All text of this node and its descendants."""
        if self.full_text is not None:
            return self.full_text
        if not self.children:
            return self.text
        return self.text + "".join(child.value for child in self.children)

    def iter(self) -> Iterator["DocumentNode"]:
        """Yield this node and all descendants, depth-first in document order."""
        yield self
        for child in self.children:
            yield from child.iter()

    def descendants(self) -> Iterator["DocumentNode"]:
        for child in self.children:
            yield from child.iter()

    def __repr__(self) -> str:
        return (
            f"DocumentNode(name={self.name!r}, attributes={dict(self.attributes)!r}, "
            f"children={len(self.children)}, text={self.text!r})"
        )
