# ------------------------------------------------------------
# Module: docbind/binding/names.py
# Purpose: Match member names against node/attribute names across naming styles.
# ------------------------------------------------------------

"""Name matching ladder shared by members, enums and root paths.

Rules
-----
1. Exact match.
2. Case-insensitive match.
3. Separator-normalized match: `_` and `-` removed, case-insensitive.

The best tier wins; within a tier the first candidate in document order wins.
An explicit override name skips the ladder and must match exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, TypeVar

from docbind.binding.descriptors import BindAs, BindingKind
from docbind.document.node import DocumentNode

T = TypeVar("T")

EXACT, CASE_INSENSITIVE, NORMALIZED = 0, 1, 2


def normalize(name: str) -> str:
    """Strip `_`/`-` separators and casefold: `Start_Date` → `startdate`."""
    return name.replace("_", "").replace("-", "").casefold()


def rank(candidate: str, wanted: str) -> int | None:
    """Return the ladder tier at which `candidate` matches `wanted`, or None."""
    if candidate == wanted:
        return EXACT
    if candidate.casefold() == wanted.casefold():
        return CASE_INSENSITIVE
    if normalize(candidate) == normalize(wanted):
        return NORMALIZED
    return None


def best_match(
    items: Iterable[T],
    wanted: str,
    key: Callable[[T], str],
    exact_only: bool = False,
) -> T | None:
    """Return the item whose key best matches `wanted` (document order breaks ties)."""
    best: T | None = None
    best_tier = NORMALIZED + 1
    for item in items:
        name = key(item)
        if exact_only:
            if name == wanted:
                return item
            continue
        tier = rank(name, wanted)
        if tier is None or tier >= best_tier:
            continue
        if tier == EXACT:
            return item
        best, best_tier = item, tier
    return best


def same_name(a: str, b: str) -> bool:
    return rank(a, b) is not None


@dataclass(frozen=True)
class Candidate:
    """A bindable name at one tree level: a child element or an attribute."""

    name: str
    is_attribute: bool
    text: str
    node: DocumentNode | None = None


def candidates_for(node: DocumentNode, namespace: str | None = None) -> tuple[Candidate, ...]:
    """Elements first (document order), then attributes."""
    out = [
        Candidate(child.name, False, child.value, child)
        for child in node.children
        if namespace is None or child.namespace in (None, namespace)
    ]
    out.extend(Candidate(k, True, v) for k, v in node.attributes.items())
    return tuple(out)


def match(
    candidates: Iterable[Candidate],
    member_name: str,
    hints: BindAs | None = None,
) -> Candidate | None:
    """Pick the candidate for a member, honoring an explicit override.

    With `hints.name` set only an exact match of the hinted kind counts.
    With only `hints.kind` set the ladder runs over that kind.
    Without hints elements are searched before attributes.
    """
    kind = hints.kind if hints else None
    if kind is BindingKind.CONTENT:
        return None

    if hints is not None and hints.name:
        want_attr = kind is BindingKind.ATTRIBUTE
        pool = [c for c in candidates if c.is_attribute == want_attr]
        return best_match(pool, hints.name, key=lambda c: c.name, exact_only=True)

    pool = list(candidates)
    elements = [c for c in pool if not c.is_attribute]
    attributes = [c for c in pool if c.is_attribute]
    if kind is BindingKind.ELEMENT:
        return best_match(elements, member_name, key=lambda c: c.name)
    if kind is BindingKind.ATTRIBUTE:
        return best_match(attributes, member_name, key=lambda c: c.name)
    return best_match(elements, member_name, key=lambda c: c.name) or best_match(
        attributes, member_name, key=lambda c: c.name
    )
