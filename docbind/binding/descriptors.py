# ------------------------------------------------------------
# Module: docbind/binding/descriptors.py
# Purpose: Derive and cache immutable member tables for target types.
# ------------------------------------------------------------

"""Type descriptors: what a target type looks like to the binding engine.

Summary:
    Each composite target (dataclass, pydantic model, plain annotated class, or
    a `list[T]` subclass with extra members) is introspected once into a frozen
    `TypeDescriptor`. Member annotations are resolved into `TypeShape`s, a tagged
    variant the engine dispatches on without re-inspecting types per call.

Details:
    - Override hints come from `bind(...)` dataclass field metadata,
      `Annotated[T, BindAs(...)]`, or pydantic field aliases (explicit name).
    - Members starting with `_`, `ClassVar`s, properties and dataclass
      `init=False` fields are never bound.
    - A type with two `content` members raises `SchemaConflictError` at
      derivation, before any binding happens.
    - The cache is filled with `setdefault` after a descriptor is fully built;
      racing threads may derive twice but always publish a complete value.

Developer Guidance:
    - Keep descriptors immutable (frozen dataclasses, tuples).
    - Add new leaf types to `LEAF_TYPES` and to `converters.py` together.
"""

from __future__ import annotations

import collections.abc
import dataclasses
import datetime as dt
import inspect
import logging
import types
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, ClassVar, Union, get_args, get_origin, get_type_hints
from urllib.parse import ParseResult, SplitResult

from pydantic import BaseModel

from docbind.core.errors import SchemaConflictError

log = logging.getLogger(__name__)

METADATA_KEY = "docbind"
NAME_ATTR = "__docbind_name__"

MISSING = dataclasses.MISSING


# -----------------------------------------------------------------------------
# Override hints
# -----------------------------------------------------------------------------
class BindingKind(Enum):
    """Where a member's value is read from."""

    ELEMENT = "element"
    ATTRIBUTE = "attribute"
    CONTENT = "content"


@dataclass(frozen=True)
class BindAs:
    """Explicit per-member override.

    Attributes:
        name: exact node/attribute name; disables fuzzy matching.
        kind: force element, attribute or text-content binding.
    """

    name: str | None = None
    kind: BindingKind | None = None


def as_element(name: str | None = None) -> BindAs:
    return BindAs(name=name, kind=BindingKind.ELEMENT)


def as_attribute(name: str | None = None) -> BindAs:
    return BindAs(name=name, kind=BindingKind.ATTRIBUTE)


def as_content() -> BindAs:
    return BindAs(kind=BindingKind.CONTENT)


def bind(
    name: str | None = None,
    *,
    element: bool = False,
    attribute: bool = False,
    content: bool = False,
    **field_kwargs: Any,
) -> Any:
    """`dataclasses.field` carrying a binding override.

    Without a kind flag the member keeps the element-then-attribute search;
    without a name it keeps fuzzy matching.

    Example:
        >>> @dataclass
        ... class Note:
        ...     id: int = bind(attribute=True, default=0)
        ...     message: str = bind(content=True, default="")
    """
    if element + attribute + content > 1:
        raise ValueError("a member binds from one of element, attribute or content")
    kind = None
    if element:
        kind = BindingKind.ELEMENT
    elif attribute:
        kind = BindingKind.ATTRIBUTE
    elif content:
        kind = BindingKind.CONTENT
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    if name is not None or kind is not None:
        metadata[METADATA_KEY] = BindAs(name=name, kind=kind)
    return dataclasses.field(metadata=metadata, **field_kwargs)


def element_name(name: str):
    """Class decorator: the element name used when the type is a list item."""

    def wrap(cls):
        setattr(cls, NAME_ATTR, name)
        return cls

    return wrap


# -----------------------------------------------------------------------------
# Type shapes
# -----------------------------------------------------------------------------
class ShapeKind(Enum):
    PRIMITIVE = "primitive"
    COMPOSITE = "composite"
    SEQUENCE = "sequence"
    LIST_SUBCLASS = "list_subclass"
    UNSUPPORTED = "unsupported"


LEAF_TYPES: tuple[type, ...] = (
    str, bool, int, float, Decimal,
    dt.datetime, dt.date, dt.time, dt.timedelta,
    uuid.UUID, SplitResult, ParseResult,
)

_ABSTRACT_SEQUENCES = {
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Iterable,
    collections.abc.Collection,
}
_CONCRETE_SEQUENCES = {list, tuple, set, frozenset}


@dataclass(frozen=True)
class TypeShape:
    """Resolved form of one annotation."""

    kind: ShapeKind
    py_type: Any
    nullable: bool = False
    item: "TypeShape | None" = None
    # concrete container to build for SEQUENCE shapes
    container: type | None = None

    @property
    def element_name(self) -> str:
        """Name a single item of this type is expected to carry in a document."""
        t = self.py_type
        if isinstance(t, type):
            return t.__dict__.get(NAME_ATTR) or t.__name__
        return str(t)

    @property
    def is_sequence(self) -> bool:
        return self.kind in (ShapeKind.SEQUENCE, ShapeKind.LIST_SUBCLASS)


def _unsupported(annotation: Any) -> TypeShape:
    return TypeShape(ShapeKind.UNSUPPORTED, annotation)


def _list_item_annotation(cls: type) -> Any:
    for klass in cls.__mro__:
        for base in getattr(klass, "__orig_bases__", ()):
            if get_origin(base) is list:
                args = get_args(base)
                return args[0] if args else None
    return None


def _is_plain_composite(cls: type) -> bool:
    if cls.__module__ == "builtins":
        return False
    # only public annotations count; library classes often annotate private slots
    return any(
        not name.startswith("_")
        for k in cls.__mro__
        if k is not object
        for name in inspect.get_annotations(k)
    )


def describe(annotation: Any) -> TypeShape:
    """Resolve an annotation into a `TypeShape`."""
    origin = get_origin(annotation)

    if origin is Annotated:
        return describe(get_args(annotation)[0])

    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) != 1:
            return _unsupported(annotation)
        inner = describe(args[0])
        nullable = len(args) != len(get_args(annotation))
        return dataclasses.replace(inner, nullable=inner.nullable or nullable)

    if origin in _CONCRETE_SEQUENCES or origin in _ABSTRACT_SEQUENCES:
        args = get_args(annotation)
        if origin is tuple:
            if len(args) != 2 or args[1] is not Ellipsis:
                return _unsupported(annotation)
        if not args:
            return _unsupported(annotation)
        item = describe(args[0])
        if item.kind in (ShapeKind.UNSUPPORTED, ShapeKind.SEQUENCE):
            return _unsupported(annotation)
        if origin in (set, frozenset) and getattr(item.py_type, "__hash__", None) is None:
            # eq dataclasses and mutable models cannot live in a set
            return _unsupported(annotation)
        container = origin if origin in _CONCRETE_SEQUENCES else list
        return TypeShape(ShapeKind.SEQUENCE, annotation, item=item, container=container)

    if origin is not None:
        # Literal[...] and other special forms are validated as leaves
        if origin is ClassVar or origin in (dict, collections.abc.Mapping, type):
            return _unsupported(annotation)
        return TypeShape(ShapeKind.PRIMITIVE, annotation)

    if annotation is Any or annotation is object or not isinstance(annotation, type):
        return _unsupported(annotation)

    cls = annotation
    if issubclass(cls, Enum) or cls in LEAF_TYPES:
        return TypeShape(ShapeKind.PRIMITIVE, cls)
    if cls in _CONCRETE_SEQUENCES or cls in (dict,) or issubclass(cls, dict):
        return _unsupported(cls)
    if issubclass(cls, list):
        item_ann = _list_item_annotation(cls)
        if item_ann is None:
            return _unsupported(cls)
        item = describe(item_ann)
        if item.kind in (ShapeKind.UNSUPPORTED, ShapeKind.SEQUENCE):
            return _unsupported(cls)
        return TypeShape(ShapeKind.LIST_SUBCLASS, cls, item=item, container=cls)
    if dataclasses.is_dataclass(cls) or issubclass(cls, BaseModel) or _is_plain_composite(cls):
        return TypeShape(ShapeKind.COMPOSITE, cls)
    return TypeShape(ShapeKind.PRIMITIVE, cls)


def zero_value(shape: TypeShape) -> Any:
    """Default for an unmatched member that declares no default of its own."""
    if shape.nullable:
        return None
    if shape.kind is ShapeKind.SEQUENCE:
        return shape.container() if shape.container is not None else []
    t = shape.py_type
    if t is bool:
        return False
    if t is int:
        return 0
    if t is float:
        return 0.0
    if t is Decimal:
        return Decimal(0)
    if t is uuid.UUID:
        return uuid.UUID(int=0)
    if t is dt.timedelta:
        return dt.timedelta(0)
    return None


# -----------------------------------------------------------------------------
# Type descriptors
# -----------------------------------------------------------------------------
class Construction(Enum):
    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"
    PLAIN = "plain"
    LIST = "list"


@dataclass(frozen=True)
class MemberDescriptor:
    name: str
    shape: TypeShape
    hints: BindAs | None = None

    @property
    def kind(self) -> BindingKind | None:
        return self.hints.kind if self.hints else None


@dataclass(frozen=True)
class TypeDescriptor:
    cls: type
    construction: Construction
    members: tuple[MemberDescriptor, ...]
    # (name, shape) of constructor arguments with no default; filled with zero values
    required: tuple[tuple[str, TypeShape], ...] = ()

    @property
    def content_member(self) -> MemberDescriptor | None:
        for m in self.members:
            if m.kind is BindingKind.CONTENT:
                return m
        return None


def _annotated_hint(annotation: Any) -> BindAs | None:
    if get_origin(annotation) is Annotated:
        for extra in get_args(annotation)[1:]:
            if isinstance(extra, BindAs):
                return extra
    return None


def _type_hints(cls: type) -> dict[str, Any]:
    return get_type_hints(cls, include_extras=True)


def _is_classvar(annotation: Any) -> bool:
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _dataclass_members(cls: type, hints: dict[str, Any]):
    members, required = [], []
    for f in dataclasses.fields(cls):
        if not f.init:
            continue
        ann = hints.get(f.name, f.type)
        shape = describe(ann)
        if f.default is MISSING and f.default_factory is MISSING:
            required.append((f.name, shape))
        if f.name.startswith("_") or shape.kind is ShapeKind.UNSUPPORTED:
            continue
        hint = f.metadata.get(METADATA_KEY) or _annotated_hint(ann)
        members.append(MemberDescriptor(f.name, shape, hint))
    return members, required


def _pydantic_members(cls: type[BaseModel]):
    # FieldInfo already carries Annotated extras in `.metadata`
    members, required = [], []
    for name, info in cls.model_fields.items():
        shape = describe(info.annotation)
        if info.is_required():
            required.append((name, shape))
        if name.startswith("_") or shape.kind is ShapeKind.UNSUPPORTED:
            continue
        hint = next((m for m in info.metadata if isinstance(m, BindAs)), None)
        alias = info.validation_alias if isinstance(info.validation_alias, str) else info.alias
        if alias:
            hint = BindAs(name=alias, kind=hint.kind if hint else None)
        members.append(MemberDescriptor(name, shape, hint))
    return members, required


def _plain_members(cls: type, hints: dict[str, Any]):
    members = []
    for name, ann in hints.items():
        if name.startswith("_") or _is_classvar(ann):
            continue
        if isinstance(getattr(cls, name, None), property):
            continue
        shape = describe(ann)
        if shape.kind is ShapeKind.UNSUPPORTED:
            continue
        members.append(MemberDescriptor(name, shape, _annotated_hint(ann)))
    return members, []


def _derive(cls: type) -> TypeDescriptor:
    if issubclass(cls, BaseModel):
        construction = Construction.PYDANTIC
        members, required = _pydantic_members(cls)
    elif dataclasses.is_dataclass(cls):
        construction = Construction.DATACLASS
        members, required = _dataclass_members(cls, _type_hints(cls))
    else:
        construction = Construction.LIST if issubclass(cls, list) else Construction.PLAIN
        members, required = _plain_members(cls, _type_hints(cls))

    content = tuple(m.name for m in members if m.kind is BindingKind.CONTENT)
    if len(content) > 1:
        raise SchemaConflictError(cls.__qualname__, content)

    desc = TypeDescriptor(cls, construction, tuple(members), tuple(required))
    log.debug(
        "derived descriptor type=%s construction=%s members=%d",
        cls.__qualname__, construction.value, len(desc.members),
    )
    return desc


_CACHE: dict[type, TypeDescriptor] = {}


def descriptor_for(cls: type) -> TypeDescriptor:
    """Return the cached descriptor for `cls`, deriving it on first use.

    Raises:
        SchemaConflictError: more than one member is content-bound.
    """
    desc = _CACHE.get(cls)
    if desc is None:
        desc = _CACHE.setdefault(cls, _derive(cls))
    return desc


