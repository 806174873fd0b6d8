import datetime as dt
import uuid
from collections.abc import Sequence
from decimal import Decimal
from typing import Any, Optional

import pytest

from docbind import BindingKind, SchemaConflictError, bind
from docbind.binding.descriptors import (
    Construction,
    ShapeKind,
    describe,
    descriptor_for,
    zero_value,
)
from tests.samples import (
    Account,
    Database,
    Foe,
    FoeList,
    Friend,
    Image,
    Note,
    Person,
    Picture,
    Required,
    Status,
    Tagged,
    TwilioCallList,
    WrongNote,
)


@pytest.mark.parametrize(
    "annotation, kind, nullable",
    [
        (int, ShapeKind.PRIMITIVE, False),
        (Optional[int], ShapeKind.PRIMITIVE, True),
        (dt.datetime | None, ShapeKind.PRIMITIVE, True),
        (Friend, ShapeKind.COMPOSITE, False),
        (Friend | None, ShapeKind.COMPOSITE, True),
        (list[Friend], ShapeKind.SEQUENCE, False),
        (FoeList, ShapeKind.LIST_SUBCLASS, False),
        (Database, ShapeKind.COMPOSITE, False),
        (dict[str, int], ShapeKind.UNSUPPORTED, False),
        (Any, ShapeKind.UNSUPPORTED, False),
        (int | str, ShapeKind.UNSUPPORTED, False),
        (list[list[int]], ShapeKind.UNSUPPORTED, False),
        (tuple[int, str], ShapeKind.UNSUPPORTED, False),
    ],
)
def test_describe(annotation, kind, nullable):
    shape = describe(annotation)
    assert shape.kind is kind
    assert shape.nullable is nullable


def test_sequence_containers():
    assert describe(Sequence[int]).container is list
    assert describe(tuple[int, ...]).container is tuple
    assert describe(set[str]).container is set
    assert describe(FoeList).item.py_type is Foe


def test_sets_of_unhashable_items_are_unsupported():
    assert describe(frozenset[Image]).kind is ShapeKind.UNSUPPORTED
    assert describe(set[Image]).kind is ShapeKind.UNSUPPORTED
    assert describe(list[Image]).kind is ShapeKind.SEQUENCE
    assert describe(frozenset[Status]).container is frozenset


def test_element_name_decorator_and_default():
    assert describe(Picture).element_name == "image"
    assert describe(Friend).element_name == "Friend"


def test_zero_values():
    assert zero_value(describe(int)) == 0
    assert zero_value(describe(Decimal)) == Decimal(0)
    assert zero_value(describe(bool)) is False
    assert zero_value(describe(uuid.UUID)) == uuid.UUID(int=0)
    assert zero_value(describe(dt.timedelta)) == dt.timedelta(0)
    assert zero_value(describe(int | None)) is None
    assert zero_value(describe(str)) is None
    assert zero_value(describe(list[int])) == []


def test_dataclass_descriptor_skips_unbindable_members():
    desc = descriptor_for(Person)
    names = [m.name for m in desc.members]
    assert desc.construction is Construction.DATACLASS
    assert "metadata" not in names
    assert "read_only" not in names
    assert names[:3] == ["name", "start_date", "age"]


def test_field_metadata_hints():
    desc = descriptor_for(Note)
    kinds = {m.name: m.kind for m in desc.members}
    assert kinds == {"id": BindingKind.ATTRIBUTE, "title": None, "message": BindingKind.CONTENT}
    assert desc.content_member.name == "message"
    assert "TITLE" not in kinds


def test_bind_without_kind_keeps_the_default_search():
    members = {m.name: m for m in descriptor_for(Tagged).members}
    assert members["age"].hints is None
    assert members["label"].kind is BindingKind.ELEMENT


def test_bind_rejects_two_kinds():
    with pytest.raises(ValueError):
        bind(attribute=True, content=True)
    with pytest.raises(ValueError):
        bind(element=True, attribute=True)


def test_required_fields_are_recorded():
    desc = descriptor_for(Required)
    assert [name for name, _ in desc.required] == ["count", "ratio", "ok", "label"]


def test_pydantic_alias_becomes_explicit_name():
    desc = descriptor_for(Account)
    members = {m.name: m for m in desc.members}
    assert desc.construction is Construction.PYDANTIC
    assert members["account_id"].hints.name == "acct"
    assert members["text"].kind is BindingKind.CONTENT


def test_list_subclass_and_plain_descriptors():
    calls = descriptor_for(TwilioCallList)
    assert calls.construction is Construction.LIST
    assert [m.name for m in calls.members] == ["page", "num_pages"]

    db = descriptor_for(Database)
    assert db.construction is Construction.PLAIN
    port = next(m for m in db.members if m.name == "port")
    assert port.hints.name == "Port"


def test_two_content_members_conflict():
    with pytest.raises(SchemaConflictError) as err:
        descriptor_for(WrongNote)
    assert err.value.members == ("id", "text")


def test_descriptors_are_cached():
    assert descriptor_for(Friend) is descriptor_for(Friend)
