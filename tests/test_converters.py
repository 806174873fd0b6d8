import datetime as dt
import ipaddress
import uuid
from decimal import Decimal
from typing import Literal, Optional
from urllib.parse import ParseResult, SplitResult

import pytest

from docbind import ConversionError, DeserializationContext
from docbind.binding.converters import convert
from tests.samples import Disposition, Order, Status


@pytest.fixture
def de() -> DeserializationContext:
    return DeserializationContext.create(culture="de-DE")


def test_str_is_verbatim_even_when_optional(ctx):
    assert convert("  padded  ", str, ctx) == "  padded  "
    assert convert("", Optional[str], ctx) == ""


def test_optional_empty_text_is_none(ctx):
    assert convert("", int | None, ctx) is None
    assert convert("   ", dt.datetime | None, ctx) is None
    assert convert("", uuid.UUID | None, ctx) is None


def test_empty_text_for_non_nullable_int_fails(ctx):
    with pytest.raises(ConversionError) as err:
        convert("", int, ctx, "Person.Age")
    assert err.value.path == "Person.Age"
    assert err.value.expected == "int"


@pytest.mark.parametrize("text, expected", [("28", 28), ("-7", -7), ("+3", 3), (" 9223372036854775807 ", 9223372036854775807)])
def test_int(ctx, text, expected):
    assert convert(text, int, ctx) == expected


def test_int_rejects_fraction(ctx):
    with pytest.raises(ConversionError):
        convert("1.5", int, ctx)


def test_decimal_and_float_invariant(ctx):
    assert convert("99.9999", Decimal, ctx) == Decimal("99.9999")
    assert convert("1,234.5", Decimal, ctx) == Decimal("1234.5")
    assert convert("1e3", float, ctx) == 1000.0
    assert convert("-Infinity", float, ctx) == float("-inf")


def test_decimal_under_culture(de):
    assert convert("1.234,56", Decimal, de) == Decimal("1234.56")
    fr = DeserializationContext.create(culture="fr_FR")
    assert convert("1 234,5", float, fr) == 1234.5


@pytest.mark.parametrize("text, expected", [("true", True), ("False", False), ("1", True), ("0", False), ("TRUE", True)])
def test_bool(ctx, text, expected):
    assert convert(text, bool, ctx) is expected


def test_bool_rejects_words(ctx):
    with pytest.raises(ConversionError):
        convert("yes", bool, ctx)


def test_datetime_iso_with_seven_digit_fraction_and_offset(ctx):
    value = convert("2013-02-08T09:18:22.1234567+01:00", dt.datetime, ctx)
    assert value == dt.datetime(
        2013, 2, 8, 9, 18, 22, 123456, tzinfo=dt.timezone(dt.timedelta(hours=1))
    )
    assert value.utcoffset() == dt.timedelta(hours=1)


def test_datetime_zulu(ctx):
    value = convert("1969-07-20T20:18:00Z", dt.datetime, ctx)
    assert value == dt.datetime(1969, 7, 20, 20, 18, tzinfo=dt.timezone.utc)


def test_datetime_culture_formats(ctx):
    assert convert("02/21/2010 09:35:00", dt.datetime, ctx) == dt.datetime(2010, 2, 21, 9, 35)
    gb = DeserializationContext.create(culture="en-GB")
    assert convert("21/02/2010", dt.datetime, gb) == dt.datetime(2010, 2, 21)


def test_custom_date_format_is_strict(ctx):
    custom = DeserializationContext.create(date_format="%d %Y %b, %I:%M %S %p")
    assert convert("25 2009 Sep, 12:06 01 AM", dt.datetime, custom) == dt.datetime(2009, 9, 25, 0, 6, 1)
    with pytest.raises(ConversionError):
        convert("2009-09-25T00:06:01", dt.datetime, custom)


def test_custom_format_with_localized_month_names():
    de = DeserializationContext.create(culture="de-DE", date_format="%d. %B %Y")
    assert convert("3. März 2010", dt.datetime, de) == dt.datetime(2010, 3, 3)
    assert convert("1. Mai 2011", dt.date, de) == dt.date(2011, 5, 1)


def test_date_and_time(ctx):
    assert convert("2010-02-21", dt.date, ctx) == dt.date(2010, 2, 21)
    assert convert("09:35", dt.time, ctx) == dt.time(9, 35)
    assert convert("9:35 PM", dt.time, ctx) == dt.time(21, 35)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("00:00:00.0468006", dt.timedelta(microseconds=46801)),
        ("00:00:00.1250000", dt.timedelta(milliseconds=125)),
        ("00:55:02", dt.timedelta(minutes=55, seconds=2)),
        ("21:30:07", dt.timedelta(hours=21, minutes=30, seconds=7)),
        ("1.02:03:04", dt.timedelta(days=1, hours=2, minutes=3, seconds=4)),
        ("-00:00:05", dt.timedelta(seconds=-5)),
        ("3", dt.timedelta(days=3)),
        ("PT1H30M", dt.timedelta(hours=1, minutes=30)),
        ("P1DT2H", dt.timedelta(days=1, hours=2)),
        ("P1Y2M", dt.timedelta(days=365 + 60)),
        ("PT0.5S", dt.timedelta(milliseconds=500)),
    ],
)
def test_timedelta(ctx, text, expected):
    assert convert(text, dt.timedelta, ctx) == expected


@pytest.mark.parametrize("text", ["25:00:00", "P", "PT", "soon"])
def test_timedelta_rejects(ctx, text):
    with pytest.raises(ConversionError):
        convert(text, dt.timedelta, ctx)


def test_uuid(ctx):
    guid = "AC1FC4BC-087A-4242-B8EE-C53EBE9887A5"
    assert convert(guid, uuid.UUID, ctx) == uuid.UUID(guid)
    assert convert("{" + guid + "}", uuid.UUID, ctx) == uuid.UUID(guid)
    assert convert("", uuid.UUID, ctx) == uuid.UUID(int=0)


def test_uri_absolute_and_relative(ctx):
    assert convert("http://example.com", SplitResult, ctx).netloc == "example.com"
    assert convert("/foo/bar", ParseResult, ctx).path == "/foo/bar"


@pytest.mark.parametrize("text", ["", "http://exa mple.com"])
def test_uri_rejects(ctx, text):
    with pytest.raises(ConversionError):
        convert(text, SplitResult, ctx)


@pytest.mark.parametrize(
    "text, member",
    [
        ("THIRD", Order.THIRD),
        ("third", Order.THIRD),
        ("Third", Order.THIRD),
        ("2", Order.SECOND),
    ],
)
def test_enum_by_name_and_int_value(ctx, text, member):
    assert convert(text, Order, ctx) is member


@pytest.mark.parametrize("text", ["so-so", "SO_SO", "soSo", "SoSo", "so_so"])
def test_enum_separator_spellings(ctx, text):
    assert convert(text, Disposition, ctx) is Disposition.SO_SO


def test_enum_by_string_value(ctx):
    assert convert("active-user", Status, ctx) is Status.ACTIVE
    assert convert("ActiveUser", Status, ctx) is Status.ACTIVE


def test_enum_unknown_fails(ctx):
    with pytest.raises(ConversionError) as err:
        convert("fourth", Order, ctx, "Person.Order")
    assert "Person.Order" in str(err.value)
    assert err.value.text == "fourth"


def test_other_leaf_types_go_through_pydantic(ctx):
    assert convert("10.0.0.1", ipaddress.IPv4Address, ctx) == ipaddress.IPv4Address("10.0.0.1")
    assert convert("b", Literal["a", "b"], ctx) == "b"
    with pytest.raises(ConversionError):
        convert("c", Literal["a", "b"], ctx)
