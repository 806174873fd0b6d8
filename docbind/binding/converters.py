# ------------------------------------------------------------
# Module: docbind/binding/converters.py
# Purpose: Convert raw node/attribute text into typed leaf values.
# ------------------------------------------------------------

"""Text → typed value conversion for leaf members and list items.

Summary:
    `convert()` dispatches on the resolved `TypeShape` of a member and parses
    the raw text under the call's `DeserializationContext` (culture, custom
    date format). Every failure raises `ConversionError` carrying the member
    path, the raw text and the expected type; nothing is retried or swallowed.

Rules
-----
- str: verbatim, empty included (also when Optional).
- Optional[T]: empty/whitespace text → None.
- int: sign + digits; Decimal/float: culture separators, exponent allowed.
- bool: true/false (any case) or a number (nonzero → True).
- datetime/date/time: custom format (strict) or ISO 8601, then culture formats.
- UUID: standard forms; empty → UUID(int=0).
- SplitResult/ParseResult: absolute or relative URI references.
- timedelta: [-][d.]hh:mm[:ss[.fffffff]], integer days, or ISO 8601 duration.
- Enum: names, then string values (name-matching ladder), then integer values.
- anything else: pydantic `TypeAdapter` validation.
"""

from __future__ import annotations

import datetime as dt
import functools
import re
import uuid
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable
from urllib.parse import ParseResult, SplitResult, urlparse, urlsplit

from pydantic import TypeAdapter, ValidationError
from pydantic.errors import PydanticSchemaGenerationError

from docbind.binding.context import DeserializationContext
from docbind.binding.culture import EN_MONTH_ABBR, EN_MONTHS, Culture
from docbind.binding.descriptors import ShapeKind, TypeShape, describe
from docbind.binding.names import best_match
from docbind.core.errors import ConversionError

_INT_RE = re.compile(r"[+-]?[0-9]+")
_DEC_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_FLOAT_WORDS = {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan", "+nan", "-nan"}
_FRACTION_RE = re.compile(r"(\.[0-9]{6})[0-9]+")
_WS_RE = re.compile(r"\s")

_CLOCK_RE = re.compile(
    r"(?P<sign>-)?(?:(?P<days>[0-9]+)\.)?(?P<h>[0-9]{1,2}):(?P<m>[0-9]{1,2})"
    r"(?::(?P<s>[0-9]{1,2})(?:[.,](?P<frac>[0-9]{1,7}))?)?"
)
_NUM = r"[0-9]+(?:[.,][0-9]+)?"
_ISO_DURATION_RE = re.compile(
    rf"(?P<sign>-)?P(?:(?P<Y>{_NUM})Y)?(?:(?P<M>{_NUM})M)?(?:(?P<W>{_NUM})W)?(?:(?P<D>{_NUM})D)?"
    rf"(?:T(?:(?P<H>{_NUM})H)?(?:(?P<TM>{_NUM})M)?(?:(?P<S>{_NUM})S)?)?",
    re.IGNORECASE,
)
# calendar approximations for ISO years/months
_ISO_SECONDS = {
    "Y": 365 * 86400,
    "M": 30 * 86400,
    "W": 7 * 86400,
    "D": 86400,
    "H": 3600,
    "TM": 60,
    "S": 1,
}

_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%I:%M:%S %p", "%I:%M %p")


# -----------------------------------------------------------------------------
# Numbers and booleans
# -----------------------------------------------------------------------------
def _normalize_number(text: str, culture: Culture) -> str:
    s = text.strip()
    for sep in culture.group_separators:
        if sep and sep != culture.decimal_separator:
            s = s.replace(sep, "")
    if culture.decimal_separator != ".":
        if "." in s:
            raise ValueError(f"unexpected '.' for culture {culture.name}")
        s = s.replace(culture.decimal_separator, ".")
    return s


def parse_int(text: str, ctx: DeserializationContext) -> int:
    s = text.strip()
    if not _INT_RE.fullmatch(s):
        raise ValueError("not an integer")
    return int(s)


def parse_decimal(text: str, ctx: DeserializationContext) -> Decimal:
    s = _normalize_number(text, ctx.culture)
    if not _DEC_RE.fullmatch(s):
        raise ValueError("not a decimal number")
    try:
        return Decimal(s)
    except InvalidOperation as exc:
        raise ValueError("not a decimal number") from exc


def parse_float(text: str, ctx: DeserializationContext) -> float:
    stripped = text.strip()
    if stripped.casefold() in _FLOAT_WORDS:
        return float(stripped)
    s = _normalize_number(stripped, ctx.culture)
    if not _DEC_RE.fullmatch(s):
        raise ValueError("not a floating point number")
    return float(s)


def parse_bool(text: str, ctx: DeserializationContext) -> bool:
    s = text.strip().casefold()
    if s == "true":
        return True
    if s == "false":
        return False
    return parse_decimal(text, ctx) != 0


# -----------------------------------------------------------------------------
# Dates and times
# -----------------------------------------------------------------------------
@functools.lru_cache(maxsize=32)
def _name_table(culture: Culture) -> tuple[re.Pattern | None, dict[str, str]]:
    mapping: dict[str, str] = {}
    for local, en in zip(culture.month_names, EN_MONTHS):
        if local and local != en:
            mapping[local.casefold()] = en
    for local, en in zip(culture.month_abbreviations, EN_MONTH_ABBR):
        if local and local != en:
            mapping.setdefault(local.casefold(), en)
    for local, en in zip(culture.am_pm, ("AM", "PM")):
        if local and local != en:
            mapping.setdefault(local.casefold(), en)
    if not mapping:
        return None, mapping
    words = sorted(mapping, key=len, reverse=True)
    pattern = re.compile(
        r"(?<!\w)(" + "|".join(re.escape(w) for w in words) + r")(?!\w)",
        re.IGNORECASE,
    )
    return pattern, mapping


def _to_c_names(text: str, culture: Culture) -> str:
    """Replace localized month names and AM/PM designators with C-locale ones."""
    pattern, mapping = _name_table(culture)
    if pattern is None:
        return text
    return pattern.sub(lambda m: mapping[m.group(1).casefold()], text)


def _strptime(text: str, fmt: str, culture: Culture) -> dt.datetime:
    return dt.datetime.strptime(_to_c_names(text, culture), fmt)


def parse_datetime(text: str, ctx: DeserializationContext) -> dt.datetime:
    s = text.strip()
    if ctx.date_format:
        return _strptime(s, ctx.date_format, ctx.culture)
    try:
        return dt.datetime.fromisoformat(_FRACTION_RE.sub(r"\1", s, count=1))
    except ValueError:
        pass
    for fmt in ctx.culture.date_formats:
        try:
            return _strptime(s, fmt, ctx.culture)
        except ValueError:
            continue
    raise ValueError("unrecognized date/time")


def parse_date(text: str, ctx: DeserializationContext) -> dt.date:
    if not ctx.date_format:
        try:
            return dt.date.fromisoformat(text.strip())
        except ValueError:
            pass
    return parse_datetime(text, ctx).date()


def parse_time(text: str, ctx: DeserializationContext) -> dt.time:
    s = text.strip()
    if ctx.date_format:
        return _strptime(s, ctx.date_format, ctx.culture).timetz()
    try:
        return dt.time.fromisoformat(_FRACTION_RE.sub(r"\1", s, count=1))
    except ValueError:
        pass
    for fmt in _TIME_FORMATS:
        try:
            return _strptime(s, fmt, ctx.culture).time()
        except ValueError:
            continue
    raise ValueError("unrecognized time of day")


def _number(part: str | None) -> float:
    return float(part.replace(",", ".")) if part else 0.0


def parse_timedelta(text: str, ctx: DeserializationContext) -> dt.timedelta:
    s = text.strip()
    if _INT_RE.fullmatch(s):
        return dt.timedelta(days=int(s))

    m = _CLOCK_RE.fullmatch(s)
    if m:
        h, mi, sec = int(m["h"]), int(m["m"]), int(m["s"] or 0)
        if h > 23 or mi > 59 or sec > 59:
            raise ValueError("time span component out of range")
        ticks = int((m["frac"] or "").ljust(7, "0"))
        value = dt.timedelta(
            days=int(m["days"] or 0),
            hours=h,
            minutes=mi,
            seconds=sec,
            microseconds=ticks / 10,
        )
        return -value if m["sign"] else value

    m = _ISO_DURATION_RE.fullmatch(s)
    if m and any(m[k] for k in _ISO_SECONDS) and not s.upper().endswith("T"):
        seconds = sum(_number(m[k]) * factor for k, factor in _ISO_SECONDS.items())
        value = dt.timedelta(seconds=seconds)
        return -value if m["sign"] else value

    raise ValueError("unrecognized duration")


# -----------------------------------------------------------------------------
# Identifiers, URIs, enums
# -----------------------------------------------------------------------------
def parse_uuid(text: str, ctx: DeserializationContext) -> uuid.UUID:
    s = text.strip()
    if not s:
        return uuid.UUID(int=0)
    return uuid.UUID(s)


def _uri(split: Callable[[str], Any]) -> Callable[[str, DeserializationContext], Any]:
    def parse(text: str, ctx: DeserializationContext) -> Any:
        s = text.strip()
        if not s or _WS_RE.search(s):
            raise ValueError("not a URI reference")
        return split(s)

    return parse


def parse_enum(text: str, enum_cls: type[Enum]) -> Enum:
    """Match enum text by name, then string value, then integer value."""
    s = text.strip()
    hit = best_match(enum_cls.__members__.items(), s, key=lambda kv: kv[0])
    if hit is not None:
        return hit[1]
    by_value = best_match(
        (m for m in enum_cls if isinstance(m.value, str)), s, key=lambda m: m.value
    )
    if by_value is not None:
        return by_value
    if _INT_RE.fullmatch(s):
        return enum_cls(int(s))
    raise ValueError(f"no {enum_cls.__name__} member matches")


@functools.lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


_PARSERS: dict[type, Callable[[str, DeserializationContext], Any]] = {
    bool: parse_bool,
    int: parse_int,
    float: parse_float,
    Decimal: parse_decimal,
    dt.datetime: parse_datetime,
    dt.date: parse_date,
    dt.time: parse_time,
    dt.timedelta: parse_timedelta,
    uuid.UUID: parse_uuid,
    SplitResult: _uri(urlsplit),
    ParseResult: _uri(urlparse),
}


def type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------
def convert(
    text: str,
    shape: TypeShape | Any,
    ctx: DeserializationContext,
    path: str = "",
) -> Any:
    """Convert `text` into the leaf type described by `shape`.

    Args:
        text: raw node/attribute text (never None).
        shape: resolved `TypeShape`, or a bare type annotation.
        ctx: culture and date format for this call.
        path: member path used in error messages.

    Raises:
        ConversionError: the text does not parse as the target type.
    """
    if not isinstance(shape, TypeShape):
        shape = describe(shape)
    target = shape.py_type

    if target is str:
        return text
    if shape.nullable and not text.strip():
        return None
    if shape.kind is not ShapeKind.PRIMITIVE:
        raise ConversionError(path, text, type_name(target), "not a leaf type")

    try:
        if isinstance(target, type):
            if issubclass(target, Enum):
                return parse_enum(text, target)
            parser = _PARSERS.get(target)
            if parser is not None:
                return parser(text, ctx)
            if issubclass(target, str):
                return target(text)
        return _adapter(target).validate_python(text)
    except (ValueError, TypeError, OverflowError, PydanticSchemaGenerationError) as exc:
        # pydantic's ValidationError is a ValueError subclass
        reason = exc.errors()[0]["msg"] if isinstance(exc, ValidationError) else str(exc)
        raise ConversionError(path, text, type_name(target), reason) from exc
