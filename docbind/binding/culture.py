# ------------------------------------------------------------
# Module: docbind/binding/culture.py
# Purpose: Explicit culture records for number and date/time text parsing.
# ------------------------------------------------------------

"""Culture definitions passed explicitly to every conversion.

Nothing here reads the process locale: parsing rules travel with the
deserialization context so concurrent calls cannot influence each other.

Fields
------
decimal_separator / group_separators
    Used for `Decimal` and `float` text.
date_formats
    `strptime` formats tried after ISO 8601 when no custom format is set.
month_names / month_abbreviations / am_pm
    Localized spellings mapped to the C-locale ones before `strptime`.
"""

from __future__ import annotations

from dataclasses import dataclass

EN_MONTHS = (
    "January", "February", "March", "April", "May", "June", "July",
    "August", "September", "October", "November", "December",
)
EN_MONTH_ABBR = tuple(m[:3] for m in EN_MONTHS)


@dataclass(frozen=True)
class Culture:
    """Parsing conventions for one locale."""

    name: str
    decimal_separator: str = "."
    group_separators: tuple[str, ...] = (",",)
    date_formats: tuple[str, ...] = ()
    month_names: tuple[str, ...] = EN_MONTHS
    month_abbreviations: tuple[str, ...] = EN_MONTH_ABBR
    am_pm: tuple[str, str] = ("AM", "PM")


INVARIANT = Culture(
    name="invariant",
    date_formats=(
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %I:%M:%S %p",
        "%m/%d/%Y %H:%M",
        "%m/%d/%Y",
        "%Y-%m-%d %H:%M:%S",
        "%d %B %Y",
        "%d %b %Y",
    ),
)

EN_US = Culture(
    name="en-US",
    date_formats=(
        "%m/%d/%Y %I:%M:%S %p",
        "%m/%d/%Y %H:%M:%S",
        "%m/%d/%Y %I:%M %p",
        "%m/%d/%Y",
        "%B %d, %Y",
        "%b %d, %Y",
    ),
)

EN_GB = Culture(
    name="en-GB",
    date_formats=(
        "%d/%m/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M",
        "%d/%m/%Y",
        "%d %B %Y",
        "%d %b %Y",
    ),
)

DE_DE = Culture(
    name="de-DE",
    decimal_separator=",",
    group_separators=(".",),
    date_formats=(
        "%d.%m.%Y %H:%M:%S",
        "%d.%m.%Y %H:%M",
        "%d.%m.%Y",
        "%d. %B %Y",
    ),
    month_names=(
        "Januar", "Februar", "März", "April", "Mai", "Juni", "Juli",
        "August", "September", "Oktober", "November", "Dezember",
    ),
    month_abbreviations=(
        "Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul",
        "Aug", "Sep", "Okt", "Nov", "Dez",
    ),
    am_pm=("", ""),
)

FR_FR = Culture(
    name="fr-FR",
    decimal_separator=",",
    # narrow no-break space, no-break space, plain space
    group_separators=("\u202f", "\u00a0", " "),
    date_formats=(
        "%d/%m/%Y %H:%M:%S",
        "%d/%m/%Y %H:%M",
        "%d/%m/%Y",
        "%d %B %Y",
    ),
    month_names=(
        "janvier", "février", "mars", "avril", "mai", "juin", "juillet",
        "août", "septembre", "octobre", "novembre", "décembre",
    ),
    month_abbreviations=(
        "janv.", "févr.", "mars", "avr.", "mai", "juin", "juil.",
        "août", "sept.", "oct.", "nov.", "déc.",
    ),
    am_pm=("", ""),
)

_REGISTRY = {c.name.casefold(): c for c in (INVARIANT, EN_US, EN_GB, DE_DE, FR_FR)}
_REGISTRY[""] = INVARIANT


def get_culture(culture: str | Culture | None) -> Culture:
    """Return a registered culture by name (case-insensitive, `_` or `-`).

    Raises:
        ValueError: the name is not registered.
    """
    if culture is None:
        return INVARIANT
    if isinstance(culture, Culture):
        return culture
    key = culture.strip().replace("_", "-").casefold()
    try:
        return _REGISTRY[key]
    except KeyError:
        raise ValueError(
            f"unknown culture {culture!r}; known: {', '.join(sorted(k for k in _REGISTRY if k))}"
        ) from None
