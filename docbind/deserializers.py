# ------------------------------------------------------------
# Module: docbind/deserializers.py
# Purpose: Configured XML/JSON entry points and content-type routing.
# ------------------------------------------------------------

"""Deserializer facades.

Responsibilities
----------------
- Hold one immutable `DeserializationContext` per configured instance.
- Parse a body (str, bytes, or anything exposing `.content`) into a
  `DocumentNode` tree and hand it to the binding engine.
- Resolve a deserializer class from a response content type.

Notes
-----
- Options default to `docbind.core.config.settings` at construction time.
- Instances carry no per-call state and are safe to share across threads.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from docbind.binding.context import DeserializationContext
from docbind.binding.converters import type_name
from docbind.binding.culture import Culture
from docbind.binding.engine import bind
from docbind.core.config import settings
from docbind.document.json_adapter import parse_json
from docbind.document.node import DocumentNode
from docbind.document.xml_parser import parse_xml
from docbind.utils.timing import log_timer

log = logging.getLogger(__name__)

T = TypeVar("T")


def _body_of(content: Any) -> str | bytes:
    body = getattr(content, "content", content)
    return b"" if body is None else body


class Deserializer:
    """Base facade; subclasses define `CONTENT_TYPES` and `parse`."""

    CONTENT_TYPES: tuple[str, ...] = ()

    def __init__(
        self,
        root_element: str | None = None,
        culture: str | Culture | None = None,
        date_format: str | None = None,
        namespace: str | None = None,
    ) -> None:
        self._context = DeserializationContext.create(
            culture=culture if culture is not None else settings.DEFAULT_CULTURE,
            date_format=date_format if date_format is not None else settings.DEFAULT_DATE_FORMAT,
            root_element=root_element if root_element is not None else settings.DEFAULT_ROOT_ELEMENT,
            namespace=namespace,
        )

    @property
    def context(self) -> DeserializationContext:
        return self._context

    @property
    def root_element(self) -> str | None:
        return self._context.root_element

    @property
    def culture(self) -> Culture:
        return self._context.culture

    @property
    def date_format(self) -> str | None:
        return self._context.date_format

    @property
    def namespace(self) -> str | None:
        return self._context.namespace

    @classmethod
    def matches(cls, content_type: str) -> bool:
        """True if `content_type` (parameters ignored) is handled by this class."""
        media = content_type.split(";", 1)[0].strip().lower()
        return media in cls.CONTENT_TYPES or any(
            media.endswith(suffix) for suffix in cls.CONTENT_TYPES if suffix.startswith("+")
        )

    def parse(self, body: str | bytes) -> DocumentNode:
        raise NotImplementedError

    def deserialize(self, content: Any, target: type[T]) -> T:
        """Parse `content` and bind it into `target`.

        Raises:
            DocumentParseError: the body is empty or malformed.
            ConversionError: a matched value does not convert.
            SchemaConflictError: a target type declares two content members.
        """
        with log_timer(
            "deserialize",
            logger=log,
            level=logging.DEBUG,
            format=type(self).__name__,
            target=type_name(target),
        ):
            root = self.parse(_body_of(content))
            return bind(root, target, self._context)

    def __repr__(self) -> str:
        c = self._context
        return (
            f"{type(self).__name__}(root_element={c.root_element!r}, culture={c.culture.name!r}, "
            f"date_format={c.date_format!r}, namespace={c.namespace!r})"
        )


class XmlDeserializer(Deserializer):
    CONTENT_TYPES = ("application/xml", "text/xml", "+xml")

    def parse(self, body: str | bytes) -> DocumentNode:
        return parse_xml(body)


class JsonDeserializer(Deserializer):
    CONTENT_TYPES = ("application/json", "text/json", "text/javascript", "+json")

    def parse(self, body: str | bytes) -> DocumentNode:
        return parse_json(body)


# First match wins.
_REGISTRY: list[type[Deserializer]] = [XmlDeserializer, JsonDeserializer]


def deserializer_for(content_type: str) -> type[Deserializer]:
    """Return the deserializer class for a response content type.

    Raises `ValueError` when no registered deserializer handles it.
    """
    for cls in _REGISTRY:
        if cls.matches(content_type):
            return cls
    raise ValueError(f"No deserializer for content_type={content_type}")
