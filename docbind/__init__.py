# ------------------------------------------------------------
# Module: docbind/__init__.py
# Purpose: Public API re-exports.
# ------------------------------------------------------------

from docbind.binding.context import DeserializationContext
from docbind.binding.culture import Culture, get_culture
from docbind.binding.descriptors import (
    BindAs,
    BindingKind,
    as_attribute,
    as_content,
    as_element,
    bind,
    element_name,
)
from docbind.binding.engine import bind as bind_document
from docbind.core.errors import (
    ConversionError,
    DeserializationError,
    DocumentParseError,
    SchemaConflictError,
)
from docbind.deserializers import (
    Deserializer,
    JsonDeserializer,
    XmlDeserializer,
    deserializer_for,
)
from docbind.document.json_adapter import parse_json
from docbind.document.node import DocumentNode
from docbind.document.xml_parser import parse_xml
from docbind.response import Response

__all__ = [
    "BindAs",
    "BindingKind",
    "ConversionError",
    "Culture",
    "DeserializationContext",
    "DeserializationError",
    "Deserializer",
    "DocumentNode",
    "DocumentParseError",
    "JsonDeserializer",
    "Response",
    "SchemaConflictError",
    "XmlDeserializer",
    "as_attribute",
    "as_content",
    "as_element",
    "bind",
    "bind_document",
    "deserializer_for",
    "element_name",
    "get_culture",
    "parse_json",
    "parse_xml",
]
