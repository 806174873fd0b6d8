# ------------------------------------------------------------
# Module: docbind/document/xml_parser.py
# Purpose: Parse an XML response body into an immutable DocumentNode tree.
# ------------------------------------------------------------

"""XML → DocumentNode parser.

Summary:
    Decodes the body (str or bytes, any BOM/declared encoding), parses it with
    `lxml`, and converts the element tree into `DocumentNode`s so the binding
    engine never touches lxml objects.

Details:
    - Comments and processing instructions are dropped by the parser.
    - Entities are not resolved and the network is never consulted.
    - Whitespace-only text runs (pretty-printing) are ignored.
    - Tags and attribute keys are reduced to local names; the element
      namespace is kept on the node for optional filtering.
"""

from __future__ import annotations

import codecs
import logging
import re

from lxml import etree

from docbind.core.errors import DocumentParseError
from docbind.document.node import DocumentNode, local_name

log = logging.getLogger(__name__)

_XML_ENC_RE = re.compile(br'<\?xml[^>]*encoding=["\']([^"\']+)["\']', re.IGNORECASE)
_XML_DECL_RE = re.compile(r"^\s*<\?xml[^>]*\?>", re.IGNORECASE)


def _normalize_xml_bytes(xml: bytes) -> bytes:
    """Decode using declared/BOM encoding, then re-encode as UTF-8, stripping XML decl."""
    s = xml.lstrip()

    if s.startswith(codecs.BOM_UTF8):
        text = s[len(codecs.BOM_UTF8):].decode("utf-8", errors="strict")
    elif s.startswith(codecs.BOM_UTF32_LE) or s.startswith(codecs.BOM_UTF32_BE):
        # check UTF-32 first: its LE BOM starts with the UTF-16 LE BOM
        text = s.decode("utf-32", errors="strict")
    elif s.startswith(codecs.BOM_UTF16_LE) or s.startswith(codecs.BOM_UTF16_BE):
        text = s.decode("utf-16", errors="strict")
    else:
        m = _XML_ENC_RE.search(s[:200])  # only header
        enc = m.group(1).decode("ascii").strip().lower() if m else "utf-8"
        text = s.decode(enc, errors="strict")
    return _strip_declaration(text).encode("utf-8")


def _strip_declaration(text: str) -> str:
    return _XML_DECL_RE.sub("", text.lstrip("\ufeff"), count=1)


def _parser() -> etree.XMLParser:
    # parsers are not thread-safe to share; build one per call
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
    )


def _is_element(elem) -> bool:
    return isinstance(elem.tag, str)


def _own_text(elem) -> str:
    parts = [elem.text or ""]
    parts.extend(child.tail or "" for child in elem)
    return "".join(p for p in parts if p.strip())


def _full_text(elem) -> str:
    return "".join(p for p in elem.itertext() if p.strip())


def _to_node(elem) -> DocumentNode:
    ns, name = local_name(elem.tag)
    attrs: dict[str, str] = {}
    for key, val in elem.attrib.items():
        attrs.setdefault(local_name(key)[1], val)
    children = tuple(_to_node(child) for child in elem if _is_element(child))
    return DocumentNode(
        name=name,
        attributes=attrs,
        children=children,
        text=_own_text(elem),
        namespace=ns,
        full_text=_full_text(elem),
    )


def parse_xml(body: str | bytes) -> DocumentNode:
    """Parse an XML body and return its root as a `DocumentNode`.

    Raises:
        DocumentParseError: body is empty, undecodable, or not well-formed XML.
    """
    if not body or not body.strip():
        raise DocumentParseError("empty XML body")
    try:
        if isinstance(body, bytes):
            data = _normalize_xml_bytes(body)
        else:
            data = _strip_declaration(body).encode("utf-8")
        root = etree.fromstring(data, parser=_parser())
    except (etree.XMLSyntaxError, UnicodeDecodeError, LookupError) as exc:
        log.debug("xml parse failed: %s", exc)
        raise DocumentParseError(f"malformed XML body: {exc}") from exc
    return _to_node(root)
