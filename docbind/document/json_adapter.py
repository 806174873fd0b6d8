# ------------------------------------------------------------
# Module: docbind/document/json_adapter.py
# Purpose: Adapt a JSON body into the same DocumentNode tree the XML parser yields.
# ------------------------------------------------------------

"""JSON → DocumentNode adapter.

Rules
-----
- The document root is a synthetic node named `root`.
- Object keys become child elements named after the key.
- An array becomes one element (named after the key, or `item` inside
  another array) whose children are `item` elements: the nested list shape.
  The node is flagged `is_array` so a key named like the item type still
  reads as the wrapper.
- Scalars become element text: strings verbatim, `true`/`false`, JSON
  number spelling, and `null` as empty text.
- JSON has no attributes, so every node's attribute map is empty.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from docbind.core.errors import DocumentParseError
from docbind.document.node import DocumentNode

log = logging.getLogger(__name__)

ROOT_NAME = "root"
ITEM_NAME = "item"


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _node(name: str, value: Any) -> DocumentNode:
    if isinstance(value, dict):
        children = tuple(_node(str(key), item) for key, item in value.items())
        return DocumentNode(name=name, children=children)
    if isinstance(value, list):
        return DocumentNode(
            name=name,
            children=tuple(_node(ITEM_NAME, item) for item in value),
            is_array=True,
        )
    return DocumentNode(name=name, text=_scalar_text(value))


def parse_json(body: str | bytes) -> DocumentNode:
    """Parse a JSON body into a `DocumentNode` tree rooted at `root`.

    Raises:
        DocumentParseError: body is empty or not valid JSON.
    """
    if not body or not body.strip():
        raise DocumentParseError("empty JSON body")
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        log.debug("json parse failed: %s", exc)
        raise DocumentParseError(f"malformed JSON body: {exc}") from exc
    return _node(ROOT_NAME, data)
