# ------------------------------------------------------------
# Module: docbind/core/errors.py
# Purpose: Define typed deserialization exceptions for fail-fast error handling.
# ------------------------------------------------------------

"""Exception types for the binding engine.

These provide specific, readable errors for the failure modes a caller can act
on, and keep the recursive binding flow simple to reason about.

Responsibilities
----------------
- Provide a base `DeserializationError` for catch-all handling.
- Surface unparsable bodies as `DocumentParseError`.
- Surface text that cannot become the target type as `ConversionError`.
- Surface invalid type declarations as `SchemaConflictError`.

Notes
-----
- A missing node/attribute is never an error; the member keeps its default.
- Every error aborts the whole call; there are no partial results.
"""

from __future__ import annotations


class DeserializationError(Exception):
    """Base class for binding failures."""


class DocumentParseError(DeserializationError):
    """Raised when the response body is not a well-formed document."""


class ConversionError(DeserializationError):
    """Raised when raw text cannot be converted into the member's type."""

    def __init__(self, path: str, text: str, expected: str, reason: str | None = None):
        self.path = path
        self.text = text
        self.expected = expected
        self.reason = reason
        msg = f"cannot convert {text!r} to {expected} at '{path or '<root>'}'"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class SchemaConflictError(DeserializationError):
    """Raised when a type declares more than one content-bound member."""

    def __init__(self, type_name: str, members: tuple[str, ...]):
        self.type_name = type_name
        self.members = members
        super().__init__(
            f"{type_name} binds more than one member to text content: {', '.join(members)}"
        )
