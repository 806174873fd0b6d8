# ------------------------------------------------------------
# Module: docbind/response.py
# Purpose: Minimal response value handed over by a transport layer.
# ------------------------------------------------------------

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Response:
    """Raw HTTP-style response; deserializers read only `content`.

    Notes
    -----
    - `completed` is False when the transport gave up (timeout, DNS, ...);
      `error_message` then says why.
    """

    content: str | bytes = ""
    status_code: int = 0
    content_type: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    completed: bool = True
    error_message: str | None = None

    @property
    def is_successful(self) -> bool:
        return self.completed and 200 <= self.status_code <= 299

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
