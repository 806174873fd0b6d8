# ------------------------------------------------------------
# Module: docbind/binding/context.py
# Purpose: Immutable per-call options threaded through every binding step.
# ------------------------------------------------------------

from __future__ import annotations

from dataclasses import dataclass, field

from docbind.binding.culture import INVARIANT, Culture, get_culture


@dataclass(frozen=True)
class DeserializationContext:
    """Options for one deserialization call.

    Attributes:
        culture: number and date/time parsing conventions.
        date_format: strict `strptime` format; overrides culture date parsing.
        root_element: dot-separated path descended before binding starts.
        namespace: when set, only elements in this namespace (or none) bind.

    Example:
        >>> ctx = DeserializationContext.create(culture="de-DE", date_format="%d.%m.%Y")
    """

    culture: Culture = field(default=INVARIANT)
    date_format: str | None = None
    root_element: str | None = None
    namespace: str | None = None

    @classmethod
    def create(
        cls,
        culture: str | Culture | None = None,
        date_format: str | None = None,
        root_element: str | None = None,
        namespace: str | None = None,
    ) -> "DeserializationContext":
        return cls(
            culture=get_culture(culture),
            date_format=date_format or None,
            root_element=root_element or None,
            namespace=namespace or None,
        )

    def nested(self) -> "DeserializationContext":
        """Context for child nodes: same culture and format, root path consumed."""
        if self.root_element is None:
            return self
        return DeserializationContext(self.culture, self.date_format, None, self.namespace)
