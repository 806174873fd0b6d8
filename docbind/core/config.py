# ------------------------------------------------------------
# Module: docbind/core/config.py
# Purpose: Central, typed library settings (code defaults; optional env overrides).
# ------------------------------------------------------------

"""Typed configuration hub for the library.

Responsibilities
----------------
- Provide strongly-typed logging toggles and deserializer defaults.
- Reject unknown keys early so typos do not silently fall back to defaults.
- Offer `Settings.from_env()` for hosts that configure through `DOCBIND_*`
  environment variables or a `.env` file.

Notes
-----
- Importing this module never reads the environment; `settings` holds code
  defaults. Call `from_env()` explicitly when env overrides are wanted.
- Deserializers read these values only as defaults at construction time.
"""

from __future__ import annotations

import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

from docbind.binding.culture import get_culture

ENV_PREFIX = "DOCBIND_"


class Settings(BaseModel):
    """
    Library configuration with code-only defaults.

    Notes
    -----
    - Extras are forbidden to surface typos/unknown keys early.
    - `DEFAULT_CULTURE` must name a registered culture.
    """

    model_config = dict(extra="forbid", frozen=True)

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    MUTE_ALL_LOGS: bool = False

    # Deserializer defaults
    DEFAULT_CULTURE: str = "invariant"
    DEFAULT_DATE_FORMAT: str | None = None
    DEFAULT_ROOT_ELEMENT: str | None = None

    @field_validator("DEFAULT_CULTURE")
    @classmethod
    def _known_culture(cls, v: str) -> str:
        get_culture(v)
        return v

    @field_validator("DEFAULT_DATE_FORMAT", "DEFAULT_ROOT_ELEMENT")
    @classmethod
    def _blank_is_none(cls, v: str | None) -> str | None:
        return v or None

    @classmethod
    def from_env(cls, dotenv_path: str | None = None) -> "Settings":
        """Build settings from `DOCBIND_*` variables (after loading `.env`)."""
        load_dotenv(dotenv_path)
        values = {}
        for name in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{name}")
            if raw is not None:
                values[name] = raw
        return cls.model_validate(values)


settings = Settings()
