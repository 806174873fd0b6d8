# ------------------------------------------------------------
# Module: docbind/core/logging.py
# Purpose: Configure unified logging for hosts that embed the library.
# ------------------------------------------------------------

"""Configure unified, stdout-based logging for docbind.

Responsibilities
----------------
- Initialize a single consistent logging setup on request.
- Respect toggles from `settings` (log level, mute).
- Set the chosen level on the `docbind` package logger; module loggers
  (`logging.getLogger(__name__)`) inherit it.

Notes
-----
- The library never calls this itself; importing docbind leaves the host's
  logging untouched. Applications and tests opt in.
- `basicConfig` is idempotent unless `force=True`.
"""

import logging
import sys

from docbind.core.config import Settings, settings as default_settings

# module loggers use __name__, so the package logger covers all of them
LOGGER_NAMES = ("docbind",)


def configure_logging(cfg: Settings | None = None) -> None:
    """Initialize global logging once.

    Notes
    -----
    - Hard-mutes all logs if `MUTE_ALL_LOGS` is set.
    - Ensures stdout formatting for container log aggregation.
    """
    cfg = cfg or default_settings

    # Hard mute for CI/benchmarks: disables ALL logging below CRITICAL globally.
    if cfg.MUTE_ALL_LOGS:
        logging.disable(logging.CRITICAL)
        return

    logging.basicConfig(
        level=cfg.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stdout,
    )

    for name in LOGGER_NAMES:
        logging.getLogger(name).setLevel(cfg.LOG_LEVEL)
