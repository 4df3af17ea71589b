"""Debug logging switch driven by an environment flag."""

from __future__ import annotations

import logging
import os

from ..constants import DEBUG_ENV_VAR


def debug_enabled() -> bool:
    """Check debug mode env flag."""
    return os.environ.get(DEBUG_ENV_VAR, "").strip() == "1"


def configure_logging() -> None:
    """Send flightdeck debug logs to stderr in debug mode only."""
    logger = logging.getLogger("flightdeck")
    if logger.handlers:
        return
    if not debug_enabled():
        logger.addHandler(logging.NullHandler())
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
