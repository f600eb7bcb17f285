"""Logging configuration for folio.

This module provides consistent logging across the codebase.

Usage in other modules:
    import logging
    log = logging.getLogger(__name__)

    log.debug("Detailed info for debugging")
    log.info("General operational info")
    log.warning("Unexpected but handled situation (bad front matter, missing locale)")
    log.error("A single file could not be read or parsed")

The log level can be configured via the FOLIO_LOG_LEVEL environment variable:
    - DEBUG: Detailed debugging information
    - INFO: General operational messages (default)
    - WARNING: Unexpected situations that were handled
    - ERROR: Errors that prevented an operation
"""

import logging
import os
import sys

_quiet = False


def _env_level() -> int:
    """Log level from FOLIO_LOG_LEVEL (default INFO)."""
    level_name = os.environ.get("FOLIO_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def configure_logging() -> None:
    """Configure logging for the folio package.

    Call this once at application startup (e.g., in cli.py).
    Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger("folio")

    # Skip if already configured (has handlers)
    if root_logger.handlers:
        return

    level = _env_level()
    if _quiet:
        level = max(level, logging.ERROR)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="[%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root_logger.setLevel(level)
    root_logger.addHandler(handler)

    # Prevent propagation to root logger (avoids duplicate messages)
    root_logger.propagate = False


def set_quiet_mode(quiet: bool) -> None:
    """Suppress warnings so only errors reach stderr.

    Content warnings (validation fallbacks, missing locale directories) are
    routine during a site build; --quiet hides them.
    """
    global _quiet
    _quiet = quiet

    root_logger = logging.getLogger("folio")
    level = logging.ERROR if quiet else _env_level()
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)

