from __future__ import annotations

import logging
import os
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def resolve_log_level(value: str | None = None) -> int:
    name = (value or os.getenv("SAFESPEND_LOG_LEVEL") or "INFO").strip().upper()
    level = getattr(logging, name, None)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> int:
    """Configure the root logger once, at app entry. Library modules only call ``getLogger``."""
    resolved = resolve_log_level(level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logging.basicConfig(level=resolved, handlers=[handler], force=True)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    return resolved
