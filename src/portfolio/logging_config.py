from __future__ import annotations

import logging

from portfolio.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# request lines come from portfolio.api.middleware; these only duplicate them
QUIET_LOGGERS = ("uvicorn.access", "multipart.multipart")

_LOG_CONFIGURED = False


def resolve_level(name: str | None) -> int:
    value = (name or get_settings().log_level).upper()
    level = logging.getLevelName(value)
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level: str | None = None) -> None:
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return

    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _LOG_CONFIGURED = True
