from __future__ import annotations

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Apply LOG_LEVEL to the root logger once at startup."""
    resolved = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)

    # httpx logs every request at INFO; keep it quieter than our own loggers.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))
