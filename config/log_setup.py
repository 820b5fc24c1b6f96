"""Process-wide logging configuration."""

from __future__ import annotations

import logging

from .settings import LOG_LEVEL

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure root logging once and quiet the HTTP client loggers."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    _configured = True
