"""
OpenAI client factory for the packing-note vision model.

Environment variables are loaded via dotenv; the client reads OPENAI_API_KEY
(and optionally OPENAI_BASE_URL) from the environment. Tests swap the client
with `set_client`.
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from openai import OpenAI

load_dotenv()

logger = logging.getLogger(__name__)

_client: OpenAI | None = None


def get_client() -> OpenAI:
    """Return a singleton OpenAI client instance."""
    global _client
    if _client is None:
        _client = OpenAI()
        logger.info("OpenAI client configured")
    return _client


def set_client(client) -> None:
    """Replace the shared client (None resets to lazy creation)."""
    global _client
    _client = client
