# settings.py
import logging
import os
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# local .env, if any; real environment wins
load_dotenv(find_dotenv(usecwd=True))


def _optional_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None:
        return default
    raw = raw.strip().lower()
    if raw in ("", "none", "unbounded"):
        return None
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not an integer); using %r", name, raw, default)
        return default
    return None if value < 0 else value


def _float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number); using %r", name, raw, default)
        return default


# Generation
MAX_RETRIES = _optional_int("MARKOV_MAX_RETRIES", 1000)
MAX_WALK    = _optional_int("MARKOV_MAX_WALK", None)

# Chunked loading (seconds)
CHUNK_MAX_TIME  = _float("MARKOV_CHUNK_MAX_TIME", 0.1)
CHUNK_WAIT_TIME = _float("MARKOV_CHUNK_WAIT_TIME", 0.02)

# URL loading (seconds)
HTTP_TIMEOUT = _float("MARKOV_HTTP_TIMEOUT", 10.0)
