"""File-based cache with TTL expiry for reference data."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path

logger = logging.getLogger(__name__)

_CACHE_DIR = Path.home() / ".cache" / "neighborhood-globe"

AIRPORTS_TTL = 86400  # 24 hours


def get_cache_dir() -> Path:
    """Return the cache directory, creating it if needed."""
    _CACHE_DIR.mkdir(parents=True, exist_ok=True)
    return _CACHE_DIR


def cache_key(url: str, prefix: str = "airports") -> str:
    """Derive a stable file name for a remote URL, keeping its suffix."""
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:16]
    suffix = Path(url.split("?", 1)[0]).suffix or ".bin"
    return f"{prefix}_{digest}{suffix}"


def cache_get(key: str, max_age_seconds: int) -> bytes | None:
    """Return cached bytes if fresh, else None."""
    cache_dir = get_cache_dir()
    data_path = cache_dir / key
    meta_path = cache_dir / f"{key}.meta"

    if not data_path.exists() or not meta_path.exists():
        return None

    try:
        meta = json.loads(meta_path.read_text())
        age = time.time() - meta["timestamp"]
    except (json.JSONDecodeError, KeyError, TypeError):
        logger.debug("Ignoring unreadable cache metadata for %s", key)
        return None

    if age > max_age_seconds:
        logger.debug("Cache expired for %s (%.0fs old)", key, age)
        return None

    logger.debug("Cache hit for %s", key)
    return data_path.read_bytes()


def cache_put(key: str, data: bytes, source: str | None = None) -> None:
    """Store bytes in cache with the current timestamp and origin."""
    cache_dir = get_cache_dir()
    (cache_dir / key).write_bytes(data)
    (cache_dir / f"{key}.meta").write_text(
        json.dumps({"timestamp": time.time(), "source": source})
    )
    logger.debug("Cached %s (%d bytes)", key, len(data))
