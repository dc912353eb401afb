"""Response caching for GitHub API calls.

The cache is injected into ``GitHubClient``; classification code never sees it.
"""

from __future__ import annotations

import logging
import os
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class ResponseCache(ABC):
    """Interface for a key/value store of raw response bodies."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored body for ``key``, or ``None`` on a miss."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``."""


class NullCache(ResponseCache):
    """Cache that never stores anything."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        return None


class FileCache(ResponseCache):
    """Stores each response in ``<prefix>.<key>`` and serves it while fresh.

    An entry is fresh while its modification time is less than ``ttl_seconds``
    old. Files are written with mode 0600 since responses may be private.
    """

    def __init__(self, prefix: str, ttl_seconds: int) -> None:
        self._prefix = prefix
        self._ttl_seconds = ttl_seconds

    def path_for(self, key: str) -> Path:
        return Path(f"{self._prefix}.{key}")

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            modified_at = path.stat().st_mtime
        except FileNotFoundError:
            return None

        age_seconds = time.time() - modified_at
        if age_seconds >= self._ttl_seconds:
            logger.debug("Cache entry expired", extra={"cache_key": key, "age_seconds": age_seconds})
            return None

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            logger.warning("Ignoring undecodable cache entry", extra={"cache_key": key})
            return None

        logger.debug("Cache hit", extra={"cache_key": key, "age_seconds": age_seconds})
        return content

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(value)


def build_cache(prefix: str, ttl_seconds: int) -> ResponseCache:
    """Return a ``FileCache`` when ``prefix`` is set, otherwise a ``NullCache``."""
    if not prefix:
        return NullCache()
    return FileCache(prefix=prefix, ttl_seconds=ttl_seconds)
