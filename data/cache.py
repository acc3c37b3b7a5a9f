"""
Time-limited caches for fetched price history.

Callers inject one of these into SignalGenerator; the analysis engine itself
never touches a cache.
"""

import json
import os
import tempfile
import threading
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

import config
from utils.logger import get_logger

logger = get_logger(__name__)


class PriceCache(ABC):
    """Key/value cache with expiry."""

    def __init__(self, ttl_seconds: float = None):
        if ttl_seconds is None:
            ttl_seconds = config.CACHE_TTL_MINUTES * 60
        self.ttl_seconds = ttl_seconds

    def _is_fresh(self, stored_at: float) -> bool:
        return time.time() - stored_at <= self.ttl_seconds

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None if missing or expired."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""


class MemoryCache(PriceCache):
    """In-process cache, safe to share between threads."""

    def __init__(self, ttl_seconds: float = None):
        super().__init__(ttl_seconds)
        self._entries: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not self._is_fresh(entry["timestamp"]):
                del self._entries[key]
                return None
            return entry["value"]

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = {"timestamp": time.time(), "value": value}

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class JsonFileCache(PriceCache):
    """
    Cache persisted to a single JSON file.

    Values must be JSON serializable. The file is re-read on every lookup so
    separate processes see each other's writes.
    """

    def __init__(self, path: str = None, ttl_seconds: float = None):
        """
        Initialize file cache.

        Args:
            path: JSON file location (default from config)
            ttl_seconds: Entry lifetime (default CACHE_TTL_MINUTES)
        """
        super().__init__(ttl_seconds)
        self.path = Path(path or config.CACHE_FILE)
        self._lock = threading.Lock()

    def _load(self) -> Dict[str, Dict[str, Any]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error loading cache file %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, dict)}

    def _save(self, entries: Dict[str, Dict[str, Any]]):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=self.path.name, suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w") as f:
                    json.dump(entries, f, indent=2)
                os.replace(tmp_path, self.path)
            except Exception:
                os.unlink(tmp_path)
                raise
        except OSError as e:
            logger.error("Error saving cache file %s: %s", self.path, e)

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._load().get(key)
        if entry is None:
            return None
        stored_at = entry.get("timestamp")
        if not isinstance(stored_at, (int, float)) or not self._is_fresh(stored_at):
            return None
        return entry.get("value")

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            entries = self._load()
            entries[key] = {"timestamp": time.time(), "value": value}
            self._save(entries)

    def clear(self) -> None:
        with self._lock:
            self._save({})
