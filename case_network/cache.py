"""Content-addressed memoization for analysis results.

Analyses are pure, so results can be reused for identical inputs. Keys are
SHA-256 digests of a canonical JSON encoding of the operation name, its
inputs and its parameters.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

from cachetools import LRUCache

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _encode(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return str(value)


def content_hash(*parts: Any) -> str:
    """Stable digest of arbitrarily nested records."""
    payload = json.dumps(parts, sort_keys=True, default=_encode, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


class AnalysisCache:
    """Thread-safe LRU cache of analysis results keyed by content hash.

    Values are deep-copied on the way in and out so callers can't mutate
    cached results.
    """

    def __init__(self, max_entries: int = 128):
        self._cache: LRUCache = LRUCache(maxsize=max_entries)
        self._lock = threading.RLock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            value = self._cache.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = copy.deepcopy(value)

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        """Return the cached value for ``key``, computing and storing it on a miss."""
        cached = self.get(key)
        if cached is not None:
            with self._lock:
                self.hits += 1
            return cached

        with self._lock:
            self.misses += 1
        value = compute()
        if value is not None:
            self.set(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"entries": len(self._cache), "hits": self.hits, "misses": self.misses}
