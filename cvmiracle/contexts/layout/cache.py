"""
Bounded memo for layout metadata.

Entries are evicted in insertion order (FIFO, not LRU) once capacity is
reached. A lock guards insert-or-evict; a miss only repeats detection, so
lookups are best-effort.
"""

import hashlib
import os
import threading
from typing import Dict, Generic, Optional, TypeVar

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CAPACITY = 200
HASH_PREFIX_CHARS = 10000

V = TypeVar("V")


def make_key(text: str, requested_template: Optional[str] = None, prefix_chars: int = HASH_PREFIX_CHARS) -> str:
    """
    SHA-1 content key for a (text, template hint) pair.

    Only the first prefix_chars characters of the text take part.

    Example:
        >>> make_key("abc") == make_key("abc", None)
        True
        >>> make_key("abc", "Minimal ATS") == make_key("abc")
        False
    """
    payload = f"{requested_template or 'none'}|{(text or '')[:prefix_chars]}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def _capacity_from_env() -> int:
    raw = os.getenv("LAYOUT_CACHE_CAPACITY", "")
    try:
        capacity = int(raw)
    except ValueError:
        return DEFAULT_CAPACITY
    return capacity if capacity > 0 else DEFAULT_CAPACITY


class LayoutMetadataCache(Generic[V]):
    """
    Thread-safe FIFO cache keyed by content hash.

    Args:
        capacity: Maximum entries (default: LAYOUT_CACHE_CAPACITY env var, then 200)

    Example:
        >>> cache = LayoutMetadataCache(capacity=2)
        >>> cache.put("a", 1); cache.put("b", 2); cache.put("c", 3)
        >>> "a" in cache, len(cache)
        (False, 2)
    """

    def __init__(self, capacity: Optional[int] = None):
        self.capacity = capacity if capacity and capacity > 0 else _capacity_from_env()
        self._entries: Dict[str, V] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[V]:
        """Return the cached value or None. Lookups do not refresh position."""
        with self._lock:
            return self._entries.get(key)

    def put(self, key: str, value: V) -> None:
        """Insert a value, evicting the oldest insertions while at capacity."""
        with self._lock:
            if key in self._entries:
                self._entries[key] = value
                return
            while len(self._entries) >= self.capacity:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
            self._entries[key] = value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
