"""
In-process result cache for search queries.

Entries carry their own timestamp and are never expired here: the caller
decides whether an entry is still fresh. A stale entry simply stays until the
next successful lookup for the same key overwrites it.
"""

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional

from pricecheck.schemas.offers import Offer


def cache_key(query: str) -> str:
    """Lower-cased, trimmed query."""
    return query.strip().lower()


@dataclass
class CacheEntry:
    timestamp: float
    data: List[Offer] = field(default_factory=list)

    def age(self, now: float) -> float:
        return now - self.timestamp


class InMemoryResultCache:
    """
    Thread-safe dict-backed cache.

    max_entries=None keeps every key. With a bound, the key written longest
    ago is evicted first once the bound is exceeded.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive or None")
        self.max_entries = max_entries
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[CacheEntry]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: str, entry: CacheEntry) -> None:
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = entry
            if self.max_entries is not None:
                while len(self._store) > self.max_entries:
                    self._store.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
