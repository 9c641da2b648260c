"""
In-memory result cache shared by all platform searches in this process.

Entries are keyed by (platform name, normalized query) and are valid for
CACHE_TTL_HOURS after they were stored. A failed platform scrape is stored as
an empty result list so the same platform/query pair is not hammered again
until the entry expires. Nothing is persisted; a restart clears the cache.
"""
import logging
import threading
import time
from typing import Dict, List, Optional, Tuple

from .. import config
from ..models import CacheEntry, MedicineResult

logger = logging.getLogger('result_cache')


def normalize_query(query: str) -> str:
    return query.strip().lower()


class ResultCache:
    """TTL cache guarded by a single lock"""

    def __init__(self, ttl_seconds=None, clock=time.time):
        if ttl_seconds is None:
            ttl_seconds = config.CACHE_TTL_HOURS * 3600
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[Tuple[str, str], CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, platform_name: str, query: str) -> Optional[CacheEntry]:
        key = (platform_name, normalize_query(query))
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() - entry.fetched_at >= self.ttl_seconds:
                del self._entries[key]
                entry = None

            if entry is None:
                self._misses += 1
            else:
                self._hits += 1
            return entry

    def put(self, platform_name: str, query: str, results: List[MedicineResult]) -> CacheEntry:
        entry = CacheEntry(results=list(results), fetched_at=self._clock())
        with self._lock:
            self._entries[(platform_name, normalize_query(query))] = entry
        return entry

    def clear(self):
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
        logger.info("Result cache cleared")

    def stats(self):
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0
            return {
                "hits": self._hits,
                "misses": self._misses,
                "total_requests": total,
                "hit_rate_percent": round(hit_rate, 2),
                "entries": len(self._entries),
                "cache_ttl_hours": self.ttl_seconds / 3600,
            }

    def __len__(self):
        with self._lock:
            return len(self._entries)
