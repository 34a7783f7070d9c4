"""
Eligibility result cache keyed by (user_id, catalog_version).

Entry lifecycle:
- ABSENT -> FRESH on the first successful evaluation for the key
- FRESH -> STALE when the user's profile changes or the catalog moves on
- STALE -> FRESH when the next read recomputes and stores a new result

Entries also expire passively after the TTL; that bounds memory and has
nothing to do with correctness.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from ..models.result import CacheStats

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, int]


class CacheState(str, Enum):
    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


@dataclass
class _Entry:
    value: Any
    stored_at: float
    stale: bool = False


class EligibilityCache:
    """
    Thread-safe read-through cache for eligibility results.

    Writers invalidate before they acknowledge. Readers capture a
    generation token before loading the profile and hand it back to
    ``put``; if an invalidation happened in between the result is
    dropped instead of being stored as fresh.
    """

    def __init__(self, ttl_seconds: float = 3600, clock: Callable[[], float] = time.monotonic):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[CacheKey, _Entry] = {}
        self._generations: Dict[str, int] = {}
        self._epoch = 0
        self._min_version = 0
        self._next_purge_at = clock() + ttl_seconds
        self._hits = 0
        self._misses = 0

    def generation(self, user_id: str) -> int:
        """Token that changes whenever the user's entries are invalidated"""
        with self._lock:
            return self._epoch + self._generations.get(user_id, 0)

    def get(self, user_id: str, catalog_version: int) -> Optional[Any]:
        """Return the cached value if FRESH and unexpired, else None"""
        key = (user_id, catalog_version)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._expired(entry):
                del self._entries[key]
                entry = None
            if entry is None or entry.stale:
                self._misses += 1
                logger.debug(f"Cache miss for user {user_id} at catalog version {catalog_version}")
                return None
            self._hits += 1
            logger.debug(f"Cache hit for user {user_id} at catalog version {catalog_version}")
            return entry.value

    def put(
        self,
        user_id: str,
        catalog_version: int,
        value: Any,
        generation: Optional[int] = None
    ) -> bool:
        """
        Store a freshly computed value

        Args:
            user_id: Owner of the result
            catalog_version: Snapshot the value was computed from
            value: Result to cache
            generation: Token from ``generation()`` taken before the profile was read

        Returns:
            True if stored; False if the value was already superseded
        """
        with self._lock:
            if catalog_version < self._min_version:
                logger.debug(f"Dropped result for retired catalog version {catalog_version}")
                return False
            current = self._epoch + self._generations.get(user_id, 0)
            if generation is not None and generation != current:
                logger.debug(f"Dropped result for user {user_id}: invalidated during computation")
                return False
            now = self._clock()
            if now >= self._next_purge_at:
                self._purge_expired()
                self._next_purge_at = now + self.ttl_seconds
            self._entries[(user_id, catalog_version)] = _Entry(value=value, stored_at=now)
            return True

    def invalidate(self, user_id: str) -> int:
        """
        Mark every entry owned by the user STALE

        Returns:
            Number of entries marked
        """
        with self._lock:
            self._generations[user_id] = self._generations.get(user_id, 0) + 1
            count = 0
            for (owner, _), entry in self._entries.items():
                if owner == user_id and not entry.stale:
                    entry.stale = True
                    count += 1
        logger.debug(f"Invalidated {count} cache entries for user {user_id}")
        return count

    def invalidate_all(self) -> int:
        """Mark every entry STALE and void all outstanding generation tokens"""
        with self._lock:
            self._epoch += 1
            count = 0
            for entry in self._entries.values():
                if not entry.stale:
                    entry.stale = True
                    count += 1
        logger.info(f"Invalidated all cache entries: {count} marked stale")
        return count

    def retire_versions_before(self, catalog_version: int) -> int:
        """
        Mark entries for older catalog versions STALE and refuse future puts for them

        Returns:
            Number of entries marked
        """
        with self._lock:
            self._min_version = max(self._min_version, catalog_version)
            count = 0
            for (_, version), entry in self._entries.items():
                if version < self._min_version and not entry.stale:
                    entry.stale = True
                    count += 1
        logger.debug(f"Retired {count} cache entries older than catalog version {catalog_version}")
        return count

    def state(self, user_id: str, catalog_version: int) -> CacheState:
        with self._lock:
            entry = self._entries.get((user_id, catalog_version))
            if entry is None or self._expired(entry):
                return CacheState.ABSENT
            return CacheState.STALE if entry.stale else CacheState.FRESH

    def stats(self) -> CacheStats:
        with self._lock:
            lookups = self._hits + self._misses
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                hit_rate=self._hits / lookups if lookups else 0.0,
                entries=len(self._entries),
                stale_entries=sum(1 for entry in self._entries.values() if entry.stale)
            )

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._fold_generations(list(self._generations))
        logger.info(f"Cache cleared: {count} entries removed")
        return count

    def _expired(self, entry: _Entry) -> bool:
        return self._clock() - entry.stored_at >= self.ttl_seconds

    def _purge_expired(self):
        expired = [key for key, entry in self._entries.items() if self._expired(entry)]
        for key in expired:
            del self._entries[key]
        owners = {owner for owner, _ in self._entries}
        self._fold_generations([user for user in self._generations if user not in owners])
        logger.debug(f"Purged {len(expired)} expired cache entries")

    def _fold_generations(self, user_ids):
        """
        Forget per-user counters by raising the epoch past all of them

        Every token issued so far stays void, so dropping a counter can
        never make a superseded result look current again.
        """
        if not user_ids:
            return
        self._epoch += max(self._generations.pop(user) for user in user_ids) + 1
