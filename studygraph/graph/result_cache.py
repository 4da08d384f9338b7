"""
Memoization layer for graph and recommendation results.

Sits outside the stateless engine: callers compute a key from the call
inputs, look it up, and store fresh results. Entries expire after a TTL and
the least recently used entry is evicted at capacity.
Thread-safe implementation for concurrent access.
"""

from __future__ import annotations

import copy
import hashlib
import json
import logging
import threading
import time
from collections.abc import Callable, Iterable
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, default=_encode, separators=(",", ":"))


def _encode(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, (set, frozenset)):
        # json re-encodes the members, so only their order is fixed here
        return sorted(value, key=_canonical)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Cannot build cache key from {type(value).__name__}")


def make_cache_key(namespace: str, *parts: Any) -> str:
    """Stable SHA-256 key for a call's inputs.

    Sets are order-independent; lists keep their order.
    """
    payload = _canonical([namespace, *parts])
    return f"{namespace}_{hashlib.sha256(payload.encode('utf-8')).hexdigest()}"


class RecommendationCache:
    """Thread-safe TTL + LRU cache for computed results."""

    def __init__(
        self,
        ttl_seconds: int = 900,
        max_cache_size: int = 100,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize cache.

        Args:
            ttl_seconds: Time to live for cached results (default: 15 minutes)
            max_cache_size: Maximum number of results to cache
            clock: Time source in seconds, injectable for tests
        """
        self._cache: dict[str, Any] = {}
        self._cache_times: dict[str, float] = {}
        self._access_times: dict[str, float] = {}
        self._users: dict[str, frozenset[str]] = {}
        self._ttl = ttl_seconds
        self._max_size = max_cache_size
        self._clock = clock
        self._lock = threading.RLock()
        self._hit_count = 0
        self._miss_count = 0

        logger.info(f"RecommendationCache initialized with TTL={ttl_seconds}s, max_size={max_cache_size}")

    @classmethod
    def from_config(cls, config: Any | None = None) -> RecommendationCache:
        if config is None:
            from ..config import ConfigLoader

            config = ConfigLoader.get_instance()
        return cls(
            ttl_seconds=config.get_int("cache.ttl_seconds"),
            max_cache_size=config.get_int("cache.max_size"),
        )

    def get(self, key: str) -> Any | None:
        """Get a cached result if available and not expired.

        Returns:
            A copy of the cached value, or None if not found/expired
        """
        _, value = self._lookup(key)
        return value

    def _lookup(self, key: str) -> tuple[bool, Any | None]:
        with self._lock:
            if key in self._cache:
                if self._clock() - self._cache_times[key] > self._ttl:
                    logger.debug(f"Cache expired for {key}")
                    self._evict(key)
                    self._miss_count += 1
                    return False, None

                self._access_times[key] = self._clock()
                self._hit_count += 1
                logger.debug(f"Cache hit for {key}")

                # Return a copy to prevent mutations
                return True, copy.deepcopy(self._cache[key])

            self._miss_count += 1
            logger.debug(f"Cache miss for {key}")
            return False, None

    def set(self, key: str, value: Any, users: Iterable[str] = ()) -> None:
        """Cache a result.

        Args:
            key: Key from make_cache_key
            value: Result to store (a copy is kept)
            users: User ids the result depends on, for invalidate_for_user
        """
        with self._lock:
            if len(self._cache) >= self._max_size and key not in self._cache:
                self._evict_lru()

            now = self._clock()
            self._cache[key] = copy.deepcopy(value)
            self._cache_times[key] = now
            self._access_times[key] = now
            self._users[key] = frozenset(users)

            logger.debug(f"Cached result {key}")

    def get_or_compute(self, key: str, compute: Callable[[], Any], users: Iterable[str] = ()) -> Any:
        """Return the cached value for key, computing and storing it on a miss.

        A cached None counts as a hit.
        """
        found, cached = self._lookup(key)
        if found:
            return cached
        value = compute()
        self.set(key, value, users=users)
        return value

    def invalidate(self, key: str) -> bool:
        with self._lock:
            present = key in self._cache
            self._evict(key)
            return present

    def invalidate_for_user(self, user_id: str) -> int:
        """Invalidate all cached results that depend on a specific user.

        Called when a user's connections, interactions or attributes change.

        Returns:
            Number of results invalidated
        """
        with self._lock:
            keys_to_remove = [key for key, users in self._users.items() if user_id in users]

            for key in keys_to_remove:
                self._evict(key)

            if keys_to_remove:
                logger.info(f"Invalidated {len(keys_to_remove)} results for user {user_id}")

            return len(keys_to_remove)

    def clear(self) -> None:
        """Clear all cached results."""
        with self._lock:
            count = len(self._cache)
            self._cache.clear()
            self._cache_times.clear()
            self._access_times.clear()
            self._users.clear()
            logger.info(f"Cleared {count} cached results")

    def cleanup_expired(self) -> int:
        """Remove expired entries from cache.

        Returns:
            Number of entries removed
        """
        with self._lock:
            current_time = self._clock()
            keys_to_remove = [
                key for key, cached_at in self._cache_times.items() if current_time - cached_at > self._ttl
            ]

            for key in keys_to_remove:
                self._evict(key)

            if keys_to_remove:
                logger.debug(f"Cleaned up {len(keys_to_remove)} expired entries")

            return len(keys_to_remove)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            total_requests = self._hit_count + self._miss_count
            hit_rate = self._hit_count / total_requests if total_requests > 0 else 0.0

            return {
                "cache_size": len(self._cache),
                "hit_count": self._hit_count,
                "miss_count": self._miss_count,
                "hit_rate": round(hit_rate, 3),
                "total_requests": total_requests,
                "ttl_seconds": self._ttl,
                "max_size": self._max_size,
            }

    def __len__(self) -> int:
        return len(self._cache)

    def _evict(self, key: str) -> None:
        if key in self._cache:
            del self._cache[key]
            del self._cache_times[key]
            self._access_times.pop(key, None)
            self._users.pop(key, None)

    def _evict_lru(self) -> None:
        if not self._access_times:
            return

        lru_key = min(self._access_times.items(), key=lambda x: x[1])[0]
        logger.debug(f"Evicting LRU entry: {lru_key}")
        self._evict(lru_key)
