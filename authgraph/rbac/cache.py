"""
Access Cache.

Memoizes resolved access sets per user id. The cache is process-wide
and OFF by default: while disabled, every lookup recomputes from the
resolver and nothing is stored.

Only enable it where stale answers are acceptable. Entries live until
invalidate()/clear() is called or the cache is disabled; the AuthManager
calls invalidate()/clear() from its mutation paths when
invalidate_on_write is set, and never otherwise.

Usage:
    access_cache.enable()
    names = await access_cache.get_or_compute(
        user.id, user.auth_items, auth_items.load_graph,
    )
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Iterable

import structlog

from .resolver import AuthGraph, resolve

logger = structlog.get_logger()

GraphLoader = Callable[[], Awaitable[AuthGraph]]


class AccessCache:
    """Per-user memo of resolved auth item names."""

    def __init__(self, enabled: bool = False):
        self._enabled = enabled
        self._store: dict[str, frozenset[str]] = {}
        # Bumped by invalidate/clear; loads that straddle a bump are not stored
        self._generation = 0
        self.hits = 0
        self.misses = 0

    @staticmethod
    def _key(user_id: Any) -> str:
        return f"{user_id}"

    @property
    def enabled(self) -> bool:
        return self._enabled

    def enable(self) -> None:
        self._enabled = True
        logger.info("access_cache.enabled")

    def disable(self) -> None:
        """Turn caching off and drop every entry."""
        self._enabled = False
        self.clear()
        logger.info("access_cache.disabled")

    def get(self, user_id: Any) -> frozenset[str] | None:
        if not self._enabled or user_id is None:
            return None
        return self._store.get(self._key(user_id))

    async def get_or_compute(
        self,
        user_id: Any,
        assigned_names: Iterable[str],
        load_graph: GraphLoader,
    ) -> frozenset[str]:
        """
        Resolve assigned_names for user_id.

        When enabled, a stored result is returned as-is (even if the
        underlying data changed since). The graph is only loaded on a
        miss or while disabled. Subjects without an id are never cached.
        """
        if not self._enabled or user_id is None:
            return resolve(assigned_names, await load_graph())

        key = self._key(user_id)
        cached = self._store.get(key)
        if cached is not None:
            self.hits += 1
            return cached

        self.misses += 1
        generation = self._generation
        result = resolve(assigned_names, await load_graph())
        # Disabled or invalidated while the graph was loading
        if self._enabled and generation == self._generation:
            self._store[key] = result
        return result

    def invalidate(self, user_id: Any) -> None:
        """Drop the entry for one user."""
        self._generation += 1
        if self._store.pop(self._key(user_id), None) is not None:
            logger.debug("access_cache.invalidated", user_id=str(user_id))

    def clear(self) -> None:
        """Drop every entry."""
        self._generation += 1
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)


# Global instance
access_cache = AccessCache()
