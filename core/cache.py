"""
In-process TTL cache used by the dashboard read path, plus the
invalidation hooks that keep it fresh.

The dashboard endpoints read through ``cache``; the user-progress mutation
path calls ``invalidate_user_progress`` and the sync pipeline calls
``invalidate_insights`` once new rows land in the warehouse.
"""

import time
from typing import Any, Dict, Optional
from core.config import settings
import logging

logger = logging.getLogger(__name__)

INSIGHTS_PREFIX = "insights:"
USER_PROGRESS_PREFIX = "progress:"


class TTLCache:
    """Dict-backed cache; entries expire lazily on read or on cleanup()."""

    def __init__(self, default_ttl: float = settings.CACHE_TTL_SECONDS, clock=time.monotonic):
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, tuple] = {}

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        expires_at = self._clock() + (self.default_ttl if ttl is None else ttl)
        self._store[key] = (value, expires_at)

    def get(self, key: str) -> Any:
        item = self._store.get(key)
        if item is None:
            return None

        value, expires_at = item
        if self._clock() > expires_at:
            del self._store[key]
            return None
        return value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        keys = [k for k in self._store if k.startswith(prefix)]
        for key in keys:
            del self._store[key]
        return len(keys)

    def clear(self) -> None:
        self._store.clear()

    def cleanup(self) -> int:
        """Drop expired entries, returning how many were removed"""
        now = self._clock()
        expired = [k for k, (_, expires_at) in self._store.items() if now > expires_at]
        for key in expired:
            del self._store[key]
        return len(expired)

    def get_stats(self) -> Dict[str, int]:
        now = self._clock()
        expired = sum(1 for _, expires_at in self._store.values() if now > expires_at)
        return {
            "total": len(self._store),
            "active": len(self._store) - expired,
            "expired": expired,
        }


cache = TTLCache()


def insights_key(query_type: str) -> str:
    return f"{INSIGHTS_PREFIX}{query_type}"


def user_progress_key(user_id: str) -> str:
    return f"{USER_PROGRESS_PREFIX}{user_id}"


def invalidate_user_progress(user_id: str, target: TTLCache = cache) -> None:
    """Called by the mutation path whenever a user's progress data changes."""
    target.delete(user_progress_key(user_id))
    # Aggregates include this user's progress
    target.delete_prefix(INSIGHTS_PREFIX)


def invalidate_insights(target: TTLCache = cache) -> int:
    removed = target.delete_prefix(INSIGHTS_PREFIX)
    if removed:
        logger.info(f"Invalidated {removed} cached dashboard insight entries")
    return removed
