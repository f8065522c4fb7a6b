from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from enum import Enum

from domain.models import (
    LAYOUT_CACHE_KEY,
    LAYOUT_TYPE_DOMAIN_GRID,
    CacheEntry,
    LayoutPositions,
)
from domain.ports.cache import LayoutCacheStore

logger = logging.getLogger(__name__)

# Bump whenever a placement algorithm or one of its constants changes.
CURRENT_LAYOUT_VERSION = 1
DEFAULT_LAYOUT_TTL = timedelta(hours=1)


class CacheStatus(str, Enum):
    ABSENT = "absent"
    VALID = "valid"
    EXPIRED = "expired"
    STALE_VERSION = "stale_version"


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class LayoutCache:
    """Keyed, versioned, expiring store for computed layouts.

    An entry is served only while it is unexpired and carries the current
    version; anything else reads as a miss.
    """

    def __init__(
        self,
        store: LayoutCacheStore,
        *,
        ttl: timedelta = DEFAULT_LAYOUT_TTL,
        version: int = CURRENT_LAYOUT_VERSION,
        layout_type: str = LAYOUT_TYPE_DOMAIN_GRID,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            msg = "Layout cache TTL must be positive"
            raise ValueError(msg)
        self._store = store
        self._ttl = ttl
        self._version = version
        self._layout_type = layout_type
        self._clock = clock

    @property
    def version(self) -> int:
        return self._version

    def get(self, key: str = LAYOUT_CACHE_KEY) -> LayoutPositions | None:
        entry = self._store.read_entry(key)
        status = self._classify(entry)
        if entry is not None and status is CacheStatus.VALID:
            logger.debug("Layout cache hit for %s.", key)
            return entry.positions
        logger.info("Layout cache miss for %s (%s).", key, status.value)
        return None

    def status(self, key: str = LAYOUT_CACHE_KEY) -> CacheStatus:
        return self._classify(self._store.read_entry(key))

    def put(self, positions: LayoutPositions, key: str = LAYOUT_CACHE_KEY) -> CacheEntry:
        now = self._clock()
        entry = CacheEntry(
            cache_key=key,
            layout_type=self._layout_type,
            positions=positions,
            metadata={"version": self._version},
            created_at=now,
            updated_at=now,
            expires_at=now + self._ttl,
        )
        return self._store.upsert_entry(entry)

    def invalidate(self, key: str = LAYOUT_CACHE_KEY) -> None:
        self._store.delete_entry(key)
        logger.info("Layout cache entry %s invalidated.", key)

    def _classify(self, entry: CacheEntry | None) -> CacheStatus:
        if entry is None:
            return CacheStatus.ABSENT
        if entry.version != self._version:
            return CacheStatus.STALE_VERSION
        if entry.is_expired(self._clock()):
            return CacheStatus.EXPIRED
        return CacheStatus.VALID
