from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from adapters.memory.layout_cache_repository import InMemoryLayoutCacheRepository
from domain.models import LAYOUT_CACHE_KEY, CacheEntry, LayoutPositions, Position3D
from domain.services.layout_cache import (
    CURRENT_LAYOUT_VERSION,
    CacheStatus,
    LayoutCache,
)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def store() -> InMemoryLayoutCacheRepository:
    return InMemoryLayoutCacheRepository()


@pytest.fixture
def cache(store: InMemoryLayoutCacheRepository, clock: FakeClock) -> LayoutCache:
    return LayoutCache(store, clock=clock)


def _positions() -> LayoutPositions:
    return LayoutPositions(domains={"d1": Position3D(0.0, 0.0, 0.0)})


def test_get_on_empty_cache_is_a_miss(cache: LayoutCache) -> None:
    assert cache.get() is None
    assert cache.status() is CacheStatus.ABSENT


def test_put_stamps_version_and_expiry(
    cache: LayoutCache, store: InMemoryLayoutCacheRepository, clock: FakeClock
) -> None:
    entry = cache.put(_positions())

    assert entry.cache_key == LAYOUT_CACHE_KEY
    assert entry.layout_type == "DOMAIN_GRID"
    assert entry.metadata == {"version": CURRENT_LAYOUT_VERSION}
    assert entry.updated_at == clock.now
    assert entry.expires_at == clock.now + timedelta(hours=1)
    assert store.read_entry(LAYOUT_CACHE_KEY) == entry


def test_valid_entry_is_returned(cache: LayoutCache) -> None:
    cache.put(_positions())

    assert cache.get() == _positions()
    assert cache.status() is CacheStatus.VALID


def test_entry_expires_after_ttl(cache: LayoutCache, clock: FakeClock) -> None:
    cache.put(_positions())

    clock.advance(timedelta(minutes=59))
    assert cache.get() is not None

    clock.advance(timedelta(minutes=1))
    assert cache.get() is None
    assert cache.status() is CacheStatus.EXPIRED


def test_entry_with_other_version_is_stale(
    store: InMemoryLayoutCacheRepository, clock: FakeClock
) -> None:
    LayoutCache(store, version=CURRENT_LAYOUT_VERSION - 1, clock=clock).put(_positions())
    cache = LayoutCache(store, clock=clock)

    assert cache.get() is None
    assert cache.status() is CacheStatus.STALE_VERSION


def test_entry_without_version_is_stale(
    cache: LayoutCache, store: InMemoryLayoutCacheRepository, clock: FakeClock
) -> None:
    store.upsert_entry(
        CacheEntry(
            cache_key=LAYOUT_CACHE_KEY,
            layout_type="DOMAIN_GRID",
            positions=_positions(),
            metadata={},
            created_at=clock.now,
            updated_at=clock.now,
            expires_at=clock.now + timedelta(hours=1),
        )
    )

    assert cache.get() is None
    assert cache.status() is CacheStatus.STALE_VERSION


def test_put_refreshes_expired_entry_and_keeps_created_at(
    cache: LayoutCache, clock: FakeClock
) -> None:
    first = cache.put(_positions())
    clock.advance(timedelta(hours=2))

    second = cache.put(_positions())

    assert cache.status() is CacheStatus.VALID
    assert second.created_at == first.created_at
    assert second.updated_at == clock.now


def test_invalidate_removes_entry(cache: LayoutCache) -> None:
    cache.put(_positions())

    cache.invalidate()

    assert cache.get() is None
    assert cache.status() is CacheStatus.ABSENT


def test_invalidate_on_empty_cache_is_a_no_op(cache: LayoutCache) -> None:
    cache.invalidate()

    assert cache.status() is CacheStatus.ABSENT


def test_keys_are_independent(cache: LayoutCache) -> None:
    cache.put(_positions(), key="layout_other")

    assert cache.get() is None
    assert cache.get("layout_other") == _positions()


def test_ttl_must_be_positive(store: InMemoryLayoutCacheRepository) -> None:
    with pytest.raises(ValueError, match="TTL"):
        LayoutCache(store, ttl=timedelta(0))
