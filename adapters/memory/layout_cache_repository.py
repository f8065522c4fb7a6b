from __future__ import annotations

from dataclasses import replace

from domain.models import CacheEntry
from domain.ports.cache import LayoutCacheStore


class InMemoryLayoutCacheRepository(LayoutCacheStore):
    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def read_entry(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def upsert_entry(self, entry: CacheEntry) -> CacheEntry:
        existing = self._entries.get(entry.cache_key)
        if existing is not None:
            entry = replace(entry, created_at=existing.created_at)
        self._entries[entry.cache_key] = entry
        return entry

    def delete_entry(self, key: str) -> None:
        self._entries.pop(key, None)
