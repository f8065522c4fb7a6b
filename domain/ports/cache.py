from __future__ import annotations

from typing import Protocol

from domain.models import CacheEntry


class LayoutCacheStore(Protocol):
    def read_entry(self, key: str) -> CacheEntry | None: ...

    def upsert_entry(self, entry: CacheEntry) -> CacheEntry: ...

    def delete_entry(self, key: str) -> None: ...
