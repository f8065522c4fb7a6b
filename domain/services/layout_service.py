from __future__ import annotations

from domain.models import LayoutPositions
from domain.services.compute_layout import ComputeLayout
from domain.services.layout_cache import CacheStatus, LayoutCache


class LayoutService:
    def __init__(self, compute: ComputeLayout, cache: LayoutCache) -> None:
        self._compute = compute
        self._cache = cache

    def get_layout(self) -> LayoutPositions:
        cached = self._cache.get()
        if cached is not None:
            return cached
        return self._compute.compute()

    def compute_layout(self) -> LayoutPositions:
        return self._compute.compute()

    def invalidate_layout_cache(self) -> None:
        self._cache.invalidate()

    def cache_status(self) -> CacheStatus:
        return self._cache.status()
