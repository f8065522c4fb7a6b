from __future__ import annotations

from adapters.filesystem.layout_cache_repository import FileSystemLayoutCacheRepository
from adapters.filesystem.organization_repository import FileSystemOrganizationRepository
from adapters.layout.hierarchy import HierarchyLayoutEngine, LayoutConfig
from adapters.memory.layout_cache_repository import InMemoryLayoutCacheRepository
from adapters.s3.organization_repository import S3OrganizationRepository
from app.config import AppSettings
from domain.ports.cache import LayoutCacheStore
from domain.ports.repositories import OrganizationRepository
from domain.services.compute_layout import ComputeLayout
from domain.services.layout_cache import LayoutCache
from domain.services.layout_service import LayoutService


def build_organization_repository(settings: AppSettings) -> OrganizationRepository:
    if settings.organization.source == "s3":
        s3 = settings.organization.s3
        if not s3.bucket:
            msg = "organization.s3.bucket is required when source is s3"
            raise ValueError(msg)
        return S3OrganizationRepository.from_settings(s3)
    return FileSystemOrganizationRepository(settings.organization.path)


def build_cache_store(settings: AppSettings) -> LayoutCacheStore:
    if settings.cache.backend == "memory":
        return InMemoryLayoutCacheRepository()
    return FileSystemLayoutCacheRepository(settings.cache.directory)


def build_layout_service(
    settings: AppSettings,
    *,
    repository: OrganizationRepository | None = None,
    cache_store: LayoutCacheStore | None = None,
    layout_config: LayoutConfig | None = None,
) -> LayoutService:
    cache = LayoutCache(
        cache_store or build_cache_store(settings),
        ttl=settings.cache.ttl,
    )
    compute = ComputeLayout(
        repository or build_organization_repository(settings),
        HierarchyLayoutEngine(layout_config),
        cache,
    )
    return LayoutService(compute, cache)
