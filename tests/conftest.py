from __future__ import annotations

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from app.config import AppSettings, CacheSettings, OrganizationSettings
from domain.models import OrganizationDocument


def _clear_scape_env() -> None:
    for key in list(os.environ):
        if key.startswith("SCAPE_"):
            os.environ.pop(key, None)


_clear_scape_env()


@pytest.fixture(autouse=True)
def clear_scape_env() -> Generator[None, None, None]:
    _clear_scape_env()
    yield
    _clear_scape_env()


@pytest.fixture
def organization_payload() -> dict[str, Any]:
    return {
        "domains": [
            {
                "id": "d-platform",
                "name": "Platform",
                "teams": [{"id": "t-infra", "name": "Infrastructure", "services": []}],
            },
            {
                "id": "d-commerce",
                "name": "Commerce",
                "teams": [
                    {
                        "id": "t-checkout",
                        "name": "Checkout",
                        "services": [
                            {"id": "s-payments", "name": "payments-gateway", "tier": "T1"},
                            {"id": "s-cart", "name": "cart-api", "tier": "T1"},
                        ],
                    },
                    {
                        "id": "t-catalog",
                        "name": "Catalog",
                        "services": [{"id": "s-search", "name": "search", "tier": "T2"}],
                    },
                ],
            },
        ]
    }


@pytest.fixture
def organization_document(organization_payload: dict[str, Any]) -> OrganizationDocument:
    return OrganizationDocument.model_validate(organization_payload)


@pytest.fixture
def app_settings_factory(tmp_path: Path) -> Callable[..., AppSettings]:
    def _factory(**cache_overrides: object) -> AppSettings:
        cache = CacheSettings(directory=tmp_path / "layout_cache").model_copy(
            update=cache_overrides
        )
        return AppSettings(
            title="Test Layout",
            organization=OrganizationSettings(path=tmp_path / "organization.json"),
            cache=cache,
        )

    return _factory


@pytest.fixture
def app_settings(app_settings_factory: Callable[..., AppSettings]) -> AppSettings:
    return app_settings_factory()
