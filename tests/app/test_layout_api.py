from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from fastapi.testclient import TestClient

from app.config import AppSettings
from app.web_main import create_app


def _write_organization(settings: AppSettings, payload: dict[str, Any]) -> None:
    settings.organization.path.write_text(json.dumps(payload), encoding="utf-8")


def test_get_layout_computes_and_caches(
    app_settings: AppSettings, organization_payload: dict[str, Any]
) -> None:
    _write_organization(app_settings, organization_payload)

    with TestClient(create_app(app_settings)) as client:
        assert client.get("/api/layout/status").json() == {"status": "absent"}

        response = client.get("/api/layout")
        assert response.status_code == 200
        payload = response.json()

        assert client.get("/api/layout/status").json() == {"status": "valid"}

    assert set(payload) == {"domains", "teams", "services"}
    assert payload["domains"]["d-platform"] == {"x": 150.0, "y": 0.0, "z": 0.0}
    assert payload["services"]["s-payments"] == {"x": 65.0, "y": 20.0, "z": 25.0}
    assert (app_settings.cache.directory / "layout_all.json").exists()


def test_cached_layout_survives_organization_changes_until_invalidated(
    app_settings: AppSettings, organization_payload: dict[str, Any]
) -> None:
    _write_organization(app_settings, organization_payload)

    with TestClient(create_app(app_settings)) as client:
        first = client.get("/api/layout").json()
        _write_organization(app_settings, {"domains": [{"id": "d-new", "name": "New"}]})

        assert client.get("/api/layout").json() == first

        response = client.post("/api/layout/invalidate")
        assert response.status_code == 200
        assert response.json() == {"message": "Layout cache invalidated successfully"}

        refreshed = client.get("/api/layout").json()

    assert refreshed["domains"] == {"d-new": {"x": 0.0, "y": 0.0, "z": 0.0}}


def test_compute_endpoint_forces_recomputation(
    app_settings: AppSettings, organization_payload: dict[str, Any]
) -> None:
    _write_organization(app_settings, organization_payload)

    with TestClient(create_app(app_settings)) as client:
        client.get("/api/layout")
        _write_organization(app_settings, {"domains": []})

        response = client.post("/api/layout/compute")

        assert response.status_code == 200
        assert response.json() == {"domains": {}, "teams": {}, "services": {}}
        assert client.get("/api/layout").json() == response.json()


def test_missing_organization_returns_500(app_settings: AppSettings) -> None:
    with TestClient(create_app(app_settings)) as client:
        layout = client.get("/api/layout")
        compute = client.post("/api/layout/compute")

    assert layout.status_code == 500
    assert layout.json() == {"detail": "Failed to fetch layout"}
    assert compute.status_code == 500
    assert compute.json() == {"detail": "Failed to compute layout"}


def test_cache_invalidated_on_start(
    app_settings_factory: Callable[..., AppSettings],
    organization_payload: dict[str, Any],
) -> None:
    settings = app_settings_factory(invalidate_on_start=True)
    _write_organization(settings, organization_payload)
    with TestClient(create_app(settings)) as client:
        client.get("/api/layout")
    cache_file: Path = settings.cache.directory / "layout_all.json"
    assert cache_file.exists()

    with TestClient(create_app(settings)) as client:
        assert client.get("/api/layout/status").json() == {"status": "absent"}


def test_memory_backend_keeps_nothing_on_disk(
    app_settings_factory: Callable[..., AppSettings],
    organization_payload: dict[str, Any],
) -> None:
    settings = app_settings_factory(backend="memory")
    _write_organization(settings, organization_payload)

    with TestClient(create_app(settings)) as client:
        assert client.get("/api/layout").status_code == 200
        assert client.get("/api/layout/status").json() == {"status": "valid"}

    assert not settings.cache.directory.exists()
