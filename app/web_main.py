from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, cast

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import ORJSONResponse

from app.config import AppSettings, load_settings
from app.layout_wiring import build_layout_service
from domain.services.layout_service import LayoutService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutContext:
    settings: AppSettings
    layout: LayoutService


def create_app(
    settings: AppSettings,
    layout_service: LayoutService | None = None,
) -> FastAPI:
    context = LayoutContext(
        settings=settings,
        layout=layout_service or build_layout_service(settings),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> Any:
        if settings.cache.invalidate_on_start:
            context.layout.invalidate_layout_cache()
        yield

    app = FastAPI(title=settings.title, lifespan=lifespan)
    app.state.context = context

    @app.get("/api/layout")
    def api_layout(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        try:
            positions = context.layout.get_layout()
        except Exception as exc:
            logger.exception("Error fetching layout.")
            raise HTTPException(status_code=500, detail="Failed to fetch layout") from exc
        return ORJSONResponse(positions.to_dict())

    @app.post("/api/layout/compute")
    def api_layout_compute(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        try:
            positions = context.layout.compute_layout()
        except Exception as exc:
            logger.exception("Error computing layout.")
            raise HTTPException(status_code=500, detail="Failed to compute layout") from exc
        return ORJSONResponse(positions.to_dict())

    @app.post("/api/layout/invalidate")
    def api_layout_invalidate(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        try:
            context.layout.invalidate_layout_cache()
        except Exception as exc:
            logger.exception("Error invalidating layout cache.")
            raise HTTPException(
                status_code=500, detail="Failed to invalidate layout cache"
            ) from exc
        return ORJSONResponse({"message": "Layout cache invalidated successfully"})

    @app.get("/api/layout/status")
    def api_layout_status(context: LayoutContext = Depends(get_context)) -> ORJSONResponse:
        return ORJSONResponse({"status": context.layout.cache_status().value})

    return app


def get_context(request: Request) -> LayoutContext:
    return cast(LayoutContext, request.app.state.context)


def create_default_app() -> FastAPI:
    return create_app(load_settings())
