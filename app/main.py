from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request

from app.config import (
    get_cache_settings,
    get_dataset_settings,
    get_logging_settings,
    validate_settings,
)
from app.schemas.district import HealthResponse


def _validate_env() -> None:
    """
    Validate configuration at startup.

    Raises RuntimeError listing every missing or invalid variable so the
    operator can fix all problems in one restart cycle.
    """

    errors = validate_settings(get_dataset_settings(), get_cache_settings())
    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = get_logging_settings().level
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate configuration and build the district data service on boot."""
    _validate_env()

    from app.services.district_data_service import build_district_data_service

    service = build_district_data_service()
    application.state.district_data_service = service
    logging.getLogger(__name__).info(
        "District data service ready cache_entries=%d ttl_seconds=%s",
        len(service.cache.keys()),
        service.cache.ttl_seconds,
    )
    try:
        yield
    finally:
        application.state.district_data_service = None
        logging.getLogger(__name__).info("District data service released")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _configure_logging()

    application = FastAPI(
        title="MGNREGA District Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import cache_router, districts_router

    application.include_router(districts_router)
    application.include_router(cache_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck(request: Request) -> HealthResponse:
        service = getattr(request.app.state, "district_data_service", None)
        if service is None:
            return HealthResponse(status="starting", cache_entries=0, cache_ttl_seconds=0.0)
        return HealthResponse(
            status="ok",
            cache_entries=len(service.cache.keys()),
            cache_ttl_seconds=service.cache.ttl_seconds,
        )

    return application


app = create_app()
