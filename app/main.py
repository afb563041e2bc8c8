"""
app/main.py

FastAPI application factory, startup validation and the health route.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import get_app_env, get_optional_setting, get_service_endpoint_settings
from app.connectors import (
    get_indexing_client,
    get_object_client,
    get_rules_client,
    get_storage_client,
)
from app.connectors.circuit_breaker import STATE_CLOSED
from app.schemas.customer import ServiceHealthResponse

_REQUIRED_PRODUCTION_SETTINGS = ("OBJECT_URL", "STORAGE_URL", "RULES_URL", "INDEXING_URL")


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Backend URLs fall back to the local compose hostnames in development;
    with APP_ENV=production every one of them must be set explicitly.
    Raises RuntimeError listing every missing variable so the operator can
    fix all problems in one restart cycle.
    """

    if get_app_env() != "production":
        return

    errors = [
        f"{name} is not set. Backend URLs must be explicit when APP_ENV=production."
        for name in _REQUIRED_PRODUCTION_SETTINGS
        if get_optional_setting(name) is None
    ]
    if errors:
        raise RuntimeError(
            "Startup validation failed: missing environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _clients():
    return (get_object_client(), get_storage_client(), get_rules_client(), get_indexing_client())


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Log backend endpoints on boot; close client sessions on exit."""
    endpoints = get_service_endpoint_settings()
    logging.getLogger(__name__).info(
        "Backend services object=%s storage=%s rules=%s indexing=%s",
        endpoints.object_url,
        endpoints.storage_url,
        endpoints.rules_url,
        endpoints.indexing_url,
    )
    try:
        yield
    finally:
        for client in _clients():
            client.close()
        logging.getLogger(__name__).info("Backend client sessions closed")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title=get_service_endpoint_settings().app_name,
        version="1.0.0",
        lifespan=_lifespan,
    )

    from app.api.routers import book_router, customer_router

    application.include_router(book_router)
    application.include_router(customer_router)

    @application.get("/health", response_model=ServiceHealthResponse)
    def healthcheck() -> ServiceHealthResponse:
        circuits = {client.service_name: client.breaker.state for client in _clients()}
        healthy = all(state == STATE_CLOSED for state in circuits.values())
        return ServiceHealthResponse(
            service=get_service_endpoint_settings().app_name,
            status="ok" if healthy else "degraded",
            circuits=circuits,
        )

    return application


app = create_app()
