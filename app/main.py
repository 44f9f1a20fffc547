from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import APIError, api_error_handler
from app.config import AppSettings, get_app_settings
from app.logging_utils import configure_logging
from app.repositories.sales_repository import SalesStore, SQLAlchemySalesStore

logger = logging.getLogger(__name__)


def _validate_env(settings: AppSettings) -> None:
    """
    Validate environment-derived settings at startup.

    Raises RuntimeError listing every invalid variable so the operator can
    fix all problems in one restart cycle. A missing database URL is not an
    error: persistence is simply disabled.
    """

    errors: list[str] = []

    raw_port = os.getenv("PORT", "").strip()
    if raw_port and not raw_port.isdigit():
        errors.append(f"PORT='{raw_port}' is not a valid port number.")

    if settings.database_url is not None and not settings.database_url.startswith("postgresql"):
        errors.append(
            "Database URL must point at PostgreSQL. "
            "Unset DATABASE_URL to run without persistence."
        )

    if errors:
        raise RuntimeError(
            "Startup validation failed, invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _build_sales_store(settings: AppSettings) -> SalesStore | None:
    """Create the store once per process; None disables persistence."""
    if not settings.persistence_enabled:
        logger.info("No database URL configured; persistence disabled")
        return None

    from db.session import create_db_engine, create_session_factory

    engine = create_db_engine(settings.database_url)
    return SQLAlchemySalesStore(
        create_session_factory(engine),
        batch_size=settings.sales_insert_batch_size,
    )


def _check_db(store: SalesStore) -> None:
    """Ping the store. Raises RuntimeError if it is unreachable."""
    try:
        store.check_connection()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Validate DB connectivity on boot when persistence is enabled."""
    store = application.state.sales_store
    if store is not None:
        _check_db(store)
        logger.info("Database connectivity confirmed")
    settings: AppSettings = application.state.settings
    logger.info("Sales insights API ready on port %d", settings.port)
    yield


def create_app(
    settings: AppSettings | None = None,
    *,
    sales_store: SalesStore | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Pass *sales_store* to substitute the persistence collaborator; otherwise
    it is built from *settings*.
    """

    settings = settings or get_app_settings()
    _validate_env(settings)
    configure_logging(settings.log_level)

    application = FastAPI(
        title="Sales Insights API",
        version="1.0.0",
        lifespan=_lifespan,
    )
    application.state.settings = settings
    application.state.sales_store = (
        sales_store if sales_store is not None else _build_sales_store(settings)
    )
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(APIError, api_error_handler)

    from app.api.routers import report_router, upload_router

    application.include_router(upload_router)
    application.include_router(report_router)

    @application.get("/health")
    def healthcheck() -> dict[str, object]:
        return {
            "status": "ok",
            "persistence_enabled": application.state.sales_store is not None,
        }

    return application


app = create_app()
