"""FastAPI application entry point for the Marketplace API.

Lifecycle:
    1. Startup: configure logging, create the engine (and the tables in development).
    2. Running: serve contracts, jobs, balances and admin reports.
    3. Shutdown: dispose of the engine.

Run with:
    uv run uvicorn marketplace_api.main:app --reload --host 0.0.0.0 --port 3001
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

from marketplace_api.config import get_settings
from marketplace_api.logging_config import get_logger, setup_logging

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()

    setup_logging(
        log_level=settings.app_log_level,
        json_logs=not settings.is_development,
        echo_sql=settings.db_echo_sql,
    )
    logger = get_logger(__name__, version=settings.app_version)
    logger.info(
        "app.starting",
        env=settings.app_env,
        database="sqlite" if settings.is_sqlite else "postgresql",
    )

    from marketplace_api.infrastructure.database.engine import close_db, init_db

    await init_db()
    logger.info("app.started", host=settings.app_host, port=settings.app_port)

    yield

    await close_db()
    logger.info("app.stopped")


def create_app() -> FastAPI:
    """Application factory: builds the app with its middleware and routers."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "Clients pay contractors for jobs under contracts; "
            "balances, deposits and earnings reports."
        ),
        version=settings.app_version,
        lifespan=lifespan,
        debug=settings.app_debug,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    from marketplace_api.api.middleware import setup_middleware
    from marketplace_api.api.routes import admin, balances, contracts, health

    setup_middleware(app, settings)
    for module in (health, contracts, balances, admin):
        app.include_router(module.router)

    return app


# The app instance used by Uvicorn
app = create_app()
