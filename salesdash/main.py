import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from salesdash.config import Settings, get_settings
from salesdash.core.errors import DashboardError, FetchError, ValidationError
from salesdash.core.logging import log_request_failure, setup_logging
from salesdash.database.store import SaleStore
from salesdash.routers import (
    admin_router,
    charts_router,
    health_router,
    transactions_router,
)

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to the Sales Transaction Dashboard API"


def _validation_error_handler(request: Request, exc: ValidationError):
    log_request_failure(logger, request, exc, 400)
    return JSONResponse(status_code=400, content={"error": str(exc)})


def _dashboard_error_handler(request: Request, exc: DashboardError):
    if isinstance(exc, FetchError):
        summary = "Error initializing database"
    else:
        summary = "Internal server error"
    log_request_failure(logger, request, exc, 500)
    return JSONResponse(status_code=500, content={"error": summary, "message": str(exc)})


def _unexpected_error_handler(request: Request, exc: Exception):
    log_request_failure(logger, request, exc, 500)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "message": str(exc)},
    )


def create_app(settings: Optional[Settings] = None, store: Optional[SaleStore] = None) -> FastAPI:
    """Build the API.

    An injected ``store`` is used as-is and left open on shutdown; otherwise
    the lifespan opens one from ``DATABASE_URL`` and disposes it afterwards.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_store = None
        if getattr(app.state, "store", None) is None:
            owned_store = SaleStore.from_url(
                settings.DATABASE_URL,
                query_workers=settings.QUERY_WORKERS,
            )
            owned_store.create_schema()
            app.state.store = owned_store
            logger.info("Opened sale store at %s", owned_store.engine.url)
        try:
            yield
        finally:
            if owned_store is not None:
                owned_store.dispose()
                app.state.store = None

    app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(DashboardError, _dashboard_error_handler)
    app.add_exception_handler(Exception, _unexpected_error_handler)

    app.include_router(health_router)
    app.include_router(admin_router)
    app.include_router(transactions_router)
    app.include_router(charts_router)

    @app.get("/")
    def root():
        return {"message": WELCOME_MESSAGE}

    return app


def build_default_app() -> FastAPI:
    setup_logging()
    return create_app()


__all__ = ["build_default_app", "create_app"]
