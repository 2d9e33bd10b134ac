"""FastAPI application."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.app.api.routes.alerts import router as alerts_router
from backend.app.api.routes.analytics import router as analytics_router
from backend.app.api.routes.documents import router as documents_router
from backend.app.api.routes.files import router as files_router
from backend.app.api.routes.functions import router as functions_router
from backend.app.api.routes.health import router as health_router
from backend.app.api.routes.metrics import router as metrics_router
from backend.app.api.routes.records import router as records_router
from backend.app.api.routes.vendors import router as vendors_router
from backend.app.config import get_settings
from backend.app.middleware.request_logging import RequestLoggingMiddleware
from backend.app.services import AppServices, build_services
from backend.app.utils.logging import configure_logging


def create_app(services: AppServices | None = None) -> FastAPI:
    """Build the application.

    Args:
        services: Pre-built service container (tests inject one); when omitted
            it is built from settings at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if services is not None:
            app.state.services = services
            yield
            return

        settings = get_settings()
        configure_logging(settings.log_level)
        app.state.services = build_services(settings)
        try:
            yield
        finally:
            await app.state.services.aclose()

    app = FastAPI(title="DocuFlow API", version="0.1.0", lifespan=lifespan)
    if services is not None:
        app.state.services = services

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routes
    app.include_router(health_router, tags=["health"])
    app.include_router(metrics_router, tags=["metrics"])
    app.include_router(documents_router)
    app.include_router(files_router)
    app.include_router(functions_router)
    app.include_router(vendors_router)
    app.include_router(records_router)
    app.include_router(alerts_router)
    app.include_router(analytics_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "DocuFlow API", "version": "0.1.0"}

    return app


app = create_app()
