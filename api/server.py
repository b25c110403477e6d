"""FastAPI server exposing the AEP copilot."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator

# Logging is configured in main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import SERVICE_NAME, SERVICE_VERSION
from telemetry import init_telemetry

from .models.common import ErrorResponse
from .routes.chat import chat_router
from .routes.system import system_router
from .routes.tools import tools_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    logger.info(f"Starting {SERVICE_NAME} server...")

    try:
        app.state.tracer_provider = init_telemetry()
    except Exception as e:
        logger.warning(f"Failed to initialize telemetry: {e}")
        app.state.tracer_provider = None

    yield

    if app.state.tracer_provider is not None:
        app.state.tracer_provider.shutdown()
    logger.info("Server shutdown complete")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title="AEP Copilot API",
        description="Natural-language assistant for Adobe Experience Platform",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    # The browser frontend calls the API from its own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        error = ErrorResponse(
            detail="An internal error occurred. Please try again later.",
            error_type=type(exc).__name__,
            path=str(request.url.path),
        )
        return JSONResponse(status_code=500, content=error.model_dump())

    app.include_router(chat_router, prefix="/api", tags=["chat"])
    app.include_router(tools_router, prefix="/api", tags=["tools"])
    app.include_router(system_router, prefix="/api", tags=["system"])

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint."""
        return {"message": "AEP Copilot API", "version": SERVICE_VERSION, "status": "running"}

    @app.get("/health")
    async def health() -> dict[str, Any]:
        """Liveness check; the service holds no connections of its own."""
        return {
            "status": "healthy",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "timestamp": datetime.now().isoformat(),
        }

    return app


# Create the application instance
app = create_app()
