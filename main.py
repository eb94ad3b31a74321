"""
CrisisAI Responder - Backend Entrypoint

FastAPI application factory and server configuration.
Run with: uvicorn main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional
import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from crisis_responder.api import routes
from crisis_responder.config import Settings, get_settings
from crisis_responder.core.exceptions import CrisisResponderError
from crisis_responder.core.logging import LogContext, setup_structured_logging
from crisis_responder.core.pipeline import create_pipeline
from crisis_responder.services.uploads import ImageUploadHandler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
        - Create the response pipeline and its session recorder
        - Create the upload handler

    Shutdown:
        - Stop the pipeline (the session log is discarded)
    """
    settings: Settings = app.state.settings

    # === Startup ===
    logger.info("🚀 CrisisAI Responder starting in %s mode", settings.app_env)

    pipeline = create_pipeline(settings)

    # Stored in app state for dependency injection
    app.state.pipeline = pipeline
    app.state.upload_handler = ImageUploadHandler.from_settings(settings)

    await pipeline.startup()

    logger.info("✅ Pipeline initialized and ready")
    logger.info(
        "   Uploads: max_files=%d, max_bytes=%d, persist=%s",
        settings.max_upload_files,
        settings.max_upload_bytes,
        settings.persist_uploads,
    )

    yield

    # === Shutdown ===
    logger.info("👋 CrisisAI Responder shutting down")
    await pipeline.shutdown()
    logger.info("✅ Shutdown complete")


def internal_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected failure and build the generic 500 body."""
    logger.error(
        "Server error on %s %s: %s",
        request.method, request.url.path, exc,
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to 4xx and anything unexpected to a generic 500."""

    @app.exception_handler(CrisisResponderError)
    async def handle_domain_error(request: Request, exc: CrisisResponderError):
        logger.warning(
            "%s %s rejected: %s (%s)",
            request.method, request.url.path, exc.message, exc.code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.message, "code": exc.code},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        return internal_error_response(request, exc)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory."""
    settings = settings or get_settings()

    setup_structured_logging(settings.app_log_level, json_format=settings.log_json)

    app = FastAPI(
        title="CrisisAI Responder",
        description="Emergency classification and response plans from text, images and voice",
        version=settings.service_version,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- Request id ---
    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        with LogContext(request_id=request_id):
            try:
                response = await call_next(request)
            except Exception as exc:
                # call_next re-raises unhandled route errors.
                response = internal_error_response(request, exc)
        response.headers["X-Request-ID"] = request_id
        return response

    register_exception_handlers(app)

    # --- Routes ---
    app.include_router(routes.router, prefix="/api")

    @app.get("/")
    async def root():
        """Root health check."""
        return {
            "service": settings.service_name,
            "status": "operational",
            "version": settings.service_version,
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run("main:app", host=_settings.backend_host, port=_settings.backend_port)
