"""FastAPI application entry point."""
from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from swim_planner.config import Settings, get_settings
from swim_planner.logging_config import access_logger, configure_logging
from swim_planner.routers import health, trainings
from swim_planner.services.generation_client import GenerationClient
from swim_planner.services.plan_store import PlanStore
from swim_planner.services.providers import build_provider


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application with its shared plan store and generation client."""

    configure_logging()
    settings = settings or get_settings()

    access_log = access_logger()
    app = FastAPI(title="Swim Planner API")
    app.state.plan_store = PlanStore()
    app.state.generation_client = GenerationClient(
        build_provider(settings),
        model=settings.generation_model,
        timeout_seconds=settings.generation_timeout_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.monotonic()
        response = await call_next(request)
        access_log.info(
            "%s %s -> %d",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "client": request.client.host if request.client else "-",
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "elapsed_ms": (time.monotonic() - started) * 1000,
            },
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Report missing or malformed request fields as a client error."""
        logger.warning("Rejected %s %s: invalid request body", request.method, request.url.path)
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        message = str(exc) if settings.expose_error_details else "Something went wrong"
        return JSONResponse(status_code=500, content={"error": "Internal Server Error", "message": message})

    @app.get("/", tags=["system"])
    async def index() -> dict[str, str]:
        return {"message": "Welcome to the Swim Planner API"}

    @app.get("/health", tags=["system"])
    async def health_check() -> dict[str, str]:
        """Liveness check."""
        return {"status": "ok"}

    app.include_router(health.router)
    app.include_router(trainings.router)

    logger.info(
        "Application startup complete | provider=%s environment=%s",
        settings.ai_provider,
        settings.environment,
    )
    return app


app = create_app()
