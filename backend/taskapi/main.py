from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from taskapi import __version__
from taskapi.config import settings
from taskapi.logging_config import setup_logging
from taskapi.middleware.logging import CORRELATION_ID_HEADER, LoggingMiddleware
from taskapi.routers import tasks
from taskapi.scheduler import shutdown_scheduler, start_scheduler
from taskapi.services.challenge_service import ChallengeService


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a structured 500 body, keeping the request's correlation ID."""
    response = JSONResponse(
        status_code=500,
        content={"success": False, "error": "internal server error"},
    )
    correlation_id = structlog.contextvars.get_contextvars().get("correlation_id")
    if correlation_id:
        response.headers[CORRELATION_ID_HEADER] = correlation_id
    return response


def create_app(
    service: ChallengeService | None = None,
    cleanup_enabled: bool | None = None,
) -> FastAPI:
    """
    Build the application around a single challenge service.

    The service holds the signing key and the task store for the lifetime of
    the app; pass one in to share or inspect it (tests do).
    """
    challenge_service = service if service is not None else ChallengeService()
    run_cleanup = settings.cleanup_enabled if cleanup_enabled is None else cleanup_enabled

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Start/stop the eviction scheduler."""
        scheduler = start_scheduler(challenge_service) if run_cleanup else None
        yield
        if scheduler is not None:
            shutdown_scheduler(scheduler)

    app = FastAPI(
        title="TaskAPI",
        description="Signed, short-lived challenge tasks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.challenge_service = challenge_service

    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(LoggingMiddleware)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(tasks.router, prefix=settings.api_prefix.rstrip("/"), tags=["tasks"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "tasks": len(challenge_service.store)}

    return app


setup_logging()
app = create_app()
