"""
Request logging middleware with correlation ID support.

Generates a correlation ID for each request, binds it to the structlog
context, and logs request start/completion with latency.

Never logs Authorization headers or tokens.
"""

import secrets
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CORRELATION_ID_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    """Generate an 8-character correlation ID."""
    return secrets.token_hex(4)


def route_context(request: Request) -> dict:
    """Route template and task id, once routing has filled them into the scope."""
    context = {}
    route = request.scope.get("route")
    if route is not None:
        context["route"] = route.path
    task_id = (request.scope.get("path_params") or {}).get("task_id")
    if task_id is not None:
        context["task_id"] = task_id
    return context


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs:
    - request_started: method, path, correlation_id
    - request_completed: method, path, route, task_id, status_code, duration_ms,
      correlation_id
    - request_failed: method, path, error, duration_ms, correlation_id
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = generate_correlation_id()
        start_time = time.perf_counter()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=correlation_id)

        logger = structlog.get_logger()
        logger.info(
            "request_started",
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                duration_ms=round(duration_ms, 2),
                exc_info=True,
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            **route_context(request),
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response
