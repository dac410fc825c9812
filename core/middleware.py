"""
Application Middleware for the DevConnector API.

This module defines the middleware that handles cross-cutting concerns for
every request: correlation IDs, error translation, request timing and security
headers.

Key Middleware Components:
- `CorrelationMiddleware`: Assigns a correlation ID to every request (or reuses
  the caller's `X-Correlation-ID`) and echoes it on the response.
- `ErrorHandlingMiddleware`: Converts `ConnectorAPIException` subclasses into
  their JSON error bodies and any unexpected exception into a generic 500,
  logging the traceback server-side only. No exception escapes a request.
- `PerformanceMiddleware`: Logs the start and end of each request and adds an
  `X-Process-Time` header; slow requests are logged as warnings.
- `SecurityHeadersMiddleware`: Adds standard security headers to responses.
- `request_validation_exception_handler`: Renders malformed request bodies as
  a 400 with the same `errors` list the services produce.

Architectural Design:
- Layered Processing Pipeline: `main.py` adds the error handler first so it
  sits innermost, and the correlation middleware last so it runs first.
"""

import time
import uuid
from typing import Any, Callable, Dict, List, Optional

from fastapi import Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from .exceptions import ConnectorAPIException, to_error_response
from .logging_config import get_logger, set_correlation_id

logger = get_logger("core.middleware")

SLOW_REQUEST_SECONDS = 1.0


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Middleware to add correlation IDs to requests"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = (
            request.headers.get("X-Correlation-ID")
            or request.headers.get("X-Request-ID")
            or str(uuid.uuid4())
        )

        set_correlation_id(correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Middleware for centralized error handling"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)

        except ConnectorAPIException as e:
            log = logger.error if e.status_code >= 500 else logger.info
            log(
                f"Application error: {e}",
                extra={
                    "error_type": type(e).__name__,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return create_error_response(
                e.status_code,
                to_error_response(e),
                getattr(request.state, "correlation_id", None),
            )

        except Exception as e:
            logger.error(
                f"Unexpected error: {e}",
                extra={
                    "error_type": type(e).__name__,
                    "path": request.url.path,
                    "method": request.method,
                },
                exc_info=True,
            )
            return create_error_response(
                500,
                {"code": "INTERNAL_ERROR", "message": "Server Error"},
                getattr(request.state, "correlation_id", None),
            )


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for request timing and logging"""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
            },
        )

        response = await call_next(request)

        process_time = time.time() - start_time
        response.headers["X-Process-Time"] = str(round(process_time * 1000, 2))

        logger.info(
            f"Request completed: {request.method} {request.url.path} - {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "process_time_ms": round(process_time * 1000, 2),
            },
        )

        if process_time > SLOW_REQUEST_SECONDS:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path}",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "process_time_ms": round(process_time * 1000, 2),
                },
            )

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds standard security headers"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render FastAPI body validation failures as field-level 400 errors"""
    errors: List[Dict[str, Any]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        entry: Dict[str, Any] = {"msg": error.get("msg", "Invalid value")}
        if location:
            entry["param"] = ".".join(location)
        errors.append(entry)

    logger.info(
        f"Request validation failed: {request.method} {request.url.path}",
        extra={"path": request.url.path, "error_count": len(errors)},
    )
    return create_error_response(
        400,
        {"code": "VALIDATION_ERROR", "message": "Invalid request", "errors": errors},
        getattr(request.state, "correlation_id", None),
    )


def create_error_response(
    status_code: int, body: Dict[str, Any], correlation_id: Optional[str] = None
) -> JSONResponse:
    """Create standardized error response"""
    content = dict(body)
    if correlation_id:
        content["correlation_id"] = correlation_id
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
