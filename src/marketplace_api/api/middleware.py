"""FastAPI middleware for request tracing, error handling, and CORS.

Middleware stack (outermost first):
    1. RequestIDMiddleware: tags the request with X-Request-ID and logs its outcome
    2. ErrorHandlerMiddleware: MarketplaceError -> {"error", "message"} with its status
    3. CORSMiddleware: browser clients, origins from settings

Request validation failures (a non-numeric amount, limit or id) are answered
with 400 and the same error body.
"""

from __future__ import annotations

import time
import uuid
from typing import TYPE_CHECKING

import structlog
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from marketplace_api.domain.exceptions import MarketplaceError

if TYPE_CHECKING:
    from fastapi import FastAPI, Request, Response

    from marketplace_api.config import Settings

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """The JSON body every failed request gets."""
    return JSONResponse(status_code=status_code, content={"error": code, "message": message})


# ---------------------------------------------------------------------------
# 1. Request ID Middleware
# ---------------------------------------------------------------------------
class RequestIDMiddleware(BaseHTTPMiddleware):
    """Bind a request id into the structlog context and echo it back."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request.completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ---------------------------------------------------------------------------
# 2. Error Handler Middleware
# ---------------------------------------------------------------------------
class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Translate exceptions escaping the routes into JSON error responses.

    A MarketplaceError carries its own status code. Client errors are logged
    at warning level; anything unclassified is a 500 with a generic message
    and a logged traceback.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except MarketplaceError as exc:
            log = logger.error if exc.status_code >= 500 else logger.warning
            log(
                "request.rejected",
                code=exc.code,
                status=exc.status_code,
                error=exc.message,
                path=request.url.path,
            )
            return error_response(exc.status_code, exc.code, exc.message)
        except Exception as exc:
            logger.exception("request.unhandled_error", error=str(exc), path=request.url.path)
            return error_response(500, "INTERNAL_ERROR", "An unexpected error occurred")


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------
async def request_validation_error(request: Request, exc: RequestValidationError) -> Response:
    """Answer malformed parameters and bodies with 400 instead of FastAPI's 422."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = first.get("loc", ("request",))[-1]
    message = f"Invalid {field}: {first.get('msg', 'malformed request')}"
    logger.warning("request.invalid", error=message, path=request.url.path)
    return error_response(400, "INVALID_REQUEST", message)


# ---------------------------------------------------------------------------
# Setup function
# ---------------------------------------------------------------------------
def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI application.

    Starlette runs the last added middleware first.
    """
    app.add_exception_handler(RequestValidationError, request_validation_error)

    # Browsers reject credentialed responses with a wildcard origin.
    wildcard = "*" in settings.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    app.add_middleware(ErrorHandlerMiddleware)

    app.add_middleware(RequestIDMiddleware)
