"""Error Handlers — global exception handlers for the ArticleHub API.

Invariants:
    - ArticleHubError → structured JSON with error code, message, severity
    - RequestValidationError → 400 VALIDATION_ERROR with field-level details
    - RateLimitExceeded → 429 RATE_LIMITED
    - Unmatched routes and other HTTP errors keep the same envelope
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Layered handlers: domain (ArticleHubError), validation (Pydantic), HTTP, catch-all (Exception)
    - Rate-limit handler is sync: SlowAPIMiddleware calls it directly without awaiting
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from articlehub.core.errors import ArticleHubError, ErrorCategory, ErrorSeverity

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_rate_limit_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register ArticleHub domain/infrastructure error handler."""

    @app.exception_handler(ArticleHubError)
    async def domain_error_handler(request: Request, exc: ArticleHubError):
        """Handle all ArticleHub domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"error_code": exc.code, "path": request.url.path,
                   "user_id": exc.context.user_id},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
            extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_rate_limit_handler(app: FastAPI) -> None:
    """Register slowapi rate-limit handler."""

    def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        logger.warning(
            f"Rate limit exceeded: {exc.detail}",
            extra={"error_code": "RATE_LIMITED", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=_envelope(
                "RATE_LIMITED",
                "Too many requests from this client, please try again later",
                ErrorCategory.RATE_LIMIT, ErrorSeverity.WARNING,
            ),
        )

    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def _register_http_error_handler(app: FastAPI) -> None:
    """Register handler for framework HTTP errors (unknown route, wrong method)."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            content = _envelope(
                "ROUTE_NOT_FOUND", "Route not found",
                ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING,
            )
        else:
            content = _envelope(
                "HTTP_ERROR", str(exc.detail),
                ErrorCategory.VALIDATION, ErrorSeverity.WARNING,
            )
        return JSONResponse(
            status_code=exc.status_code, content=content, headers=exc.headers,
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=_envelope(
                "INTERNAL_ERROR", "An unexpected error occurred",
                ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
            ),
        )


def _envelope(
    code: str, message: str, category: ErrorCategory, severity: ErrorSeverity,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    response = _envelope(
        "VALIDATION_ERROR", "Invalid request data",
        ErrorCategory.VALIDATION, ErrorSeverity.ERROR,
    )
    response["error"]["details"] = [
        {
            "field": ".".join(str(loc) for loc in e["loc"]),
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
    return response
