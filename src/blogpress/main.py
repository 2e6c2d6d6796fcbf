# src/blogpress/main.py
"""Main entry point for the BlogPress application."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from blogpress import __version__
from blogpress.api.v1 import (
    admin_router,
    auth_router,
    blogs_router,
    comments_router,
    reactions_router,
    submission_router,
    subscribers_router,
)
from blogpress.core.errors import (
    BadRequestError,
    BlogPressError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    VerificationFailedError,
)
from blogpress.core.settings import settings
from blogpress.services.notification_gate import NotificationWorker
from blogpress.services.notifier import shutdown_notifier

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

STATUS_FOR_ERROR: dict[type[BlogPressError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    BadRequestError: status.HTTP_400_BAD_REQUEST,
    RateLimitedError: status.HTTP_429_TOO_MANY_REQUESTS,
    VerificationFailedError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
}

# Initialize FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Blog submission, moderation and reader interaction API",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers; fixed paths under /blogs come before /blogs/{slug}
app.include_router(auth_router, prefix="/api/v1")
app.include_router(submission_router, prefix="/api/v1")
app.include_router(subscribers_router, prefix="/api/v1")
app.include_router(comments_router, prefix="/api/v1")
app.include_router(reactions_router, prefix="/api/v1")
app.include_router(blogs_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


def _error_body(code: int, kind: str, message: str, **extras: Any) -> dict[str, Any]:
    return {
        "status": code,
        "kind": kind,
        "message": message,
        "timestamp": datetime.now(UTC).isoformat(),
        **extras,
    }


def status_for(exc: BlogPressError) -> int:
    """Map a domain error to an HTTP status by walking its class hierarchy."""
    for cls in type(exc).__mro__:
        code = STATUS_FOR_ERROR.get(cls)
        if code is not None:
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(BlogPressError)
async def handle_domain_error(request: Request, exc: BlogPressError) -> JSONResponse:
    code = status_for(exc)
    headers = None
    if isinstance(exc, RateLimitedError) and exc.retry_after_seconds is not None:
        headers = {"Retry-After": str(exc.retry_after_seconds)}
    return JSONResponse(
        status_code=code,
        content=_error_body(code, exc.kind, exc.message, **exc.extras()),
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors: dict[str, str] = {}
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors[".".join(location) or "body"] = error.get("msg", "invalid")
    code = status.HTTP_400_BAD_REQUEST
    return JSONResponse(
        status_code=code,
        content=_error_body(code, "validation_failed", "Validation failed", errors=errors),
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return JSONResponse(
        status_code=code,
        content=_error_body(code, "internal_error", "An unexpected error occurred"),
    )


@app.on_event("startup")
async def on_startup() -> None:
    worker = NotificationWorker()
    await worker.start()
    app.state.notification_worker = worker


@app.on_event("shutdown")
async def on_shutdown() -> None:
    worker: NotificationWorker | None = getattr(app.state, "notification_worker", None)
    if worker:
        await worker.stop()
    shutdown_notifier()


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "description": "Blog submission, moderation and reader interaction API",
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("blogpress.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
