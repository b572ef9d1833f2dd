"""
Main Application Entry Point

This module sets up the FastAPI application with:
- Logging configuration
- Database initialization on startup and engine disposal on shutdown
- Uniform JSON error responses
- Page access redirects by route classification
- Route registration

Run with:
    uvicorn whisperbox.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from whisperbox.access import authorize
from whisperbox.config import settings
from whisperbox.database import dispose_engine, get_engine
from whisperbox.dependencies import principal_from_request
from whisperbox.errors import ValidationError
from whisperbox.models import Base
from whisperbox.routes import auth, messages


logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager - runs on startup and shutdown.

    Startup: create database tables if they don't exist.
    Shutdown: close pooled database connections.
    """
    async with get_engine().begin() as conn:
        # create_all() creates tables for all models that inherit from Base
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")

    yield

    await dispose_engine()


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# All API routes live under /api
app.include_router(auth.router)
app.include_router(messages.router)


@app.middleware("http")
async def route_access(request: Request, call_next):
    """Bounce signed-in users off public-only pages and anonymous users off protected ones."""
    redirect_to = authorize(request.url.path, principal_from_request(request))
    if redirect_to is not None:
        return RedirectResponse(url=redirect_to, status_code=status.HTTP_307_TEMPORARY_REDIRECT)
    return await call_next(request)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    content = {"success": False, "message": exc.detail}
    if isinstance(exc, ValidationError) and exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as 400 with the messages grouped per field."""
    errors = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")) or "body"
        message = error["msg"]
        # Drop pydantic's "Value error, " prefix from our own validators
        if error["type"] == "value_error" and "error" in error.get("ctx", {}):
            message = str(error["ctx"]["error"])
        errors.setdefault(field, []).append(message)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Invalid input", "errors": errors}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    # Never leak internals to the client
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"}
    )
