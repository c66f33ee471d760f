from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import db
from .logging_utils import reset_request_id, set_request_id
from .routers import todos as todos_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "todos", "description": "Create, list, replace and delete todo items."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the connection pool on startup unless one was injected, and close it on shutdown."""
    owns_pool = app.state.pool is None
    if owns_pool:
        try:
            app.state.pool = await db.create_pool(app.state.settings)
        except Exception:
            logger.exception("Failed to initialize database connection")
            raise
    try:
        yield
    finally:
        if owns_pool:
            await db.close_pool(app.state.pool)
            app.state.pool = None


async def request_context_middleware(request: Request, call_next):
    """
    Attach a request id (taken from X-Request-ID or generated), echo it on the
    response and log one access line per request. Errors escaping the route
    become a generic 500 here, so failed requests carry the id too.
    """
    request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
    request.state.request_id = request_id
    token = set_request_id(request_id)
    started = time.perf_counter()
    try:
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = internal_error_response()
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response
    finally:
        reset_request_id(token)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Map body parsing failures to 400 and shape errors to 422.

    Response format (422):
        {
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": [... pydantic/fastapi error details ...]
        }
    """
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "message": "Malformed JSON body"},
        )
    return JSONResponse(
        status_code=422,
        content={
            "error": "ValidationError",
            "message": "Request validation failed",
            "detail": jsonable_encoder(errors),
        },
    )


def internal_error_response() -> JSONResponse:
    """Generic 500 body without internal detail."""
    return JSONResponse(status_code=500, content={"error": "Internal Server Error"})


# PUBLIC_INTERFACE
def create_app(settings: Optional[Settings] = None, pool: Optional[Any] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Configuration; read from the environment when omitted.
        pool: Connection pool to serve requests from. When omitted the
            lifespan creates an asyncpg pool from ``settings.database_url``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Todo API",
        description="REST service for todo items stored in PostgreSQL.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.pool = pool

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/", summary="Health Check", tags=["health"])
    def health_check():
        """
        Health check endpoint. Does not touch the database.
        """
        return {"message": "Healthy"}

    app.include_router(todos_router.router)
    return app


app = create_app()
