"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from aihub import __version__
from aihub.ai.errors import AIError
from aihub.api.routes import api_router
from aihub.config import Settings, get_settings
from aihub.middleware.auth import AuthenticationMiddleware
from aihub.middleware.logging import LoggingMiddleware, configure_logging
from aihub.middleware.request_id import RequestIdMiddleware
from aihub.utils.errors import (
    ErrorCode,
    classify_exception,
    create_error_response,
    log_error,
    status_for_code,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown events."""
    settings: Settings = app.state.settings

    configure_logging(
        level=settings.logging.level,
        format=settings.logging.format,
    )

    logger.info(
        "Starting aihub-server",
        extra={
            "version": __version__,
            "host": settings.server.host,
            "port": settings.server.port,
            "auth_mode": settings.auth.mode,
            "providers": len(settings.catalog.providers),
        },
    )

    try:
        settings.validate_required()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    logger.info("aihub-server started successfully")

    yield

    logger.info("Shutting down aihub-server")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings override for testing.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="aihub-server",
        description="Multi-provider AI chat with default/backup model failover",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Last added runs first: CORS, request ID, logging, then auth
    app.add_middleware(AuthenticationMiddleware, settings=settings)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors.allowed_origins,
        allow_credentials=True,
        allow_methods=settings.server.cors.allowed_methods,
        allow_headers=settings.server.cors.allowed_headers,
    )

    app.add_exception_handler(AIError, ai_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)

    app.include_router(api_router)

    return app


async def ai_error_handler(request: Request, exc: AIError) -> JSONResponse:
    """Map AI layer errors to an error code and HTTP status."""
    request_id = getattr(request.state, "request_id", None)
    code = classify_exception(exc)
    log_error(exc, code=code, request_id=request_id, path=request.url.path)

    error = create_error_response(code, detail=str(exc), request_id=request_id)
    return JSONResponse(
        status_code=status_for_code(code),
        content=error.model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body validation errors."""
    error = create_error_response(
        ErrorCode.VALIDATION_ERROR,
        request_id=getattr(request.state, "request_id", None),
    )
    return JSONResponse(
        status_code=status_for_code(ErrorCode.VALIDATION_ERROR),
        content={
            **error.model_dump(mode="json"),
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected errors."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception",
        extra={
            "request_id": request_id,
            "path": request.url.path,
            "method": request.method,
        },
    )

    error = create_error_response(ErrorCode.INTERNAL_ERROR, request_id=request_id)
    return JSONResponse(status_code=500, content=error.model_dump(mode="json"))


# Create the default app instance
app = create_app()
