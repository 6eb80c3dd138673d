"""FastAPI application for the mirror redirect service."""

import logging
from contextlib import asynccontextmanager

import fastapi
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.config import get_settings
from core.logger import configure_logging
from routes import health_router, redirect_router
from services.rules_service import RulesConfigError, load_rules

configure_logging()
logger = logging.getLogger(__name__)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler for unhandled exceptions."""
    logger.exception(
        "unhandled.exception",
        extra={
            "exc_type": type(exc).__name__,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"detail": "An unexpected error occurred. Please try again."},
    )


async def validation_exception_handler(
    request: Request, exc: Exception
) -> JSONResponse:
    """Handler for request validation errors."""
    if not isinstance(exc, RequestValidationError):
        return JSONResponse(status_code=500, content={"detail": "Unexpected error"})

    logger.warning(
        "request.validation_error",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_count": len(exc.errors()),
        },
    )
    return JSONResponse(
        status_code=422,
        content={"detail": exc.errors()},
    )


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI):
    """Load the mirror rule table once at startup.

    A load failure is recorded rather than raised so /health and /ready keep
    answering; redirects return 503 until the service is restarted with a
    valid configuration.
    """
    app.state.rules = None
    app.state.rules_error = None

    try:
        app.state.rules = load_rules(get_settings())
    except RulesConfigError as e:
        app.state.rules_error = str(e)
        logger.error("rules.load_failed", extra={"error": str(e)})

    yield


_settings = get_settings()

app = fastapi.FastAPI(
    title="Mirror Redirect",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if _settings.enable_docs or _settings.debug else None,
    redoc_url="/redoc" if _settings.enable_docs or _settings.debug else None,
    openapi_url=("/openapi.json" if _settings.enable_docs or _settings.debug else None),
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(health_router)
app.include_router(redirect_router)
