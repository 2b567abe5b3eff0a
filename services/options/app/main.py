from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from .api.v1.routers.health import router as health_router
from .api.v1.routers.options import router as options_router
from .core.config import get_settings, validate_settings
from .core.errors import OptionError
from .core.logging import configure_structlog, get_logger
from .core.observability import add_prometheus, add_tracing
from .db import dispose_engine, get_engine
from .middleware.logging import RequestLoggingMiddleware
from .schemas.errors import ErrorResponse


def _error(status_code: int, detail: str, errors: list | None = None) -> JSONResponse:
    body = ErrorResponse(detail=detail, status_code=status_code, errors=errors)
    return JSONResponse(status_code=status_code, content=body.to_content())


def create_app() -> FastAPI:
    settings = get_settings()
    # Reliability: validate env/settings early
    try:
        validate_settings(settings)
    except ValueError as exc:
        # Fail-fast with a clear error
        raise RuntimeError(f"Invalid configuration: {exc}") from exc

    configure_structlog()
    logger = get_logger(__name__)

    app = FastAPI(title=settings.app_name, version=settings.app_version)

    # Rate limiting setup
    if settings.rate_limit_enabled:
        limiter = Limiter(
            key_func=get_remote_address,
            default_limits=[f"{settings.rate_limit_per_min}/minute"],
        )
        app.state.limiter = limiter
        app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
        app.add_middleware(SlowAPIMiddleware)
        logger.info("rate_limiting.enabled", limit_per_min=settings.rate_limit_per_min)
    else:
        logger.info("rate_limiting.disabled")

    # Global exception handlers
    @app.exception_handler(OptionError)
    async def option_exception_handler(request: Request, exc: OptionError) -> JSONResponse:
        """Map domain errors (conflict, not found, bad batch) to their status codes."""
        logger.info(
            "request.option_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            status_code=exc.status_code,
            detail=exc.message,
        )
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle Pydantic validation errors with detailed messages."""
        errors = jsonable_encoder(exc.errors())
        logger.warning(
            "request.validation_error",
            path=request.url.path,
            errors=errors,
        )
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "Validation error", errors)

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(
        request: Request, exc: SQLAlchemyError
    ) -> JSONResponse:
        """Handle database errors gracefully."""
        logger.error(
            "request.database_error",
            path=request.url.path,
            error=str(exc),
            exc_info=True,
        )
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Database error occurred")

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle all unhandled exceptions; details are logged, never returned."""
        logger.error(
            "request.unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=True,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")

    # Middleware (order matters - later middleware wraps earlier ones)
    app.add_middleware(RequestLoggingMiddleware)

    # CORS Configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )
    logger.info(
        "cors.configured",
        allow_origins=settings.cors_allow_origins,
        allow_credentials=settings.cors_allow_credentials,
    )

    # Metrics
    add_prometheus(app, app_name="options")

    # Tracing (optional)
    if settings.otel_enabled:
        if not add_tracing(app, app_name="options", endpoint=settings.otel_exporter_otlp_endpoint):
            logger.warning("tracing.unavailable", reason="opentelemetry not installed")

    @app.on_event("startup")
    def on_startup() -> None:  # noqa: D401
        # Initialize connection pool early so first requests are fast
        logger.info("startup.init_db_pool")
        get_engine()

    @app.on_event("shutdown")
    def on_shutdown() -> None:  # noqa: D401
        logger.info("shutdown.dispose_db_pool")
        dispose_engine()

    # Routers
    app.include_router(health_router)
    app.include_router(options_router)

    @app.get("/")
    def root() -> dict:
        return {"service": "options", "status": "ok"}

    return app


app = create_app()
