import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import converter
from .services.rate_client import RateServiceClient
from .services.session import ConverterSession


def create_app(
    settings_override: Settings | None = None,
    rate_client: RateServiceClient | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    rate_client: pre-built client for the remote rate service (tests inject one
    backed by a mock transport).
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    # Initialize logging early
    init_logging(debug=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # The app lifetime is the view lifetime: catalog fetch on mount,
        # teardown flag on unmount.
        session = ConverterSession(settings, client=rate_client)
        await session.open()
        app.state.session = session
        logging.getLogger("currency_converter").info(
            "converter ready (rates at %s)", settings.rates_base
        )
        try:
            yield
        finally:
            await session.close()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(errors.FormDisabledError, errors.form_disabled_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(converter.router)

    @app.get("/")
    async def root():
        return {"message": f"{settings.app_name} API", "version": settings.version}

    return app


app = create_app()
