from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..components import Components, build_components
from ..config import Settings, get_settings
from ..errors import FriendlinesError, ValidationError
from ..logger import get_logger, setup_logging
from . import routes

log = get_logger("api")


def _error_response(error: FriendlinesError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"error": error.kind, "message": error.message},
    )


def create_app(
    settings: Settings | None = None,
    components: Components | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        settings: Process settings (defaults to environment)
        components: Pre-built collaborators, e.g. with a fake provider in
            tests. When omitted they are built from ``settings`` and opened
            on startup.
    """
    settings = settings or get_settings()
    setup_logging(settings)
    components = components or build_components(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("Starting Friendlines AI Reporter v%s (store: %s)",
                 __version__, components.store.backend_type)
        await components.open()
        try:
            yield
        finally:
            await components.close()
            log.info("Shutdown complete")

    app = FastAPI(
        title="Friendlines AI Reporter API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service = components.service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FriendlinesError)
    async def friendlines_error_handler(request: Request, exc: FriendlinesError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError("Invalid request"))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "InternalError", "message": "Internal server error"},
        )

    app.include_router(routes.router)

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "version": __version__,
            "store": components.store.backend_type,
            "promptVersion": components.provider.prompt_version,
        }

    return app
