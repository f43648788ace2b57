# API - FastAPI application
#
# Read-only REST API over the threat-intel store:
#   /health                           - liveness probe
#   /api/indicators/search            - filtered, paginated indicator search
#   /api/indicators/{id}              - indicator detail with relationships
#   /api/campaigns/{id}/indicators    - campaign timeline (day/week buckets)
#   /api/dashboard/summary            - cached dashboard statistics
#
# Errors are rendered in the ``{"success": false, "error": {...}}``
# envelope: AppError subclasses keep their own status and code, request
# validation failures become 400 VALIDATION_ERROR, anything else is
# logged and returned as 500 INTERNAL_ERROR.

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..core.errors import AppError
from ..core.logging_setup import configure_logging, get_logger
from .campaign_routes import router as campaign_router
from .dashboard_routes import router as dashboard_router
from .indicator_routes import router as indicator_router
from .response import error_response
from .schemas import HealthResponse
from .services import AppServices

logger = get_logger(__name__)


# Pure ASGI middleware (not BaseHTTPMiddleware) so streaming and
# exception propagation behave exactly as without it.
class RequestLogMiddleware:
    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_holder = {"status": 500}

        async def send_with_status(message):
            if message["type"] == "http.response.start":
                status_holder["status"] = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_with_status)
        finally:
            logger.info(
                "request",
                method=scope.get("method"),
                path=scope.get("path"),
                status=status_holder["status"],
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def handle_app_error(_request: Request, exc: AppError):
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content=error_response(
                "VALIDATION_ERROR",
                "Invalid request parameters",
                jsonable_encoder(exc.errors()),
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        # Starlette re-raises after this handler; the server logs the traceback
        logger.error(
            "unhandled_error",
            path=request.url.path,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=error_response("INTERNAL_ERROR", "An unexpected error occurred"),
        )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[AppServices] = None,
) -> FastAPI:
    """Build the FastAPI app.

    When ``services`` is given it is used as-is and left open on
    shutdown; otherwise the lifespan opens the store from ``settings``
    and closes it again.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned: Optional[AppServices] = None
        if getattr(app.state, "services", None) is None:
            owned = AppServices.from_settings(settings or get_settings())
            app.state.services = owned
        logger.info("startup", version=__version__)
        try:
            yield
        finally:
            if owned is not None:
                owned.close()
                app.state.services = None
            logger.info("shutdown")

    app = FastAPI(
        title="Threat Intelligence API",
        description="Read-only REST API for the threat intelligence dashboard",
        version=__version__,
        docs_url="/documentation",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(RequestLogMiddleware)
    _register_error_handlers(app)

    app.include_router(indicator_router)
    app.include_router(campaign_router)
    app.include_router(dashboard_router)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


def start_api_server(settings: Optional[Settings] = None) -> None:
    """Run the API under uvicorn until interrupted."""
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_json)
    app = create_app(settings)
    logger.info("listening", host=settings.host, port=settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
