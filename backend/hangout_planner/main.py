from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from hangout_planner.api import itinerary
from hangout_planner.core.ai_client import GeminiClient
from hangout_planner.core.generator import ItineraryGenerator
from hangout_planner.core.logging_config import configure_logging
from hangout_planner.core.settings import Settings
from hangout_planner.db.storage import ItineraryStorage, build_storage
from hangout_planner.middleware.logging import RequestLoggingMiddleware

logger = structlog.get_logger(__name__)


def format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{loc or 'body'}: {error.get('msg')}")
    return "Invalid request: " + "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Every error body carries a ``message`` field"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        message = format_validation_errors(exc)
        logger.warning("request_validation_failed", message=message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content={"message": f"Rate limit exceeded: {exc.detail}"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
            method=request.method,
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": "Internal server error"}
        )


def create_app(
    settings: Optional[Settings] = None,
    storage: Optional[ItineraryStorage] = None,
    ai_client=None,
) -> FastAPI:
    """
    Build the API. ``storage`` and ``ai_client`` default to the backends named
    by ``settings``; a missing GEMINI_API_KEY or DB_URL stops startup.
    """
    settings = settings or Settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application...", storage_backend=settings.STORAGE_BACKEND)
        client = ai_client or GeminiClient.from_settings(settings)
        app_storage = storage or build_storage(settings)
        await app_storage.initialize()

        app.state.storage = app_storage
        app.state.generator = ItineraryGenerator(
            app_storage, client, ai_timeout_seconds=settings.AI_TIMEOUT_SECONDS
        )
        logger.info("Application ready", storage_backend=app_storage.backend_name)

        yield

        logger.info("Shutting down application...")
        try:
            await app_storage.close()
        except Exception as e:
            logger.error("storage_close_failed", error=str(e))

    app = FastAPI(
        title=settings.APP_NAME,
        description="Preference-driven hangout itinerary generation service",
        version=settings.APP_VERSION,
        lifespan=lifespan
    )

    itinerary.configure_limits(settings)
    itinerary.limiter.enabled = settings.ENABLE_RATE_LIMITING
    app.state.limiter = itinerary.limiter
    app.state.settings = settings

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.ENABLE_METRICS:
        Instrumentator().instrument(app).expose(app, endpoint="/metrics")

    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "API active", "version": settings.APP_VERSION}

    @app.get("/health")
    async def health_check_detailed(request: Request):
        """Detailed health check endpoint"""
        app_storage = getattr(request.app.state, "storage", None)
        try:
            storage_health = await app_storage.health_check() if app_storage else {"status": "unknown"}
        except Exception as e:
            logger.error("storage_health_check_failed", error=str(e))
            storage_health = {"status": "unhealthy", "error": str(e)}

        return {
            "status": "healthy" if storage_health.get("status") == "healthy" else "degraded",
            "version": settings.APP_VERSION,
            "components": {
                "storage": storage_health,
                "ai": "configured" if getattr(request.app.state, "generator", None) else "unavailable",
                "api": "healthy"
            },
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    app.include_router(itinerary.router, prefix=settings.API_PREFIX)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("hangout_planner.main:app", host="0.0.0.0", port=5000)
