"""
FastAPI application initialization
"""

from typing import Optional
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from api.routes import debug, health, steam, webhooks
from api.middleware import RequestContextMiddleware
from core.config import settings
from core.exceptions import ConfigurationError, ProviderError, SyncException
from core.logging import setup_logging
from ingestion.scheduler import PollScheduler
import logging
import uvicorn

logger = logging.getLogger(__name__)


async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": exc.message, "detail": type(exc).__name__}
    )


async def provider_error_handler(request: Request, exc: ProviderError):
    logger.error(f"Steam API call failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={"ok": False, "error": exc.message, "detail": type(exc).__name__}
    )


async def sync_error_handler(request: Request, exc: SyncException):
    logger.error(f"Request failed: {exc}")
    return JSONResponse(
        status_code=500,
        content={"ok": False, "error": exc.message, "detail": type(exc).__name__}
    )


def create_app(
    enable_debug_routes: Optional[bool] = None,
    poll_scheduler: Optional[PollScheduler] = None
) -> FastAPI:
    app = FastAPI(
        title="Steam Achievements Backend",
        description="Tracks Steam achievement unlocks and notifies webhook targets",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )

    app.add_middleware(RequestContextMiddleware)

    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(SyncException, sync_error_handler)

    app.state.poll_scheduler = poll_scheduler or PollScheduler()

    app.include_router(health.router)
    app.include_router(webhooks.router)
    app.include_router(steam.router)

    if enable_debug_routes is None:
        enable_debug_routes = settings.ENABLE_DEBUG_ROUTES
    if enable_debug_routes:
        logger.info("Debug routes enabled (ENABLE_DEBUG_ROUTES=true).")
        app.include_router(debug.router)
    else:
        logger.info("Debug routes disabled (ENABLE_DEBUG_ROUTES=false).")

    @app.on_event("startup")
    async def startup_event():
        """Application startup event"""
        logger.info("Starting Steam Achievements Backend")
        logger.info(f"Environment: {settings.ENVIRONMENT}")

        if not settings.ENABLE_POLLER:
            logger.info("Poller disabled (ENABLE_POLLER=false).")
            return
        app.state.poll_scheduler.start()

    @app.on_event("shutdown")
    async def shutdown_event():
        """Application shutdown event"""
        logger.info("Shutting down Steam Achievements Backend")
        await app.state.poll_scheduler.stop()

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": "Steam Achievements Backend",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health",
            "endpoints": {
                "webhooks": "/webhooks",
                "owned_games": "/steam/owned-games"
            }
        }

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
