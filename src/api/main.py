"""
FastAPI application for the Calendar Assistant.

The HTTP surface is small: the Google OAuth callback and a health check.
The application owns the process lifecycle: it configures logging,
creates the token tables, loads the session snapshot and runs the Telegram
bot for as long as the server is up.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from src.api.auth_routes import router as auth_router
from src.api.dependencies import (
    Services,
    build_services,
    get_services,
    init_services,
    reset_services,
)
from src.api.models import HealthResponse
from src.config import get_settings
from src.database import init_db

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    configure_logging(settings.log_level)

    logger.info("Starting Calendar Assistant")
    try:
        settings.validate_required_config()
    except ValueError as e:
        logger.warning(str(e))

    await init_db()
    services = build_services(settings)
    init_services(services)

    if services.bot is not None:
        await services.bot.start()
    else:
        logger.warning("TELEGRAM_BOT_TOKEN not set; bot is disabled")

    logger.info("Calendar Assistant started")

    yield

    logger.info("Shutting down Calendar Assistant")
    if services.bot is not None:
        await services.bot.stop()
    await services.gateway.close()
    reset_services()


# =============================================================================
# FastAPI Application
# =============================================================================


app = FastAPI(
    title="Calendar Assistant",
    description="Telegram assistant that turns event descriptions into Google Calendar events.",
    version=VERSION,
    lifespan=lifespan,
)

app.include_router(auth_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc: HTTPException):
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_type": "http_error",
            "message": exc.detail,
            "retryable": exc.status_code >= 500,
        },
    )


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    tags=["System"],
)
async def health_check(services: Services = Depends(get_services)) -> HealthResponse:
    """Report whether the bot is polling."""
    bot_running = services.bot is not None and services.bot.is_running

    return HealthResponse(
        status="healthy" if bot_running else "degraded",
        version=VERSION,
        bot_running=bot_running,
        conversations=len(services.state.accounts),
    )


def run_server(host: str | None = None, port: int | None = None, reload: bool = False):
    """Run the API server with Uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "src.api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
    )


if __name__ == "__main__":
    run_server()
