#run it with uvicorn formrelay.main:app --reload
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from formrelay.api.handlers import (
    http_exception_handler,
    unhandled_exception_handler,
    validation_exception_handler,
)
from formrelay.api.v1.api_router import api_router
from formrelay.core.config import Settings, get_settings
from formrelay.core.deployments import list_deployments
from formrelay.core.rate_limit import RateLimiter
from formrelay.core.scheduler import start_purge_scheduler, stop_scheduler

# Load environment variables from .env file
load_dotenv()


def resolve_log_level(name: str) -> int:
    """Map a LOG_LEVEL name to its numeric level, falling back to INFO."""
    level = logging.getLevelName(str(name).strip().upper())
    return level if isinstance(level, int) else logging.INFO


# Set up logging
logging.basicConfig(
    level=resolve_log_level(get_settings().log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start background housekeeping on startup and stop it on shutdown"""
    settings: Settings = app.state.settings

    for deployment in list_deployments(settings):
        logger.info(
            f"📨 Form '{deployment.form_id}' ready: required={deployment.required_fields}, "
            f"calendar={deployment.calendar_mode.value}, operator={deployment.operator_address}"
        )

    logger.info("🔧 Initializing scheduler...")
    scheduler = start_purge_scheduler(app.state.rate_limiter, settings.rate_limit_purge_minutes)
    app.state.scheduler = scheduler
    try:
        yield
    finally:
        stop_scheduler(scheduler)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    if settings is None:
        settings = get_settings()

    app = FastAPI(title="Form Relay", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(api_router)

    @app.get("/health")
    def health_check():
        """Liveness probe."""
        return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
