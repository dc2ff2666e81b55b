from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.core.config import (
    APP_NAME,
    APP_VERSION,
    CORS_ORIGINS,
    DEBUG,
    LOG_FORMAT,
    LOG_LEVEL,
    TIMEZONE,
    validate_config,
)
from app.core.error_handlers import setup_exception_handlers
from app.core.limits import limiter, rate_limit_handler
from app.core.logging_utils import (
    error_tracker,
    get_logger,
    log_business_event,
    setup_logging,
)
from app.core.middleware import setup_middleware
from app.classes.routers import cron as classes_cron
from app.classes.routers import schedule as classes_schedule
from app.membership.routers import cron as membership_cron
from app.membership.routers import status as membership_status

setup_logging(LOG_LEVEL, LOG_FORMAT)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {APP_NAME} v{APP_VERSION}")

    try:
        validate_config()
        logger.info("Configuration validated")

        log_business_event(
            "application_started",
            "system",
            0,
            {
                "version": APP_VERSION,
                "environment": "development" if DEBUG else "production",
                "timezone": TIMEZONE,
            },
        )
    except Exception as e:
        logger.error(f"Application startup failed: {str(e)}")
        error_tracker.track_error(
            "STARTUP_ERROR",
            str(e),
            {"component": "application_startup", "version": APP_VERSION},
        )
        raise

    yield

    logger.info("Application shutdown completed")


app = FastAPI(
    title=APP_NAME,
    description="Membership status and class schedule decisions for the gym",
    version=APP_VERSION,
    lifespan=lifespan,
    debug=DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

setup_middleware(
    app,
    {
        "slow_request_threshold": 2.0,
        "exclude_paths": [
            "/health",
            "/docs",
            "/openapi.json",
            "/redoc",
            "/favicon.ico",
        ],
    },
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
app.add_middleware(SlowAPIMiddleware)

app.include_router(membership_status.router, prefix="/api/v1")
app.include_router(membership_cron.router, prefix="/api/v1")
app.include_router(classes_schedule.router, prefix="/api/v1")
app.include_router(classes_cron.router, prefix="/api/v1")


@app.get("/health", tags=["Health"])
@limiter.exempt
async def health():
    return {
        "status": "ok",
        "version": APP_VERSION,
        "errors": error_tracker.get_stats()["total_errors"],
    }
