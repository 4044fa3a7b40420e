import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from subveris.core.config import Settings, settings as default_settings
from subveris.db.base import StorageError, SubscriptionStore
from subveris.db.factory import build_store
from subveris.db.seed import seed_store
from subveris.routers import account, analytics, bank, health, insights, subscriptions
from subveris.utils.analyzer import SubscriptionAnalyzer
from subveris.utils.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[SubscriptionStore] = None,
    settings: Settings = default_settings,
) -> FastAPI:
    """
    Build the API around an explicit store. When no store is passed, the
    configured backend is constructed (and seeded when enabled) here, once.
    """
    if store is None:
        store = build_store(settings)
        if settings.SEED_DEMO_DATA:
            seed_store(store)
    analyzer = SubscriptionAnalyzer(weekly_multiplier=settings.WEEKLY_MULTIPLIER)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: Start the snapshot scheduler
        if settings.SCHEDULER_ENABLED:
            logger.info("Starting scheduler...")
            start_scheduler(
                store,
                analyzer,
                day=settings.SNAPSHOT_DAY,
                hour=settings.SNAPSHOT_HOUR,
                minute=settings.SNAPSHOT_MINUTE,
            )
        yield
        # Shutdown: Stop the scheduler
        if settings.SCHEDULER_ENABLED:
            logger.info("Stopping scheduler...")
            stop_scheduler()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan
    )
    app.state.store = store
    app.state.analyzer = analyzer

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=["*"],
        max_age=3600,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid request data", "details": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"error": "Storage backend failure"})

    # Root endpoint
    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    # Register routers
    app.include_router(health.router, prefix=f"{settings.API_PREFIX}", tags=["Health"])  # /api/health
    app.include_router(analytics.router, prefix=f"{settings.API_PREFIX}", tags=["Analytics"])
    app.include_router(subscriptions.router, prefix=f"{settings.API_PREFIX}/subscriptions", tags=["Subscriptions"])
    app.include_router(insights.router, prefix=f"{settings.API_PREFIX}/insights", tags=["Insights"])
    app.include_router(bank.router, prefix=f"{settings.API_PREFIX}", tags=["Bank"])
    app.include_router(account.router, prefix=f"{settings.API_PREFIX}/account", tags=["Account"])

    return app
