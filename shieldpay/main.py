"""FastAPI application entry point for the ShieldPay risk engine."""

import contextlib
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shieldpay.api.middleware.error_handler import (
    global_exception_handler,
    shieldpay_error_handler,
)
from shieldpay.api.middleware.logging import StructuredLoggingMiddleware
from shieldpay.api.routes.alerts import router as alerts_router
from shieldpay.api.routes.analysis import router as analysis_router
from shieldpay.api.routes.dashboard import router as dashboard_router
from shieldpay.api.routes.flagged_accounts import router as flagged_accounts_router
from shieldpay.api.routes.health import router as health_router
from shieldpay.api.routes.qr_artifacts import router as qr_artifacts_router
from shieldpay.api.routes.transactions import router as transactions_router
from shieldpay.config import settings
from shieldpay.domains.fraud.config import FraudConfig
from shieldpay.engine import build_engine
from shieldpay.shared.errors import ShieldPayError
from shieldpay.shared.logging import setup_logging

logger = structlog.get_logger()

# Track app start time for uptime calculation
APP_START_TIME: float = 0.0


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: startup and shutdown logic."""
    global APP_START_TIME
    APP_START_TIME = time.time()
    setup_logging(settings.log_level, json_logs=not settings.debug)

    logger.info(
        "shieldpay_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        storage_backend=settings.storage_backend,
    )

    if settings.storage_backend == "sql":
        from shieldpay.db.database import init_db

        await init_db()

    producer = None
    if settings.kafka_enabled:
        try:
            from shieldpay.shared.kafka_utils import create_producer

            producer = await create_producer(settings.kafka_bootstrap_servers)
        except Exception:
            logger.warning("kafka_producer_failed_to_start", exc_info=True)

    config = FraudConfig.from_env()
    config.alerts.kafka_topic = settings.alerts_topic
    app.state.engine = build_engine(
        settings.storage_backend, config=config, kafka_producer=producer
    )

    yield

    if producer is not None:
        with contextlib.suppress(Exception):
            await producer.stop()
    await app.state.engine.close()
    logger.info("shieldpay_shutting_down")


app = FastAPI(
    title="ShieldPay Risk Engine",
    description="Transaction risk scoring, pattern detection and fraud case review",
    version=settings.app_version,
    lifespan=lifespan,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.debug else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Structured logging middleware
app.add_middleware(StructuredLoggingMiddleware)

# Exception handlers
app.add_exception_handler(ShieldPayError, shieldpay_error_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Register routers
app.include_router(health_router)
app.include_router(transactions_router)
app.include_router(analysis_router)
app.include_router(alerts_router)
app.include_router(flagged_accounts_router)
app.include_router(qr_artifacts_router)
app.include_router(dashboard_router)


def get_uptime() -> int:
    """Get application uptime in seconds."""
    if APP_START_TIME == 0.0:
        return 0
    return int(time.time() - APP_START_TIME)
