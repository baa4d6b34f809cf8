from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from finance_tracker import __version__
from finance_tracker.api.middleware.error_handler import (
    handle_finance_tracker_error,
    handle_generic_error,
    handle_integrity_error,
    handle_validation_error,
)
from finance_tracker.api.middleware.logging import RequestLoggingMiddleware
from finance_tracker.api.v1 import router as v1_router
from finance_tracker.api.v1.health import router as health_router
from finance_tracker.config import settings
from finance_tracker.core.exceptions import FinanceTrackerError
from finance_tracker.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, json_format=settings.app_env.lower() != "development")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Finance Tracker API",
        description="Personal income/expense tracking with local data migration",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(FinanceTrackerError, handle_finance_tracker_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(IntegrityError, handle_integrity_error)
    app.add_exception_handler(Exception, handle_generic_error)

    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
