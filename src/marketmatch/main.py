# src/marketmatch/main.py

"""Main FastAPI application for Market Match."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import config
from .api import info, leaderboard, player
from .db.models import Base
from .db.session import engine
from .exceptions import (
    MarketMatchError,
    ResourceNotFoundError,
    StoreError,
    ValidationError,
)
from .middleware.logging import RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """FastAPI lifespan context manager for startup and shutdown events."""
    if config.DB_AUTO_CREATE:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Ensured database tables exist")
    yield
    # Shutdown: Dispose of database connections gracefully
    await engine.dispose()


app = FastAPI(title=f"{config.APP_TITLE} API", lifespan=lifespan)

app.add_middleware(RequestLoggingMiddleware)


# =============================================================================
# Global Exception Handlers
# =============================================================================


@app.exception_handler(ResourceNotFoundError)
async def resource_not_found_handler(
    request: Request, exc: ResourceNotFoundError
) -> JSONResponse:
    """Handle all resource not found errors -> 404."""
    logger.warning("Resource not found: %s", exc.message, extra=exc.details)
    return JSONResponse(
        status_code=404,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


@app.exception_handler(ValidationError)
async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """Handle all validation errors -> 422."""
    logger.warning("Validation error: %s", exc.message, extra=exc.details)
    return JSONResponse(
        status_code=422,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    """Handle failed calls against the player store -> 502."""
    logger.error("Store error: %s", exc.message, extra=exc.details, exc_info=True)
    return JSONResponse(
        status_code=502,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


@app.exception_handler(MarketMatchError)
async def marketmatch_error_handler(
    request: Request, exc: MarketMatchError
) -> JSONResponse:
    """Catch-all for any other Market Match errors -> 500."""
    logger.error(
        "Market Match error: %s", exc.message, extra=exc.details, exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content={"detail": exc.message, "error_type": type(exc).__name__},
    )


@app.exception_handler(SQLAlchemyError)
async def sqlalchemy_error_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Catch-all for database errors that escaped the store."""
    logger.error("Database error: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal database error occurred"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions."""
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred"},
    )


# Include routers into the main application
app.include_router(player.router)
app.include_router(leaderboard.router)
app.include_router(info.router)


@app.get("/", tags=["Root"])
async def read_root() -> dict[str, str]:
    """Provides a welcome message."""
    return {"message": f"Welcome to {config.APP_TITLE}"}


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
