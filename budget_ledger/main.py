import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from budget_ledger.core.logging import setup_logging

setup_logging()

from budget_ledger.api.dependencies.database import async_session_factory
from budget_ledger.api.middleware.cors import setup_cors
from budget_ledger.api.middleware.request_id import RequestIdMiddleware
from budget_ledger.api.routes import (
    budget_adjustments,
    budget_allocations,
    budget_releases,
    cost_centers,
    health,
    object_codes,
    scheme_codes,
    vendors,
)
from budget_ledger.core.config import settings
from budget_ledger.core.database import engine
from budget_ledger.services.health_service import check_database

logger = logging.getLogger(__name__)

try:
    settings.validate_secrets()
except ValueError as e:
    logger.critical("Configuration validation failed: %s", e)
    raise SystemExit(f"FATAL: {e}") from e


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    async with async_session_factory() as db:
        status = await check_database(db)
    if status["status"] != "up":
        logger.error("Database is not reachable at startup")
    else:
        logger.info("Budget ledger started", extra={"version": settings.app_version})
    yield
    await engine.dispose()


app = FastAPI(
    title="Budget Ledger API",
    version=settings.app_version,
    lifespan=lifespan,
    debug=settings.debug,
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )

setup_cors(app)
app.add_middleware(RequestIdMiddleware)

app.include_router(health.router, prefix="/api")
app.include_router(cost_centers.router, prefix="/api")
app.include_router(object_codes.router, prefix="/api")
app.include_router(scheme_codes.router, prefix="/api")
app.include_router(vendors.router, prefix="/api")
app.include_router(budget_allocations.router, prefix="/api")
app.include_router(budget_releases.router, prefix="/api")
app.include_router(budget_adjustments.router, prefix="/api")
