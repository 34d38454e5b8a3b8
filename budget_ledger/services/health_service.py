import logging
import time

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from budget_ledger.core.config import settings

logger = logging.getLogger(__name__)


async def check_database(db: AsyncSession) -> dict:
    """Check database connectivity and measure latency."""
    try:
        start = time.monotonic()
        await db.execute(text("SELECT 1"))
        latency_ms = round((time.monotonic() - start) * 1000)
        return {"status": "up", "latency_ms": latency_ms}
    except Exception:
        logger.warning("Database health check failed", exc_info=True)
        return {"status": "down"}


async def get_basic_health(db: AsyncSession) -> tuple[dict, int]:
    """Run basic health check (DB only). Returns (response_body, status_code)."""
    db_status = await check_database(db)
    overall = "healthy" if db_status["status"] == "up" else "unhealthy"
    status_code = 200 if overall == "healthy" else 503
    return {"status": overall}, status_code


async def get_detailed_health(db: AsyncSession) -> dict:
    checks = {"database": await check_database(db)}
    overall = "healthy" if checks["database"]["status"] == "up" else "unhealthy"
    return {
        "status": overall,
        "version": settings.app_version,
        "checks": checks,
    }
