"""
Health check service for Chirpy.

Each check reports one component: the database, the static file root
served under /app, and the token signing secret. The database is the only
critical component; anything else failing marks the service degraded.
"""

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import text

from config import settings
from database import AsyncSessionLocal

logger = logging.getLogger(__name__)

DEFAULT_SECRET = "change-me-in-production"
CRITICAL_COMPONENTS = {"database"}

_started = time.monotonic()


class ComponentHealth(BaseModel):
    name: str
    status: str  # "ok" | "degraded" | "error"
    message: Optional[str] = None
    response_time_ms: Optional[float] = None


class HealthResponse(BaseModel):
    status: str  # "healthy" | "degraded" | "unhealthy"
    app: str
    version: str
    uptime_seconds: float
    checks: list[ComponentHealth]
    timestamp: str


async def check_database() -> ComponentHealth:
    """Round-trip a trivial query through a fresh session."""
    start = time.perf_counter()
    status, message = "ok", None
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        status, message = "error", str(e)
    elapsed = round((time.perf_counter() - start) * 1000, 1)
    return ComponentHealth(
        name="database", status=status, message=message, response_time_ms=elapsed
    )


def check_fileserver_root() -> ComponentHealth:
    root = Path(settings.FILESERVER_ROOT)
    if not root.is_dir():
        message = f"Directory does not exist: {root}"
    elif not os.access(root, os.R_OK):
        message = f"Directory is not readable: {root}"
    else:
        return ComponentHealth(name="fileserver_root", status="ok")
    return ComponentHealth(name="fileserver_root", status="error", message=message)


def check_token_secret() -> ComponentHealth:
    """Flag deployments still signing tokens with the built-in secret."""
    if settings.CHIRPY_SECRET == DEFAULT_SECRET:
        return ComponentHealth(
            name="token_secret",
            status="degraded",
            message="CHIRPY_SECRET is unset; using the default secret",
        )
    return ComponentHealth(name="token_secret", status="ok")


def _overall(checks: list[ComponentHealth]) -> str:
    if any(c.status == "error" and c.name in CRITICAL_COMPONENTS for c in checks):
        return "unhealthy"
    if any(c.status != "ok" for c in checks):
        return "degraded"
    return "healthy"


async def run_health_checks() -> HealthResponse:
    """Run every component check and fold them into one response."""
    checks = [
        await check_database(),
        check_fileserver_root(),
        check_token_secret(),
    ]
    return HealthResponse(
        status=_overall(checks),
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        uptime_seconds=round(time.monotonic() - _started, 1),
        checks=checks,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
