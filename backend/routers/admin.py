"""
Admin endpoints.

    POST /admin/reset    — delete every user and chirp (PLATFORM=dev only)
    GET  /admin/metrics  — HTML page with the static file server hit count
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models import Chirp, User
from services.metrics import fileserver_hits, render_metrics_page
from utils.audit import audit
from utils.logging_utils import LogTimer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/reset", response_class=PlainTextResponse)
async def reset(db: AsyncSession = Depends(get_db)):
    """Wipe all accounts and chirps and zero the hit counter."""
    if settings.PLATFORM != "dev":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Reset is only available on the dev platform",
        )

    with LogTimer(logger, "Resetting users and chirps") as timer:
        await db.execute(delete(Chirp))
        result = await db.execute(delete(User))
        await db.commit()
        timer.set_record_count(result.rowcount)

    fileserver_hits.reset()
    audit.log_reset(users_deleted=result.rowcount)
    return PlainTextResponse("OK")


@router.get("/metrics", response_class=HTMLResponse)
async def metrics():
    return HTMLResponse(render_metrics_page(fileserver_hits.value))
