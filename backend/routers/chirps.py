"""
Chirp endpoints.

    POST /api/chirps            — create a chirp (bearer token required)
    GET  /api/chirps            — list all chirps, oldest first
    GET  /api/chirps/{chirp_id} — fetch one chirp
    POST /api/validate_chirp    — length-check and mask a body without storing it
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models import Chirp, User
from auth.dependencies import get_current_user
from schemas import ChirpCreate, ChirpResponse, ValidateChirpRequest, ValidateChirpResponse
from services.chirp_filter import ChirpValidationError, clean_chirp, is_length_valid, validate_chirp
from utils.audit import audit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["chirps"])


@router.post("/chirps", response_model=ChirpResponse, status_code=status.HTTP_201_CREATED)
async def create_chirp(
    request: ChirpCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Store a chirp authored by the authenticated user."""
    try:
        validate_chirp(request.body, settings.MAX_CHIRP_LENGTH)
    except ChirpValidationError as exc:
        logger.info(f"Rejected chirp from user {user.id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Chirp is not valid: {exc}",
        )

    chirp = Chirp(body=request.body, user_id=user.id)
    db.add(chirp)
    await db.commit()
    await db.refresh(chirp)

    audit.log_chirp_created(chirp_id=str(chirp.id), length=len(chirp.body))
    return ChirpResponse.model_validate(chirp)


@router.get("/chirps", response_model=list[ChirpResponse])
async def list_chirps(db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(Chirp).order_by(Chirp.created_at.asc()))
    return [ChirpResponse.model_validate(c) for c in result.scalars().all()]


@router.get("/chirps/{chirp_id}", response_model=ChirpResponse)
async def get_chirp(chirp_id: str, db: AsyncSession = Depends(get_db)):
    try:
        parsed_id = uuid.UUID(chirp_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not a valid Chirp ID (UUID): {chirp_id}",
        )

    result = await db.execute(select(Chirp).where(Chirp.id == parsed_id))
    chirp = result.scalar_one_or_none()
    if not chirp:
        raise HTTPException(status_code=404, detail="Chirp not found")
    return ChirpResponse.model_validate(chirp)


@router.post("/validate_chirp", response_model=ValidateChirpResponse)
async def validate_chirp_body(request: ValidateChirpRequest):
    """Return the body with profanity masked, or 400 if it is too long."""
    if not is_length_valid(request.body, settings.MAX_CHIRP_LENGTH):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Chirp is too long"},
        )
    return ValidateChirpResponse(cleaned_body=clean_chirp(request.body))
