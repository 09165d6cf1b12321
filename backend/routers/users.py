"""
User account endpoints.

    POST /api/users   — register a new account
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import get_password_hasher
from auth.errors import HashingFailure
from auth.password import PasswordHasher
from database import get_db
from models import User
from schemas import UserCreate, UserResponse
from utils.audit import audit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    request: UserCreate,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Create an account; the password is stored only as a bcrypt credential."""
    existing = await db.execute(select(User).where(User.email == request.email))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )

    try:
        hashed = await run_in_threadpool(hasher.hash, request.password)
    except HashingFailure as exc:
        logger.error(f"Error creating user: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error creating user",
        )

    user = User(email=request.email, hashed_password=hashed)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    await db.refresh(user)

    logger.info(f"Created user {user.id}")
    audit.log_user_created(user_id=str(user.id), email=user.email)
    return UserResponse.model_validate(user)
