"""
Authentication endpoints.

Public endpoints:
    POST /api/login   — email/password login, returns a signed JWT

Wrong passwords and unknown emails get the same 401 so the response does not
reveal which accounts exist.
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models import User
from auth.dependencies import get_password_hasher, get_token_secret, get_token_service
from auth.errors import MalformedCredentialError, PasswordMismatchError, TokenSigningError
from auth.jwt_service import TokenService
from auth.password import PasswordHasher
from schemas import LoginRequest, LoginResponse
from utils.audit import audit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["auth"])

_INVALID_CREDENTIALS = "Incorrect email or password."


def token_lifetime(expires_in_seconds: Optional[int]) -> timedelta:
    """Clamp a requested lifetime to (0, JWT_DEFAULT_EXPIRY_SECONDS]."""
    default = settings.JWT_DEFAULT_EXPIRY_SECONDS
    if expires_in_seconds is None or expires_in_seconds <= 0 or expires_in_seconds > default:
        return timedelta(seconds=default)
    return timedelta(seconds=expires_in_seconds)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    tokens: TokenService = Depends(get_token_service),
    secret: str = Depends(get_token_secret),
):
    """Authenticate with email/password and return a bearer token."""
    result = await db.execute(select(User).where(User.email == request.email))
    user = result.scalar_one_or_none()

    if user is None:
        audit.log_login(email=request.email, status="failure", reason="unknown_email")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_INVALID_CREDENTIALS,
        )

    try:
        await run_in_threadpool(hasher.verify, user.hashed_password, request.password)
    except PasswordMismatchError as exc:
        logger.info(f"Password mismatch in login attempt for user {user.id}")
        audit.log_login(
            email=request.email,
            status="failure",
            user_id=str(user.id),
            reason=exc.kind.value,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=_INVALID_CREDENTIALS,
        )
    except MalformedCredentialError as exc:
        logger.error(f"Stored credential for user {user.id} is corrupt: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication failed due to a server error",
        )

    try:
        token = tokens.mint(user.id, secret, token_lifetime(request.expires_in_seconds))
    except TokenSigningError as exc:
        logger.error(f"Couldn't generate JWT for user {user.id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Authentication failed due to a server error",
        )

    audit.log_login(email=request.email, status="success", user_id=str(user.id))

    return LoginResponse(
        id=user.id,
        created_at=user.created_at,
        updated_at=user.updated_at,
        email=user.email,
        token=token,
    )
