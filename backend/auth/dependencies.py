"""
FastAPI dependencies for authentication.

Usage in routers::

    from auth.dependencies import get_current_user_id

    @router.post("/chirps")
    async def create_chirp(user_id: uuid.UUID = Depends(get_current_user_id)):
        ...

Every token failure is answered with the same generic 401 so clients cannot
tell which check failed; the precise kind goes to the logs and the audit trail.
"""

import logging
import uuid

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from models.user import User
from utils.audit import audit

from .bearer import BearerExtractor
from .errors import AuthError
from .jwt_service import TokenService
from .password import PasswordHasher

logger = logging.getLogger(__name__)

_password_hasher = PasswordHasher(cost=settings.BCRYPT_COST)
_token_service = TokenService(issuer=settings.JWT_ISSUER)
_bearer_extractor = BearerExtractor()


def get_password_hasher() -> PasswordHasher:
    return _password_hasher


def get_token_service() -> TokenService:
    return _token_service


def get_bearer_extractor() -> BearerExtractor:
    return _bearer_extractor


def get_token_secret() -> str:
    return settings.CHIRPY_SECRET


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user_id(
    request: Request,
    extractor: BearerExtractor = Depends(get_bearer_extractor),
    tokens: TokenService = Depends(get_token_service),
    secret: str = Depends(get_token_secret),
) -> uuid.UUID:
    """
    Extract and validate the JWT from ``Authorization: Bearer <token>``.

    Returns the authenticated user ID (the token subject).

    Raises:
        HTTPException 401 if the header is missing or the token is rejected.
    """
    try:
        token = extractor.extract(request.headers.getlist("authorization"))
        user_id = tokens.validate(token, secret)
    except AuthError as exc:
        logger.warning(
            f"Rejected bearer token on {request.url.path}: {exc}",
            extra={"auth_kind": exc.kind.value},
        )
        audit.log_auth_rejected(kind=exc.kind.value, path=request.url.path)
        raise _unauthorized()

    audit.set_actor(f"user:{user_id}")
    return user_id


async def get_current_user(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Like :func:`get_current_user_id` but also loads the :class:`User` row.

    A valid token whose subject no longer exists (e.g. after a reset) is
    treated as unauthorized.
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning(f"Token subject {user_id} has no account")
        raise _unauthorized()
    return user
