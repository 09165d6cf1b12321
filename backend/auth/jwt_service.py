"""JWT token creation and validation using python-jose."""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Union

from jose import JWTError, jwt
from jose.exceptions import JOSEError, JWTClaimsError

from .errors import (
    InvalidSignatureError,
    MalformedSubjectError,
    MalformedTokenError,
    TokenExpiredError,
    TokenSigningError,
    UnsupportedAlgorithmError,
    WrongIssuerError,
)

logger = logging.getLogger(__name__)

Secret = Union[str, bytes]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Mints and validates HS256 identity tokens.

    A token is accepted only when its signature verifies against the secret,
    its issuer matches ``issuer``, the current time is strictly before
    ``exp`` and its subject is a UUID.
    """

    ALGORITHM = "HS256"

    def __init__(self, issuer: str = "chirpy", clock: Callable[[], datetime] = _utcnow):
        self.issuer = issuer
        self.clock = clock

    def mint(self, subject: uuid.UUID, secret: Secret, lifetime: timedelta) -> str:
        """
        Create a signed JWT for ``subject``.

        Args:
            subject: User ID embedded as the ``sub`` claim.
            secret: HMAC key shared with :meth:`validate`.
            lifetime: Time until expiry. Zero or negative values produce a
                token that is already expired.

        Returns:
            Compact JWS string.

        Raises:
            TokenSigningError: The signer rejected the key or claims.
        """
        now = self.clock()
        claims = {
            "iss": self.issuer,
            "sub": str(subject),
            "iat": now,
            "exp": now + lifetime,
        }
        try:
            return jwt.encode(claims, secret, algorithm=self.ALGORITHM)
        except JOSEError as exc:
            # jws.sign raises JWSError, not JWTError, when it refuses the key
            logger.error(f"JWT signing failed: {type(exc).__name__}")
            raise TokenSigningError("error creating JWT") from exc

    def validate(self, token: str, secret: Secret) -> uuid.UUID:
        """
        Verify a JWT and return the authenticated subject.

        Raises:
            MalformedTokenError: Not a compact JWS, or its registered claims
                are structurally invalid.
            UnsupportedAlgorithmError: Header declares anything but HS256.
            InvalidSignatureError: Signature does not verify with ``secret``.
            WrongIssuerError: ``iss`` is not this service.
            TokenExpiredError: Current time is at or after ``exp``.
            MalformedSubjectError: ``sub`` is not a UUID.
        """
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as exc:
            raise MalformedTokenError("cannot parse token header") from exc

        alg = header.get("alg")
        if alg != self.ALGORITHM:
            raise UnsupportedAlgorithmError(f"unexpected signing method: {alg!r}")

        try:
            claims = jwt.decode(
                token,
                secret,
                algorithms=[self.ALGORITHM],
                # Expiry and subject are checked below
                options={"verify_exp": False, "verify_aud": False, "verify_sub": False},
            )
        except JWTClaimsError as exc:
            raise MalformedTokenError(f"invalid registered claims: {exc}") from exc
        except JWTError as exc:
            raise InvalidSignatureError("signature verification failed") from exc

        issuer = claims.get("iss")
        if issuer != self.issuer:
            raise WrongIssuerError(f"invalid issuer: {issuer!r}")

        exp = claims.get("exp")
        if exp is None:
            raise MalformedTokenError("token has no expiry")
        try:
            expires_at = datetime.fromtimestamp(int(exp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise MalformedTokenError("invalid expiry claim") from exc
        if self.clock() >= expires_at:
            raise TokenExpiredError(f"token expired at {expires_at.isoformat()}")

        subject = claims.get("sub")
        try:
            return uuid.UUID(subject)
        except (TypeError, ValueError, AttributeError) as exc:
            raise MalformedSubjectError("cannot parse subject as UUID") from exc
