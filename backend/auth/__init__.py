"""
Authentication package for Chirpy.

Provides:
- bcrypt password hashing and verification
- HS256 JWT minting and validation
- Bearer token extraction from Authorization headers
- FastAPI dependencies composing the above
"""

from .bearer import BearerExtractor
from .errors import (
    AuthError,
    AuthErrorKind,
    HashingFailure,
    InvalidSignatureError,
    MalformedCredentialError,
    MalformedSubjectError,
    MalformedTokenError,
    MissingHeaderError,
    NoBearerSchemeError,
    PasswordMismatchError,
    TokenExpiredError,
    TokenSigningError,
    UnsupportedAlgorithmError,
    WrongIssuerError,
)
from .jwt_service import TokenService
from .password import PasswordHasher

__all__ = [
    "BearerExtractor",
    "PasswordHasher",
    "TokenService",
    "AuthError",
    "AuthErrorKind",
    "HashingFailure",
    "PasswordMismatchError",
    "MalformedCredentialError",
    "TokenSigningError",
    "MalformedTokenError",
    "InvalidSignatureError",
    "UnsupportedAlgorithmError",
    "WrongIssuerError",
    "TokenExpiredError",
    "MalformedSubjectError",
    "MissingHeaderError",
    "NoBearerSchemeError",
]
