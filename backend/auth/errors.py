"""
Error taxonomy for the authentication core.

Every failure is a subclass of :class:`AuthError` carrying a machine-readable
:class:`AuthErrorKind`. ``expected`` separates ordinary rejections (wrong
password, expired token, ...) from faults that point at a server-side problem
(entropy failure, corrupt stored credential). Callers dispatch on the class or
on ``kind``; message text is for logs only and never contains secrets, tokens
or signatures.
"""

from enum import Enum


class AuthErrorKind(str, Enum):
    HASHING_FAILURE = "hashing_failure"
    MISMATCH = "mismatch"
    MALFORMED_CREDENTIAL = "malformed_credential"
    SIGNING_FAILURE = "signing_failure"
    MALFORMED_TOKEN = "malformed_token"
    INVALID_SIGNATURE = "invalid_signature"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    WRONG_ISSUER = "wrong_issuer"
    EXPIRED = "expired"
    MALFORMED_SUBJECT = "malformed_subject"
    MISSING_HEADER = "missing_header"
    NO_BEARER_SCHEME = "no_bearer_scheme"


class AuthError(Exception):
    """Base class for all authentication failures."""

    kind: AuthErrorKind
    expected: bool = True

    def __str__(self) -> str:
        message = super().__str__()
        return f"{self.kind.value}: {message}" if message else self.kind.value


# ── Password hashing ───────────────────────────────────────────────────


class HashingFailure(AuthError):
    kind = AuthErrorKind.HASHING_FAILURE
    expected = False


class PasswordMismatchError(AuthError):
    kind = AuthErrorKind.MISMATCH


class MalformedCredentialError(AuthError):
    kind = AuthErrorKind.MALFORMED_CREDENTIAL
    expected = False


# ── Tokens ─────────────────────────────────────────────────────────────


class TokenSigningError(AuthError):
    kind = AuthErrorKind.SIGNING_FAILURE
    expected = False


class MalformedTokenError(AuthError):
    kind = AuthErrorKind.MALFORMED_TOKEN


class InvalidSignatureError(AuthError):
    kind = AuthErrorKind.INVALID_SIGNATURE


class UnsupportedAlgorithmError(AuthError):
    kind = AuthErrorKind.UNSUPPORTED_ALGORITHM


class WrongIssuerError(AuthError):
    kind = AuthErrorKind.WRONG_ISSUER


class TokenExpiredError(AuthError):
    kind = AuthErrorKind.EXPIRED


class MalformedSubjectError(AuthError):
    kind = AuthErrorKind.MALFORMED_SUBJECT


# ── Bearer extraction ──────────────────────────────────────────────────


class MissingHeaderError(AuthError):
    kind = AuthErrorKind.MISSING_HEADER


class NoBearerSchemeError(AuthError):
    kind = AuthErrorKind.NO_BEARER_SCHEME
