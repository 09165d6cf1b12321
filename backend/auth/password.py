"""Password hashing and verification with bcrypt."""

import logging

import bcrypt

from .errors import HashingFailure, MalformedCredentialError, PasswordMismatchError

logger = logging.getLogger(__name__)

# bcrypt only consumes the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    """
    bcrypt hasher with a fixed work factor.

    New credentials use the ``$2a$`` prefix so they share the format of the
    credentials already stored by the service; ``$2b$`` credentials verify too.
    """

    DEFAULT_COST = 10

    def __init__(self, cost: int = DEFAULT_COST):
        self.cost = cost

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plain-text password. Empty and non-ASCII input is fine.

        Returns:
            Encoded bcrypt credential, e.g. ``$2a$10$...``.

        Raises:
            HashingFailure: Salt generation failed or the password is
                longer than bcrypt accepts.
        """
        encoded = password.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            raise HashingFailure(
                f"password is {len(encoded)} bytes, bcrypt accepts at most {MAX_PASSWORD_BYTES}"
            )
        try:
            salt = bcrypt.gensalt(rounds=self.cost, prefix=b"2a")
            return bcrypt.hashpw(encoded, salt).decode("utf-8")
        except (OSError, ValueError) as exc:
            logger.error(f"bcrypt hashing failed: {type(exc).__name__}")
            raise HashingFailure("error hashing password") from exc

    def verify(self, stored: str, candidate: str) -> None:
        """
        Check ``candidate`` against a stored credential in constant time.

        Raises:
            PasswordMismatchError: The password does not match.
            MalformedCredentialError: ``stored`` is not a bcrypt credential.
        """
        try:
            hashed = stored.encode("ascii")
        except UnicodeEncodeError as exc:
            raise MalformedCredentialError("credential is not ASCII") from exc

        encoded = candidate.encode("utf-8")
        if len(encoded) > MAX_PASSWORD_BYTES:
            # Still validate the stored side so corruption is reported as such
            _check_format(hashed)
            raise PasswordMismatchError("password does not match")

        try:
            matched = bcrypt.checkpw(encoded, hashed)
        except ValueError as exc:
            raise MalformedCredentialError("invalid bcrypt credential") from exc
        if not matched:
            raise PasswordMismatchError("password does not match")


def _check_format(hashed: bytes) -> None:
    try:
        bcrypt.checkpw(b"", hashed)
    except ValueError as exc:
        raise MalformedCredentialError("invalid bcrypt credential") from exc
