"""Services package for Chirpy."""

from .chirp_filter import (
    ChirpTooLongError,
    ChirpValidationError,
    ProfaneChirpError,
    clean_chirp,
    validate_chirp,
)
from .metrics import HitCounter, fileserver_hits

__all__ = [
    "ChirpTooLongError",
    "ChirpValidationError",
    "ProfaneChirpError",
    "clean_chirp",
    "validate_chirp",
    "HitCounter",
    "fileserver_hits",
]
