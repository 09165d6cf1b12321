"""
Chirp body validation and profanity masking.

Words are the runs of non-space characters between single-space-delimited
runs; everything else (punctuation, tabs) stays part of the word, so
``"kerfuffle!"`` is not masked. Space runs are preserved exactly.
"""

import re

MASK = "****"

PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})

_SPACE_RUNS = re.compile(r"( +)")


class ChirpValidationError(ValueError):
    """Chirp body rejected by the filter."""


class ChirpTooLongError(ChirpValidationError):
    pass


class ProfaneChirpError(ChirpValidationError):
    pass


def _split_with_spaces(body: str) -> list[str]:
    return [part for part in _SPACE_RUNS.split(body) if part]


def _is_profane(word: str) -> bool:
    return word.lower() in PROFANE_WORDS


def is_length_valid(body: str, max_length: int) -> bool:
    """Length is measured in UTF-8 bytes."""
    return len(body.encode("utf-8")) <= max_length


def is_clean(body: str) -> bool:
    return not any(_is_profane(word) for word in _split_with_spaces(body))


def clean_chirp(body: str) -> str:
    """Replace every profane word with ``****``."""
    return "".join(
        MASK if _is_profane(part) else part for part in _split_with_spaces(body)
    )


def validate_chirp(body: str, max_length: int) -> None:
    """
    Reject bodies that are too long or contain a profane word.

    Raises:
        ChirpTooLongError: ``body`` exceeds ``max_length`` UTF-8 bytes.
        ProfaneChirpError: ``body`` contains a profane word.
    """
    if not is_length_valid(body, max_length):
        raise ChirpTooLongError("Chirp is too long")
    if not is_clean(body):
        raise ProfaneChirpError("Chirp contains a forbidden word")
