"""Bearer token extraction from ``Authorization`` header values."""

from typing import Sequence

from .errors import MissingHeaderError, NoBearerSchemeError

BEARER_PREFIX = "Bearer "
_TRIM_CHARS = " \t\r\n"


class BearerExtractor:
    """Pulls the raw token out of ``Authorization: Bearer <token>``."""

    def extract(self, header_values: Sequence[str]) -> str:
        """
        Return the token from the first value using the Bearer scheme.

        The prefix match is case-sensitive. Values are scanned in order and
        anything after the first match is ignored.

        Raises:
            MissingHeaderError: No ``Authorization`` values at all.
            NoBearerSchemeError: None of the values uses the Bearer scheme.
        """
        if not header_values:
            raise MissingHeaderError("no Authorization header found")
        for value in header_values:
            if value.startswith(BEARER_PREFIX):
                return value[len(BEARER_PREFIX):].strip(_TRIM_CHARS)
        raise NoBearerSchemeError("no bearer token found")
