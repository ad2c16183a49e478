from __future__ import annotations

import re

from .errors import InvalidInput

MOVIE_ID_RE = re.compile(r"tt[0-9]+")
ZIP_URL_RE = re.compile(r"https?://.*\.zip")

INVALID_MOVIE_ID = 'Invalid movie ID. Must be in the format "tt1234567".'
MISSING_ZIP_URL = "No zip URL provided"
INVALID_ZIP_URL = "Invalid zip URL. Must be a valid HTTP/HTTPS URL ending with .zip"


def is_movie_id(value: object) -> bool:
    return isinstance(value, str) and MOVIE_ID_RE.fullmatch(value) is not None


def is_zip_url(value: object) -> bool:
    return isinstance(value, str) and ZIP_URL_RE.fullmatch(value) is not None


def validate_movie_id(value: object) -> str:
    """Return ``value`` if it is a catalog id like ``tt1234567``."""
    if not is_movie_id(value):
        raise InvalidInput(INVALID_MOVIE_ID)
    return value  # type: ignore[return-value]


def validate_zip_url(value: object) -> str:
    """Return ``value`` if it is an http(s) URL ending in ``.zip``.

    A missing or empty value and a malformed one are reported with
    different messages.
    """
    if not value:
        raise InvalidInput(MISSING_ZIP_URL)
    if not is_zip_url(value):
        raise InvalidInput(INVALID_ZIP_URL)
    return value  # type: ignore[return-value]
