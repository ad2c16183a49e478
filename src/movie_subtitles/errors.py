"""Error kinds raised by the scrape and unpack pipelines.

Every failure the service reports belongs to one of a small, closed set of
kinds so callers can branch on ``kind`` instead of parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "InvalidInput"
    UPSTREAM_UNAVAILABLE = "UpstreamUnavailable"
    UPSTREAM_NOT_FOUND = "UpstreamNotFound"
    PARSE_SHAPE_CHANGED = "ParseShapeChanged"
    ARCHIVE_CORRUPT = "ArchiveCorrupt"
    ARCHIVE_CONTENTS_UNEXPECTED = "ArchiveContentsUnexpected"
    STORAGE_FAILURE = "StorageFailure"


class SubtitleServiceError(RuntimeError):
    kind: ErrorKind = ErrorKind.UPSTREAM_UNAVAILABLE
    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str, *, retryable: bool | None = None) -> None:
        super().__init__(message)
        self.message = message
        if retryable is not None:
            self.retryable = retryable

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind.value, "retryable": self.retryable}


class InvalidInput(SubtitleServiceError):
    """Rejected before any network or file access."""

    kind = ErrorKind.INVALID_INPUT
    status_code = 400


class UpstreamUnavailable(SubtitleServiceError):
    """The upstream page or archive could not be fetched."""

    kind = ErrorKind.UPSTREAM_UNAVAILABLE
    retryable = True


class UpstreamNotFound(UpstreamUnavailable):
    """Upstream answered 404 for the requested page or archive."""

    kind = ErrorKind.UPSTREAM_NOT_FOUND
    retryable = False


class ParseShapeChanged(SubtitleServiceError):
    """The fetched markup no longer looks like the page the extractor knows."""

    kind = ErrorKind.PARSE_SHAPE_CHANGED


class ArchiveCorrupt(SubtitleServiceError):
    kind = ErrorKind.ARCHIVE_CORRUPT


class ArchiveContentsUnexpected(SubtitleServiceError):
    """The archive does not hold exactly one subtitle file."""

    kind = ErrorKind.ARCHIVE_CONTENTS_UNEXPECTED


class StorageFailure(SubtitleServiceError):
    kind = ErrorKind.STORAGE_FAILURE
