"""Error taxonomy shared by dataset building and evaluation."""
from __future__ import annotations

from typing import Any, Mapping, Optional


class SentimentError(Exception):
    """Base class for all errors raised by ``tweet_sentiment``."""


class MissingFieldError(SentimentError):
    """A raw record lacks a required field or carries a mistyped value."""

    def __init__(self, field: str, record: Optional[Mapping[str, Any]] = None, reason: str = "missing"):
        self.field = field
        self.record = record
        self.reason = reason
        super().__init__(f"Field '{field}' is {reason} in record {record!r}")


class UnknownLabelError(SentimentError):
    """A label value outside ``{HAPPY, SAD}`` reached a place that needs one."""

    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Unknown sentiment label: {value!r}")


class ClassificationError(SentimentError):
    """Per-record failure of the external classification collaborator."""


class ServiceUnavailableError(ClassificationError):
    """The classification service could not be reached or answered with an error."""


class ClassificationTimeoutError(ClassificationError):
    """The classification call did not complete within its timeout."""


class ClassificationRejectedError(ClassificationError):
    """The service refused one text, e.g. 413 or 422 for an oversized or invalid tweet."""

    def __init__(self, message: str, status_code: int):
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "SentimentError",
    "MissingFieldError",
    "UnknownLabelError",
    "ClassificationError",
    "ServiceUnavailableError",
    "ClassificationTimeoutError",
    "ClassificationRejectedError",
]
