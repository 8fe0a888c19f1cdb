"""Binary sentiment labels and their numeric representation."""
from __future__ import annotations

from enum import Enum
from typing import Any

from tweet_sentiment.errors import UnknownLabelError


class Label(Enum):
    HAPPY = 1.0
    SAD = 0.0

    @property
    def numeric(self) -> float:
        """Value used in source datasets and in persisted reports."""

        return float(self.value)

    @classmethod
    def from_value(cls, value: Any) -> "Label":
        """Resolve a label from the enum itself, its name, or 0/1; booleans are rejected."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise UnknownLabelError(value) from None
        if isinstance(value, bool):
            raise UnknownLabelError(value)
        try:
            numeric = float(value)
        except (TypeError, ValueError):
            raise UnknownLabelError(value) from None
        if numeric == 1.0:
            return cls.HAPPY
        if numeric == 0.0:
            return cls.SAD
        raise UnknownLabelError(value)

    def __str__(self) -> str:
        return self.name


__all__ = ["Label"]
