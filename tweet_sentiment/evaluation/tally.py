"""Per-class accuracy counts and their parallel aggregation."""
from __future__ import annotations

import logging
import operator
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Sequence

from tweet_sentiment.errors import UnknownLabelError
from tweet_sentiment.labels import Label
from tweet_sentiment.log_utils import get_logger
from tweet_sentiment.parallel import map_reduce
from tweet_sentiment.schemas import EvaluatedRecord

LOGGER = get_logger(__name__)


def _ratio(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return float("nan")
    return numerator / float(denominator)


@dataclass(frozen=True)
class AccuracyTally:
    """Correct/total counts for each sentiment class.

    ``+`` adds tallies pointwise; it is associative and commutative and
    :meth:`zero` is its identity, so partial tallies computed on separate
    chunks can be merged in any order.
    """

    happy_correct: int = 0
    happy_total: int = 0
    sad_correct: int = 0
    sad_total: int = 0

    def __post_init__(self) -> None:
        for name in ("happy_correct", "happy_total", "sad_correct", "sad_total"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.happy_correct > self.happy_total:
            raise ValueError("happy_correct cannot exceed happy_total")
        if self.sad_correct > self.sad_total:
            raise ValueError("sad_correct cannot exceed sad_total")

    @classmethod
    def zero(cls) -> "AccuracyTally":
        return cls(0, 0, 0, 0)

    def __add__(self, other: "AccuracyTally") -> "AccuracyTally":
        if not isinstance(other, AccuracyTally):
            return NotImplemented
        return AccuracyTally(
            self.happy_correct + other.happy_correct,
            self.happy_total + other.happy_total,
            self.sad_correct + other.sad_correct,
            self.sad_total + other.sad_total,
        )

    @property
    def total(self) -> int:
        return self.happy_total + self.sad_total

    @property
    def correct(self) -> int:
        return self.happy_correct + self.sad_correct

    @property
    def incorrect(self) -> int:
        return self.total - self.correct

    @property
    def happy_accuracy(self) -> float:
        """Fraction of HAPPY tweets predicted correctly; NaN without HAPPY tweets."""

        return _ratio(self.happy_correct, self.happy_total)

    @property
    def sad_accuracy(self) -> float:
        """Fraction of SAD tweets predicted correctly; NaN without SAD tweets."""

        return _ratio(self.sad_correct, self.sad_total)

    @property
    def test_error(self) -> float:
        return _ratio(self.incorrect, self.total)

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.happy_correct, self.happy_total, self.sad_correct, self.sad_total)


def _require_label(value: Any) -> Label:
    if not isinstance(value, Label):
        raise UnknownLabelError(value)
    return value


def tally_records(records: Iterable[EvaluatedRecord]) -> AccuracyTally:
    """Count one chunk of evaluated records sequentially.

    Raises:
        UnknownLabelError: If an actual label, or the prediction of a record
            that did not fail, is not a :class:`Label`.
    """

    happy_correct = happy_total = sad_correct = sad_total = 0
    for record in records:
        actual = _require_label(record.actual_label)
        hit = False
        if not record.failed:
            hit = _require_label(record.predicted_label) is actual

        if actual is Label.HAPPY:
            happy_total += 1
            happy_correct += int(hit)
        else:
            sad_total += 1
            sad_correct += int(hit)

    return AccuracyTally(happy_correct, happy_total, sad_correct, sad_total)


def aggregate(
    records: Sequence[EvaluatedRecord],
    num_workers: int = 1,
    chunk_size: int = 1000,
    progress: bool = False,
) -> AccuracyTally:
    """Reduce evaluated records into an :class:`AccuracyTally`.

    Chunks are counted independently and merged with ``+``. A single
    unknown label aborts the whole pass.
    """

    return map_reduce(
        tally_records,
        operator.add,
        AccuracyTally.zero(),
        records,
        chunk_size=chunk_size,
        num_workers=num_workers,
        progress=progress,
        desc="Aggregating",
    )


@dataclass(frozen=True)
class AccuracyReport:
    """Summary of one model evaluation, including records lost to failures."""

    model_name: str
    tally: AccuracyTally
    dropped: int = 0

    def summary(self) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "happy_correct": self.tally.happy_correct,
            "happy_total": self.tally.happy_total,
            "sad_correct": self.tally.sad_correct,
            "sad_total": self.tally.sad_total,
            "happy_accuracy": self.tally.happy_accuracy,
            "sad_accuracy": self.tally.sad_accuracy,
            "data_size": self.tally.total,
            "test_error": self.tally.test_error,
            "dropped": self.dropped,
        }

    def log(self, logger: Optional[logging.Logger] = None, dataset_type: str = "Testing") -> None:
        logger = logger or LOGGER
        logger.info("=============== %s Evaluation (%s) ==================", dataset_type, self.model_name)
        logger.info("sad messages=%s, happy messages=%s", self.tally.sad_total, self.tally.happy_total)
        logger.info("happy %% correct=%s", self.tally.happy_accuracy)
        logger.info("sad %% correct=%s", self.tally.sad_accuracy)
        logger.info("data size=%s", self.tally.total)
        logger.info("Test Error=%s", self.tally.test_error)
        if self.dropped:
            logger.warning("Dropped records=%s (excluded from the figures above)", self.dropped)
        else:
            logger.info("Dropped records=0")


__all__ = ["AccuracyTally", "AccuracyReport", "aggregate", "tally_records"]
