"""Pair ground-truth labels with predictions from a deployed model."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Union

from tweet_sentiment.errors import ClassificationError
from tweet_sentiment.labels import Label
from tweet_sentiment.log_utils import get_logger
from tweet_sentiment.parallel import parallel_map
from tweet_sentiment.schemas import EvaluatedRecord, LabeledExample, LabeledText

LOGGER = get_logger(__name__)

Classify = Callable[[str, str], Any]
ValidationRecord = Union[LabeledText, LabeledExample]

# Failures the classification collaborator may raise for a single record.
RECORD_ERRORS = (ClassificationError, TimeoutError)

FAILURE_POLICIES = ("drop", "count_as_wrong")


def as_labeled_text(record: ValidationRecord) -> LabeledText:
    if isinstance(record, LabeledText):
        return record
    if isinstance(record, LabeledExample):
        return record.to_labeled_text()
    raise TypeError(f"Cannot evaluate a {type(record).__name__}")


def classify_label(classify: Classify, model_name: str, text: str) -> Label:
    """Call the collaborator and coerce its answer to a :class:`Label`."""

    return Label.from_value(classify(model_name, text))


@dataclass
class ComparisonRun:
    records: List[EvaluatedRecord] = field(default_factory=list)
    dropped: int = 0


class PredictionComparator:
    """Evaluate validation records against one model.

    A failed classification call affects only its own record: with the
    ``"drop"`` policy the record is left out of the results, with
    ``"count_as_wrong"`` it is kept as a failed, incorrect prediction.
    Calls are never retried here.
    """

    def __init__(self, model_name: str, classify: Classify, failure_policy: str = "drop"):
        if failure_policy not in FAILURE_POLICIES:
            raise ValueError(f"failure_policy must be one of {FAILURE_POLICIES}, got '{failure_policy}'")
        self.model_name = model_name
        self.classify = classify
        self.failure_policy = failure_policy

    def compare(self, record: ValidationRecord) -> Optional[EvaluatedRecord]:
        labeled = as_labeled_text(record)
        try:
            predicted = classify_label(self.classify, self.model_name, labeled.text)
        except RECORD_ERRORS as exc:
            LOGGER.warning("Classification by %s failed: %s", self.model_name, exc)
            if self.failure_policy == "drop":
                return None
            return EvaluatedRecord(
                actual_label=labeled.label,
                predicted_label=None,
                text=labeled.text,
                failed=True,
            )

        return EvaluatedRecord(actual_label=labeled.label, predicted_label=predicted, text=labeled.text)

    def compare_all(
        self,
        records: Iterable[ValidationRecord],
        num_workers: int = 1,
        progress: bool = False,
    ) -> ComparisonRun:
        results = parallel_map(
            self.compare,
            records,
            num_workers=num_workers,
            progress=progress,
            desc=f"Evaluating {self.model_name}",
        )
        evaluated = [result for result in results if result is not None]
        dropped = len(results) - len(evaluated)
        if dropped:
            LOGGER.warning("%s record(s) dropped after classification failures", dropped)
        return ComparisonRun(records=evaluated, dropped=dropped)


def compare(
    record: ValidationRecord,
    classify: Classify,
    model_name: str,
    failure_policy: str = "drop",
) -> Optional[EvaluatedRecord]:
    """Functional form of :meth:`PredictionComparator.compare`."""

    return PredictionComparator(model_name, classify, failure_policy).compare(record)


__all__ = [
    "Classify",
    "ComparisonRun",
    "FAILURE_POLICIES",
    "PredictionComparator",
    "RECORD_ERRORS",
    "as_labeled_text",
    "classify_label",
    "compare",
]
