"""Measure how text normalization changes a model's predictions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from tweet_sentiment.evaluation.comparator import (
    RECORD_ERRORS,
    Classify,
    ValidationRecord,
    as_labeled_text,
    classify_label,
)
from tweet_sentiment.log_utils import get_logger
from tweet_sentiment.parallel import parallel_map
from tweet_sentiment.schemas import CorrectionComparisonRecord

LOGGER = get_logger(__name__)

Normalize = Callable[[str], str]


@dataclass
class CorrectionRun:
    records: List[CorrectionComparisonRecord] = field(default_factory=list)
    dropped: int = 0


class CorrectionImpactEvaluator:
    """Classify each tweet as written and after normalization.

    Both texts are always sent to the model, even when normalization left
    the text unchanged. If either call fails the record is dropped rather
    than reported half-filled.
    """

    def __init__(self, model_name: str, classify: Classify, normalize: Normalize):
        self.model_name = model_name
        self.classify = classify
        self.normalize = normalize

    def evaluate_with_correction(self, record: ValidationRecord) -> Optional[CorrectionComparisonRecord]:
        labeled = as_labeled_text(record)
        corrected = self.normalize(labeled.text)
        try:
            before = classify_label(self.classify, self.model_name, labeled.text)
            after = classify_label(self.classify, self.model_name, corrected)
        except RECORD_ERRORS as exc:
            LOGGER.warning("Classification by %s failed, dropping record: %s", self.model_name, exc)
            return None

        return CorrectionComparisonRecord(
            actual_label=labeled.label,
            before_label=before,
            after_label=after,
            before_text=labeled.text,
            after_text=corrected,
        )

    def evaluate_all(
        self,
        records: Iterable[ValidationRecord],
        num_workers: int = 1,
        progress: bool = False,
    ) -> CorrectionRun:
        results = parallel_map(
            self.evaluate_with_correction,
            records,
            num_workers=num_workers,
            progress=progress,
            desc=f"Correction impact {self.model_name}",
        )
        evaluated = [result for result in results if result is not None]
        dropped = len(results) - len(evaluated)
        if dropped:
            LOGGER.warning("%s record(s) dropped after classification failures", dropped)
        return CorrectionRun(records=evaluated, dropped=dropped)


def summarize_corrections(records: Sequence[CorrectionComparisonRecord], dropped: int = 0) -> Dict[str, Any]:
    """Count how often normalization fixed or broke a prediction."""

    total = len(records)
    before_correct = sum(1 for r in records if r.before_label == r.actual_label)
    after_correct = sum(1 for r in records if r.after_label == r.actual_label)
    fixed = sum(1 for r in records if r.before_label != r.actual_label and r.after_label == r.actual_label)
    broken = sum(1 for r in records if r.before_label == r.actual_label and r.after_label != r.actual_label)

    return {
        "data_size": total,
        "text_changed": sum(1 for r in records if r.before_text != r.after_text),
        "prediction_changed": sum(1 for r in records if r.before_label != r.after_label),
        "fixed": fixed,
        "broken": broken,
        "accuracy_before": before_correct / total if total else float("nan"),
        "accuracy_after": after_correct / total if total else float("nan"),
        "dropped": dropped,
    }


__all__ = [
    "CorrectionImpactEvaluator",
    "CorrectionRun",
    "Normalize",
    "summarize_corrections",
]
