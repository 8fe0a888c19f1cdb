"""Record types flowing between dataset building, evaluation and reporting."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import numpy as np
from scipy import sparse

from tweet_sentiment.labels import Label


@dataclass(frozen=True)
class LabeledText:
    """A tweet text with its ground-truth sentiment."""

    label: Label
    text: str


@dataclass(frozen=True)
class FeatureVector:
    """Sparse count vector addressing ``dimension`` slots.

    Only non-zero slots are stored in ``counts``.
    """

    dimension: int
    counts: Mapping[int, float] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.dimension < 1:
            raise ValueError("dimension must be positive")
        for index in self.counts:
            if not 0 <= index < self.dimension:
                raise ValueError(f"Index {index} is out of range 0..{self.dimension - 1}")

    @property
    def nnz(self) -> int:
        return len(self.counts)

    @property
    def indices(self) -> List[int]:
        return sorted(self.counts)

    @property
    def values(self) -> List[float]:
        return [float(self.counts[index]) for index in self.indices]

    def to_dense(self) -> np.ndarray:
        dense = np.zeros(self.dimension, dtype=np.float64)
        for index, count in self.counts.items():
            dense[index] = count
        return dense

    def to_scipy(self) -> sparse.csr_matrix:
        """Return a ``1 x dimension`` CSR row suitable for scikit-learn estimators."""

        indices = self.indices
        return sparse.csr_matrix(
            (self.values, (np.zeros(len(indices), dtype=np.int64), indices)),
            shape=(1, self.dimension),
        )


@dataclass(frozen=True)
class LabeledExample:
    """Training/testing unit: numeric label plus hashed features.

    ``text`` keeps the source tweet so that validation examples can be sent
    to the classification service later.
    """

    label: float
    features: FeatureVector
    text: Optional[str] = None

    def to_labeled_text(self) -> LabeledText:
        if self.text is None:
            raise ValueError("LabeledExample was built without its source text")
        return LabeledText(label=Label.from_value(self.label), text=self.text)


@dataclass(frozen=True)
class EvaluatedRecord:
    """Ground truth and the model's prediction for one validation tweet.

    ``failed`` is only set when classification failures are counted as
    wrong predictions; ``predicted_label`` is ``None`` in that case.
    """

    actual_label: Label
    predicted_label: Optional[Label]
    text: str
    failed: bool = False

    @property
    def correct(self) -> bool:
        return not self.failed and self.actual_label == self.predicted_label

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actual_label": _numeric(self.actual_label),
            "model_prediction": _numeric(self.predicted_label),
            "tweet_text": self.text,
            "failed": self.failed,
        }


@dataclass(frozen=True)
class CorrectionComparisonRecord:
    """Predictions for the same tweet before and after text normalization."""

    actual_label: Label
    before_label: Label
    after_label: Label
    before_text: str
    after_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actual_label": _numeric(self.actual_label),
            "before_label": _numeric(self.before_label),
            "after_label": _numeric(self.after_label),
            "before_tweet": self.before_text,
            "after_tweet": self.after_text,
        }


def _numeric(label: Optional[Label]) -> Optional[float]:
    return None if label is None else label.numeric


__all__ = [
    "LabeledText",
    "FeatureVector",
    "LabeledExample",
    "EvaluatedRecord",
    "CorrectionComparisonRecord",
]
