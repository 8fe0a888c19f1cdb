"""Feature preparation and evaluation tooling for tweet sentiment models."""

from tweet_sentiment.data.builder import TrainingSetBuilder
from tweet_sentiment.data.splitter import DatasetSplitter
from tweet_sentiment.errors import (
    ClassificationRejectedError,
    ClassificationTimeoutError,
    MissingFieldError,
    SentimentError,
    ServiceUnavailableError,
    UnknownLabelError,
)
from tweet_sentiment.evaluation.comparator import PredictionComparator
from tweet_sentiment.evaluation.correction import CorrectionImpactEvaluator
from tweet_sentiment.evaluation.tally import AccuracyReport, AccuracyTally, aggregate
from tweet_sentiment.features.hashing import FeatureHasher
from tweet_sentiment.labels import Label
from tweet_sentiment.schemas import (
    CorrectionComparisonRecord,
    EvaluatedRecord,
    FeatureVector,
    LabeledExample,
    LabeledText,
)

__all__ = [
    "AccuracyReport",
    "AccuracyTally",
    "ClassificationRejectedError",
    "ClassificationTimeoutError",
    "CorrectionComparisonRecord",
    "CorrectionImpactEvaluator",
    "DatasetSplitter",
    "EvaluatedRecord",
    "FeatureHasher",
    "FeatureVector",
    "Label",
    "LabeledExample",
    "LabeledText",
    "MissingFieldError",
    "PredictionComparator",
    "SentimentError",
    "ServiceUnavailableError",
    "TrainingSetBuilder",
    "UnknownLabelError",
    "aggregate",
]
