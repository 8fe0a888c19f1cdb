"""Evaluation of deployed sentiment models against labeled tweets."""

from tweet_sentiment.evaluation.comparator import ComparisonRun, PredictionComparator, compare
from tweet_sentiment.evaluation.correction import (
    CorrectionImpactEvaluator,
    CorrectionRun,
    summarize_corrections,
)
from tweet_sentiment.evaluation.tally import AccuracyReport, AccuracyTally, aggregate, tally_records

__all__ = [
    "AccuracyReport",
    "AccuracyTally",
    "ComparisonRun",
    "CorrectionImpactEvaluator",
    "CorrectionRun",
    "PredictionComparator",
    "aggregate",
    "compare",
    "summarize_corrections",
    "tally_records",
]
