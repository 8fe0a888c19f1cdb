"""Dataset building: label/text extraction, hashing and splitting."""

from tweet_sentiment.data.builder import (
    BuildResult,
    Extraction,
    TrainingSetBuilder,
    extract_labeled_text,
    extract_records,
)
from tweet_sentiment.data.splitter import DatasetSplitter, normalize_ratios

__all__ = [
    "BuildResult",
    "Extraction",
    "TrainingSetBuilder",
    "extract_labeled_text",
    "extract_records",
    "DatasetSplitter",
    "normalize_ratios",
]
