"""Turn raw labeled tweets into hashed training and validation sets."""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

from tweet_sentiment.config import VALID_MISSING_FIELD_POLICIES, BuildConfig
from tweet_sentiment.data.splitter import DatasetSplitter
from tweet_sentiment.errors import MissingFieldError, UnknownLabelError
from tweet_sentiment.features.hashing import FeatureHasher
from tweet_sentiment.features.text_filter import filter_tweet
from tweet_sentiment.labels import Label
from tweet_sentiment.log_utils import get_logger
from tweet_sentiment.parallel import parallel_map
from tweet_sentiment.schemas import LabeledExample, LabeledText

LOGGER = get_logger(__name__)

TextFilter = Callable[[str], Sequence[str]]


def extract_labeled_text(record: Any, label_field: str = "label", text_field: str = "msg") -> LabeledText:
    """Read the label and text of one raw record.

    Raises:
        MissingFieldError: If either field is absent, null, mistyped, or the
            label is not one of 0/1.
    """

    if not isinstance(record, Mapping):
        raise MissingFieldError(label_field, None, reason=f"unreadable in a {type(record).__name__}")

    raw_label = record.get(label_field)
    if raw_label is None or (isinstance(raw_label, float) and math.isnan(raw_label)):
        raise MissingFieldError(label_field, record)
    if isinstance(raw_label, bool) or not isinstance(raw_label, numbers.Real):
        raise MissingFieldError(label_field, record, reason="mistyped")
    try:
        label = Label.from_value(raw_label)
    except UnknownLabelError:
        raise MissingFieldError(label_field, record, reason=f"not 0/1 ({raw_label!r})") from None

    text = record.get(text_field)
    if text is None:
        raise MissingFieldError(text_field, record)
    if not isinstance(text, str):
        raise MissingFieldError(text_field, record, reason="mistyped")

    return LabeledText(label=label, text=text)


@dataclass
class Extraction:
    texts: List[LabeledText]
    dropped: int = 0


def extract_records(
    raw_records: Iterable[Any],
    label_field: str = "label",
    text_field: str = "msg",
    missing_field_policy: str = "drop",
) -> Extraction:
    """Extract labeled texts, dropping and counting malformed records.

    With ``missing_field_policy="raise"`` the first malformed record aborts
    the extraction with :class:`MissingFieldError`.
    """

    if missing_field_policy not in VALID_MISSING_FIELD_POLICIES:
        raise ValueError(
            f"Invalid missing_field_policy '{missing_field_policy}'. "
            f"Must be one of {sorted(VALID_MISSING_FIELD_POLICIES)}"
        )

    texts: List[LabeledText] = []
    dropped = 0
    for position, record in enumerate(raw_records):
        try:
            texts.append(extract_labeled_text(record, label_field, text_field))
        except MissingFieldError as exc:
            if missing_field_policy == "raise":
                raise
            dropped += 1
            LOGGER.warning("Dropping record %s: %s", position, exc)

    if dropped:
        LOGGER.warning("Dropped %s malformed record(s) out of %s", dropped, len(texts) + dropped)
    return Extraction(texts=texts, dropped=dropped)


@dataclass
class BuildResult:
    training: List[LabeledExample]
    validation: List[LabeledExample]
    dropped: int = 0

    def __iter__(self):
        # Unpacks like the plain ``(training, validation)`` pair.
        yield self.training
        yield self.validation


class TrainingSetBuilder:
    """Compose extraction, filtering, hashing and splitting.

    Args:
        config: Field names, hashing dimension, split ratios, seed and the
            policy for malformed records.
        text_filter: Turns a tweet text into tokens. Defaults to
            :func:`filter_tweet`.
    """

    def __init__(self, config: Optional[BuildConfig] = None, text_filter: Optional[TextFilter] = None):
        self.config = config or BuildConfig()
        self.config.validate()
        self.text_filter = text_filter or filter_tweet
        self.hasher = FeatureHasher(self.config.num_features)
        self.splitter = DatasetSplitter(seed=self.config.seed)

    def extract(self, raw_records: Iterable[Any]) -> Extraction:
        return extract_records(
            raw_records,
            label_field=self.config.label_field,
            text_field=self.config.text_field,
            missing_field_policy=self.config.missing_field_policy,
        )

    def to_example(self, labeled: LabeledText) -> LabeledExample:
        features = self.hasher.transform(self.text_filter(labeled.text))
        return LabeledExample(label=labeled.label.numeric, features=features, text=labeled.text)

    def build_with_report(self, raw_records: Iterable[Any]) -> BuildResult:
        extraction = self.extract(raw_records)
        examples = parallel_map(
            self.to_example,
            extraction.texts,
            num_workers=self.config.num_workers,
            progress=self.config.progress,
            desc="Hashing tweets",
        )
        # Content keys: membership ignores input order and duplicates share a subset.
        training, validation = self.splitter.split(
            examples,
            self.config.ratios,
            key=lambda example: f"{example.label}\t{example.text}",
        )

        LOGGER.info(
            "Built %s training and %s validation examples (%s dropped)",
            len(training),
            len(validation),
            extraction.dropped,
        )
        return BuildResult(training=training, validation=validation, dropped=extraction.dropped)

    def build(self, raw_records: Iterable[Any]) -> Tuple[List[LabeledExample], List[LabeledExample]]:
        result = self.build_with_report(raw_records)
        return result.training, result.validation


__all__ = [
    "BuildResult",
    "Extraction",
    "TrainingSetBuilder",
    "extract_labeled_text",
]
