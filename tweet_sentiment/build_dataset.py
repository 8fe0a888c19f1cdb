"""Build hashed training and validation sets from labeled tweets.

Configuration is read from the ``build`` block of the YAML file passed via
``--config``.
"""
from __future__ import annotations

from typing import List, Optional, Sequence

import pandas as pd

from tweet_sentiment.config import BuildConfig, load_callable, parse_config_path
from tweet_sentiment.data.builder import BuildResult, TrainingSetBuilder
from tweet_sentiment.features.text_filter import filter_tweet
from tweet_sentiment.io import load_records, write_parquet_atomic
from tweet_sentiment.log_utils import get_logger, setup_logging
from tweet_sentiment.schemas import LabeledExample

LOGGER = get_logger(__name__)


def examples_to_frame(examples: List[LabeledExample]) -> pd.DataFrame:
    """Flatten examples into columns a learner can rebuild sparse rows from."""

    return pd.DataFrame(
        {
            "label": [example.label for example in examples],
            "dimension": [example.features.dimension for example in examples],
            "indices": [example.features.indices for example in examples],
            "values": [example.features.values for example in examples],
            "text": [example.text for example in examples],
        }
    )


def run(cfg: BuildConfig) -> BuildResult:
    setup_logging(cfg.log_level, cfg.log_format)
    LOGGER.info("Loaded config: %s", cfg)

    records = load_records(cfg.input_path)
    LOGGER.info("Loaded %s raw record(s) from %s", len(records), cfg.input_path)

    builder = TrainingSetBuilder(cfg, text_filter=load_callable(cfg.text_filter, filter_tweet))
    result = builder.build_with_report(records)

    if cfg.train_output:
        write_parquet_atomic(examples_to_frame(result.training), cfg.train_output)
        LOGGER.info("Wrote training set to %s", cfg.train_output)
    if cfg.validation_output:
        write_parquet_atomic(examples_to_frame(result.validation), cfg.validation_output)
        LOGGER.info("Wrote validation set to %s", cfg.validation_output)

    return result


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_config_path(argv)
    cfg = BuildConfig.from_yaml(args.config)
    run(cfg)


if __name__ == "__main__":
    main()
