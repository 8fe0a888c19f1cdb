"""Evaluate deployed sentiment models on a labeled validation set.

For every configured model this logs per-class accuracy and the test
error, and optionally persists the evaluated tweets. With
``with_correction`` enabled it also classifies every tweet before and
after text normalization. Configuration is read from the ``evaluate``
block of the YAML file passed via ``--config``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from tweet_sentiment.config import EvaluateConfig, load_callable, parse_config_path
from tweet_sentiment.client import HttpClassifier
from tweet_sentiment.data.builder import extract_records
from tweet_sentiment.evaluation.comparator import Classify, PredictionComparator
from tweet_sentiment.evaluation.correction import (
    CorrectionImpactEvaluator,
    Normalize,
    summarize_corrections,
)
from tweet_sentiment.evaluation.tally import AccuracyReport, aggregate
from tweet_sentiment.io import load_records
from tweet_sentiment.log_utils import get_logger, setup_logging
from tweet_sentiment.reporting import ReportSink, make_sink, print_summary, report_name
from tweet_sentiment.schemas import LabeledText

LOGGER = get_logger(__name__)


def identity(text: str) -> str:
    return text


@dataclass
class EvaluationOutcome:
    reports: Dict[str, AccuracyReport] = field(default_factory=dict)
    corrections: Dict[str, dict] = field(default_factory=dict)
    malformed: int = 0


def evaluate_model(
    model_name: str,
    records: Sequence[LabeledText],
    classify: Classify,
    cfg: EvaluateConfig,
    sink: Optional[ReportSink] = None,
) -> AccuracyReport:
    comparator = PredictionComparator(model_name, classify, failure_policy=cfg.failure_policy)
    comparison = comparator.compare_all(records, num_workers=cfg.num_workers, progress=cfg.progress)
    tally = aggregate(comparison.records, num_workers=cfg.num_workers, chunk_size=cfg.chunk_size)
    report = AccuracyReport(model_name=model_name, tally=tally, dropped=comparison.dropped)
    report.log(LOGGER)

    if sink is not None:
        sink.write(report_name(model_name, "performance"), (record.to_dict() for record in comparison.records))
        sink.write(report_name(model_name, "summary"), [report.summary()])

    return report


def evaluate_correction(
    model_name: str,
    records: Sequence[LabeledText],
    classify: Classify,
    normalize: Normalize,
    cfg: EvaluateConfig,
    sink: Optional[ReportSink] = None,
) -> dict:
    evaluator = CorrectionImpactEvaluator(model_name, classify, normalize)
    corrections = evaluator.evaluate_all(records, num_workers=cfg.num_workers, progress=cfg.progress)
    summary = summarize_corrections(corrections.records, dropped=corrections.dropped)
    LOGGER.info("Correction impact for %s: %s", model_name, summary)

    if sink is not None:
        sink.write(report_name(model_name, "correction"), (record.to_dict() for record in corrections.records))

    return summary


def load_validation_texts(cfg: EvaluateConfig) -> tuple[List[LabeledText], int]:
    extraction = extract_records(
        load_records(cfg.validation_path),
        label_field=cfg.label_field,
        text_field=cfg.text_field,
        missing_field_policy=cfg.missing_field_policy,
    )
    return extraction.texts, extraction.dropped


def run(
    cfg: EvaluateConfig,
    classify: Optional[Classify] = None,
    normalize: Optional[Normalize] = None,
) -> EvaluationOutcome:
    setup_logging(cfg.log_level, cfg.log_format)
    LOGGER.info("Loaded config: %s", cfg)

    texts, malformed = load_validation_texts(cfg)
    LOGGER.info("Evaluating %s validation tweet(s) (%s malformed)", len(texts), malformed)

    sink = make_sink(cfg.sink_format, cfg.output_dir) if cfg.persist_evaluation else None
    normalize = normalize or load_callable(cfg.normalizer, identity)
    outcome = EvaluationOutcome(malformed=malformed)

    http_client: Optional[HttpClassifier] = None
    if classify is None:
        http_client = HttpClassifier(cfg.service_urls, timeout=cfg.timeout_seconds)
        classify = http_client

    try:
        for model_name in cfg.models:
            report = evaluate_model(model_name, texts, classify, cfg, sink)
            outcome.reports[model_name] = report
            if cfg.progress:
                print_summary(report.summary(), title=f"{model_name} evaluation")

            if cfg.with_correction:
                # Correction records are persisted regardless of persist_evaluation.
                correction_sink = sink or make_sink(cfg.sink_format, cfg.output_dir)
                summary = evaluate_correction(model_name, texts, classify, normalize, cfg, correction_sink)
                outcome.corrections[model_name] = summary
                if cfg.progress:
                    print_summary(summary, title=f"{model_name} correction impact")
    finally:
        if http_client is not None:
            http_client.close()

    return outcome


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_config_path(argv)
    cfg = EvaluateConfig.from_yaml(args.config)
    run(cfg)


if __name__ == "__main__":
    main()
