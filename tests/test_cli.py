from __future__ import annotations

import json
import math

import pandas as pd
import yaml

from tests.conftest import KeywordClassifier
from tweet_sentiment import build_dataset, evaluate
from tweet_sentiment.config import BuildConfig, EvaluateConfig
from tweet_sentiment.errors import ClassificationTimeoutError
from tweet_sentiment.evaluation.tally import AccuracyTally
from tweet_sentiment.reporting import print_summary, report_name


def _write_jsonl(path, rows):
    path.write_text("\n".join(json.dumps(row) for row in rows) + "\n", encoding="utf-8")


def test_build_dataset_writes_parquet_splits(tmp_path, raw_tweets):
    _write_jsonl(tmp_path / "tweets.jsonl", raw_tweets + [{"msg": "no label"}])
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        yaml.safe_dump(
            {
                "build": {
                    "input_path": str(tmp_path / "tweets.jsonl"),
                    "train_output": str(tmp_path / "out" / "train.parquet"),
                    "validation_output": str(tmp_path / "out" / "validation.parquet"),
                    "num_features": 256,
                    "seed": 4,
                    "progress": False,
                }
            }
        ),
        encoding="utf-8",
    )

    build_dataset.main(["--config", str(config_path)])

    train = pd.read_parquet(tmp_path / "out" / "train.parquet")
    validation = pd.read_parquet(tmp_path / "out" / "validation.parquet")
    assert len(train) + len(validation) == len(raw_tweets)
    assert set(train.columns) == {"label", "dimension", "indices", "values", "text"}
    assert (train["dimension"] == 256).all()


def _evaluate_config(tmp_path, **overrides) -> EvaluateConfig:
    rows = [
        {"label": 1, "msg": "I love this"},
        {"label": 0, "msg": "I hate this"},
        {"label": 1, "msg": "great day"},
        {"label": 0, "msg": "bad day"},
        {"label": 5, "msg": "malformed"},
    ]
    _write_jsonl(tmp_path / "validation.jsonl", rows)
    values = {
        "validation_path": str(tmp_path / "validation.jsonl"),
        "models": ["GradientBoosting"],
        "service_urls": {"GradientBoosting": "http://localhost:9090"},
        "output_dir": str(tmp_path / "reports"),
        "persist_evaluation": True,
        "progress": False,
        "num_workers": 2,
    }
    values.update(overrides)
    cfg = EvaluateConfig(**values)
    cfg.validate()
    return cfg


def test_evaluate_reports_accuracy_and_dropped_records(tmp_path):
    cfg = _evaluate_config(tmp_path)
    classify = KeywordClassifier(failing=("great day",), error=ClassificationTimeoutError("slow"))

    outcome = evaluate.run(cfg, classify=classify)

    report = outcome.reports["GradientBoosting"]
    assert outcome.malformed == 1
    assert report.tally == AccuracyTally(1, 1, 2, 2)
    assert report.dropped == 1

    lines = (tmp_path / "reports" / "gradientboosting_performance.jsonl").read_text(encoding="utf-8").splitlines()
    rows = [json.loads(line) for line in lines]
    assert len(rows) == 3
    assert {row["actual_label"] for row in rows} == {0.0, 1.0}

    summary_lines = (tmp_path / "reports" / "gradientboosting_summary.jsonl").read_text(encoding="utf-8").splitlines()
    assert len(summary_lines) == 1
    summary = json.loads(summary_lines[0])
    assert summary["model"] == "GradientBoosting"
    assert summary["dropped"] == 1
    assert summary["data_size"] == 3


def test_evaluate_with_correction_writes_comparisons(tmp_path):
    cfg = _evaluate_config(tmp_path, with_correction=True, sink_format="parquet")

    outcome = evaluate.run(cfg, classify=KeywordClassifier(), normalize=str.lower)

    summary = outcome.corrections["GradientBoosting"]
    assert summary["data_size"] == 4
    assert summary["prediction_changed"] == 0
    df = pd.read_parquet(tmp_path / "reports" / "gradientboosting_correction.parquet")
    assert list(df["after_tweet"]) == ["i love this", "i hate this", "great day", "bad day"]
    assert (df["before_label"] == df["after_label"]).all()


def test_report_names_are_file_safe():
    assert report_name("Gradient Boosting/v2", "performance") == "gradient_boosting_v2_performance"


def test_print_summary_marks_undefined_values():
    from rich.console import Console

    console = Console(record=True, width=80)
    print_summary({"sad_accuracy": math.nan, "data_size": 3}, title="t", console=console)

    assert "undefined" in console.export_text()
