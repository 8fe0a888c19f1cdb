from __future__ import annotations

import pytest
import yaml

from tweet_sentiment.config import BuildConfig, EvaluateConfig, load_callable, parse_config_path
from tweet_sentiment.features.text_filter import filter_tweet


def _write(tmp_path, data) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


def test_build_block_is_loaded_with_extras(tmp_path):
    path = _write(
        tmp_path,
        {"build": {"input_path": "tweets.jsonl", "num_features": 1024, "seed": 1, "comment": "x"}},
    )

    cfg = BuildConfig.from_yaml(path)

    assert cfg.input_path == "tweets.jsonl"
    assert cfg.num_features == 1024
    assert cfg.ratios == [0.85, 0.15]
    assert cfg.text_field == "msg"
    assert cfg.extra_fields == {"comment": "x"}


def test_missing_block_is_an_error(tmp_path):
    path = _write(tmp_path, {"evaluate": {}})

    with pytest.raises(ValueError, match="build"):
        BuildConfig.from_yaml(path)


def test_missing_config_file_is_reported(tmp_path):
    with pytest.raises(FileNotFoundError):
        BuildConfig.from_yaml(str(tmp_path / "absent.yaml"))


def test_build_requires_input_path(tmp_path):
    with pytest.raises(ValueError):
        BuildConfig.from_yaml(_write(tmp_path, {"build": {"num_features": 10}}))


def test_evaluate_block_is_validated(tmp_path):
    block = {
        "validation_path": "validation.jsonl",
        "models": ["GradientBoosting"],
        "service_urls": {"GradientBoosting": "http://localhost:9090"},
        "log_level": "debug",
    }
    cfg = EvaluateConfig.from_yaml(_write(tmp_path, {"evaluate": block}))

    assert cfg.failure_policy == "drop"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
    "overrides",
    [
        {"models": []},
        {"service_urls": {}},
        {"failure_policy": "retry"},
        {"timeout_seconds": 0},
        {"sink_format": "elasticsearch"},
        {"chunk_size": 0},
        {"log_format": "json"},
    ],
)
def test_invalid_evaluate_config(overrides):
    values = {
        "validation_path": "v.jsonl",
        "models": ["m"],
        "service_urls": {"m": "http://localhost"},
    }
    values.update(overrides)

    with pytest.raises(ValueError):
        EvaluateConfig(**values).validate()


def test_load_callable_resolves_import_paths():
    assert load_callable("tweet_sentiment.features.text_filter:filter_tweet", str) is filter_tweet
    assert load_callable(None, str) is str


@pytest.mark.parametrize("path", ["no_colon", "tweet_sentiment.features.text_filter:missing", ":x"])
def test_load_callable_rejects_bad_paths(path):
    with pytest.raises(ValueError):
        load_callable(path, str)


def test_parse_config_path():
    assert parse_config_path(["--config", "c.yaml"]).config == "c.yaml"
