"""Configuration helpers for dataset building and evaluation.

Each entry point reads only its own block (``build`` or ``evaluate``) from
the YAML file passed via ``--config``. Unknown keys are kept in
``extra_fields`` instead of failing the run.
"""
from __future__ import annotations

import argparse
import importlib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from tweet_sentiment.features.hashing import DEFAULT_NUM_FEATURES

VALID_MISSING_FIELD_POLICIES = {"drop", "raise"}
VALID_FAILURE_POLICIES = {"drop", "count_as_wrong"}
VALID_SINK_FORMATS = {"jsonl", "parquet"}
VALID_LOG_FORMATS = {"rich", "plain"}


def _read_block(config_path: str, block: str) -> Dict[str, Any]:
    """Return the ``block`` mapping of a YAML config; an empty block reads as ``{}``."""

    path = Path(config_path).expanduser()
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found at {path}")

    with path.open("r", encoding="utf-8") as fh:
        document = yaml.safe_load(fh)

    if not isinstance(document, dict) or block not in document:
        raise ValueError(f"{path} has no '{block}:' section")

    section = document[block]
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"'{block}:' in {path} must be a mapping, not {type(section).__name__}")
    return section


def _split_known_fields(cls, data: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    known_fields = {f.name for f in fields(cls)}
    init_kwargs: Dict[str, Any] = {}
    extras: Dict[str, Any] = {}
    for key, value in data.items():
        if key in known_fields and key != "extra_fields":
            init_kwargs[key] = value
        else:
            extras[key] = value
    return init_kwargs, extras


@dataclass
class BuildConfig:
    """Configuration for turning labeled tweets into training/validation sets."""

    input_path: str = ""
    train_output: Optional[str] = None
    validation_output: Optional[str] = None
    label_field: str = "label"
    text_field: str = "msg"
    num_features: int = DEFAULT_NUM_FEATURES
    ratios: List[float] = field(default_factory=lambda: [0.85, 0.15])
    seed: Optional[int] = None
    missing_field_policy: str = "drop"
    text_filter: Optional[str] = None
    num_workers: int = 1
    progress: bool = True
    log_level: str = "INFO"
    log_format: str = "rich"
    extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    def validate(self) -> None:
        if isinstance(self.num_features, bool) or not isinstance(self.num_features, int) or self.num_features < 1:
            raise ValueError("num_features must be a positive integer")
        if len(self.ratios) != 2:
            raise ValueError("ratios must hold exactly two values: training and validation")
        if any(float(ratio) <= 0 for ratio in self.ratios):
            raise ValueError("ratios must be positive")
        if abs(sum(float(ratio) for ratio in self.ratios) - 1.0) > 1e-6:
            raise ValueError("ratios must sum to 1.0")
        if self.seed is not None and self.seed < 0:
            raise ValueError("seed must be non-negative or null")
        if self.missing_field_policy not in VALID_MISSING_FIELD_POLICIES:
            raise ValueError(
                f"Invalid missing_field_policy '{self.missing_field_policy}'. "
                f"Must be one of {sorted(VALID_MISSING_FIELD_POLICIES)}"
            )
        if not self.label_field:
            raise ValueError("label_field must be provided")
        if not self.text_field:
            raise ValueError("text_field must be provided")
        if self.num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        if self.log_format not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(VALID_LOG_FORMATS)}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_yaml(cls, config_path: str) -> "BuildConfig":
        data = _read_block(config_path, "build")
        init_kwargs, extras = _split_known_fields(cls, data)
        cfg = cls(**init_kwargs, extra_fields=extras)
        if not cfg.input_path:
            raise ValueError("input_path must be provided")
        cfg.validate()
        return cfg


@dataclass
class EvaluateConfig:
    """Configuration for evaluating deployed models against a validation set."""

    validation_path: str = ""
    models: List[str] = field(default_factory=list)
    service_urls: Dict[str, str] = field(default_factory=dict)
    label_field: str = "label"
    text_field: str = "msg"
    timeout_seconds: float = 10.0
    failure_policy: str = "drop"
    missing_field_policy: str = "drop"
    with_correction: bool = False
    normalizer: Optional[str] = None
    persist_evaluation: bool = False
    output_dir: str = "reports"
    sink_format: str = "jsonl"
    num_workers: int = 4
    chunk_size: int = 1000
    progress: bool = True
    log_level: str = "INFO"
    log_format: str = "rich"
    extra_fields: Dict[str, Any] = field(default_factory=dict, repr=False)

    def validate(self) -> None:
        if not self.models:
            raise ValueError("models must list at least one model name")
        missing = [name for name in self.models if name not in self.service_urls]
        if missing:
            raise ValueError(f"service_urls has no entry for models {missing}")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.failure_policy not in VALID_FAILURE_POLICIES:
            raise ValueError(
                f"Invalid failure_policy '{self.failure_policy}'. "
                f"Must be one of {sorted(VALID_FAILURE_POLICIES)}"
            )
        if self.missing_field_policy not in VALID_MISSING_FIELD_POLICIES:
            raise ValueError(
                f"Invalid missing_field_policy '{self.missing_field_policy}'. "
                f"Must be one of {sorted(VALID_MISSING_FIELD_POLICIES)}"
            )
        if self.sink_format not in VALID_SINK_FORMATS:
            raise ValueError(f"sink_format must be one of {sorted(VALID_SINK_FORMATS)}")
        if self.num_workers < 1:
            raise ValueError("num_workers must be at least 1")
        if self.chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if self.log_format not in VALID_LOG_FORMATS:
            raise ValueError(f"log_format must be one of {sorted(VALID_LOG_FORMATS)}")
        self.log_level = self.log_level.upper()

    @classmethod
    def from_yaml(cls, config_path: str) -> "EvaluateConfig":
        data = _read_block(config_path, "evaluate")
        init_kwargs, extras = _split_known_fields(cls, data)
        cfg = cls(**init_kwargs, extra_fields=extras)
        if not cfg.validation_path:
            raise ValueError("validation_path must be provided")
        cfg.validate()
        return cfg


def load_callable(path: Optional[str], default: Callable) -> Callable:
    """Resolve a ``"package.module:function"`` reference, or return ``default``."""

    if not path:
        return default

    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:function', got '{path}'")

    module = importlib.import_module(module_name)
    fn = getattr(module, attr, None)
    if fn is None or not callable(fn):
        raise ValueError(f"'{path}' does not name a callable")
    return fn


def parse_config_path(argv: Optional[Any] = None) -> argparse.Namespace:
    """Parse a single ``--config`` argument from the CLI.

    Args:
        argv: Optional custom argv for testing.

    Returns:
        The argparse namespace containing the ``config`` attribute.
    """

    parser = argparse.ArgumentParser(description="Tweet sentiment workflow configuration")
    parser.add_argument("--config", required=True, help="Path to YAML configuration file")
    return parser.parse_args(argv)


__all__ = [
    "BuildConfig",
    "EvaluateConfig",
    "load_callable",
    "parse_config_path",
]
