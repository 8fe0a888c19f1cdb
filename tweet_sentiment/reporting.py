"""Reporting sinks and console summaries for evaluation results."""
from __future__ import annotations

import math
import os
import re
from typing import Any, Dict, Iterable, Mapping, Optional, Protocol

import pandas as pd
from rich.console import Console
from rich.table import Table

from tweet_sentiment.io import write_jsonl_atomic, write_parquet_atomic
from tweet_sentiment.log_utils import get_logger

LOGGER = get_logger(__name__)

_UNSAFE_NAME_RE = re.compile(r"[^a-z0-9_.-]+")


class ReportSink(Protocol):
    def write(self, name: str, rows: Iterable[Mapping[str, Any]]) -> str:
        """Persist ``rows`` under ``name`` and return where they went."""


def report_name(model_name: str, kind: str) -> str:
    """Build the report name used for a model, e.g. ``gradientboosting_performance``."""

    return _UNSAFE_NAME_RE.sub("_", f"{model_name}_{kind}".lower()).strip("_")


class JsonLinesSink:
    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def write(self, name: str, rows: Iterable[Mapping[str, Any]]) -> str:
        path = os.path.join(self.output_dir, f"{name}.jsonl")
        count = write_jsonl_atomic((dict(row) for row in rows), path)
        LOGGER.info("Wrote %s row(s) to %s", count, path)
        return path


class ParquetSink:
    def __init__(self, output_dir: str):
        self.output_dir = output_dir

    def write(self, name: str, rows: Iterable[Mapping[str, Any]]) -> str:
        path = os.path.join(self.output_dir, f"{name}.parquet")
        df = pd.DataFrame([dict(row) for row in rows])
        write_parquet_atomic(df, path)
        LOGGER.info("Wrote %s row(s) to %s", len(df), path)
        return path


def make_sink(sink_format: str, output_dir: str) -> ReportSink:
    if sink_format == "jsonl":
        return JsonLinesSink(output_dir)
    if sink_format == "parquet":
        return ParquetSink(output_dir)
    raise ValueError(f"Unsupported sink format: {sink_format}")


def _format_value(value: Any) -> str:
    if isinstance(value, float):
        return "undefined" if math.isnan(value) else f"{value:.4f}"
    return str(value)


def print_summary(summary: Dict[str, Any], title: str, console: Optional[Console] = None) -> None:
    """Render a summary dict as a two-column table; NaN shows as ``undefined``."""

    console = console or Console(color_system="auto", soft_wrap=True)
    table = Table(title=title, show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    for key, value in summary.items():
        table.add_row(key, _format_value(value))
    console.print(table)


__all__ = [
    "JsonLinesSink",
    "ParquetSink",
    "ReportSink",
    "make_sink",
    "print_summary",
    "report_name",
]
