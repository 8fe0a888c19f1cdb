"""I/O utilities for labeled tweet datasets and evaluation reports."""
from __future__ import annotations

import json
import os
import uuid
from typing import Any, Dict, Iterable, List

import pandas as pd

SUPPORTED_SUFFIXES = (".json", ".jsonl", ".parquet", ".csv")


def list_data_files(input_dir: str) -> List[str]:
    """Return sorted dataset files from a directory."""

    if not os.path.isdir(input_dir):
        raise FileNotFoundError(f"Input directory not found: {input_dir}")

    return [
        os.path.join(input_dir, name)
        for name in sorted(os.listdir(input_dir))
        if name.lower().endswith(SUPPORTED_SUFFIXES)
    ]


def _read_json(path: str) -> List[Dict[str, Any]]:
    with open(path, "r", encoding="utf-8") as fh:
        content = fh.read()

    stripped = content.lstrip()
    if stripped.startswith("["):
        data = json.loads(stripped)
        if not isinstance(data, list):
            raise ValueError(f"Expected a JSON array in {path}")
        return data

    records: List[Dict[str, Any]] = []
    for line_number, line in enumerate(content.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON on line {line_number} of {path}: {exc}") from exc
    return records


def _read_frame(path: str) -> List[Dict[str, Any]]:
    if path.lower().endswith(".parquet"):
        df = pd.read_parquet(path)
    else:
        df = pd.read_csv(path)
    return df.to_dict(orient="records")


def load_records(path: str) -> List[Dict[str, Any]]:
    """Load raw records from a file or a directory of files.

    JSON files may hold one object per line or a single array. Parquet and
    CSV files are read through pandas. Records are returned as plain dicts;
    field validation happens later, when labels and texts are extracted.
    """

    if os.path.isdir(path):
        files = list_data_files(path)
        if not files:
            raise FileNotFoundError(f"No dataset files found in {path}")
    elif os.path.exists(path):
        files = [path]
    else:
        raise FileNotFoundError(f"Dataset not found: {path}")

    records: List[Dict[str, Any]] = []
    for file_path in files:
        lowered = file_path.lower()
        if lowered.endswith((".json", ".jsonl")):
            records.extend(_read_json(file_path))
        elif lowered.endswith((".parquet", ".csv")):
            records.extend(_read_frame(file_path))
        else:
            raise ValueError(f"Unsupported dataset format: {file_path}")

    return records


def _temp_path(output_path: str, suffix: str) -> str:
    directory = os.path.dirname(output_path) or "."
    os.makedirs(directory, exist_ok=True)
    return os.path.join(directory, f".{uuid.uuid4().hex}{suffix}.tmp")


def _discard(temp_path: str) -> None:
    if os.path.exists(temp_path):
        os.remove(temp_path)


def write_parquet_atomic(df: pd.DataFrame, output_path: str) -> None:
    """Write Parquet atomically by swapping a temporary file into place."""

    temp_path = _temp_path(output_path, ".parquet")
    try:
        df.to_parquet(temp_path, index=False)
        os.replace(temp_path, output_path)
    except BaseException:
        _discard(temp_path)
        raise


def write_jsonl_atomic(rows: Iterable[Dict[str, Any]], output_path: str) -> int:
    """Write rows as JSON lines atomically and return the number written."""

    temp_path = _temp_path(output_path, ".jsonl")
    count = 0
    try:
        with open(temp_path, "w", encoding="utf-8") as fh:
            for row in rows:
                fh.write(json.dumps(row, ensure_ascii=False))
                fh.write("\n")
                count += 1
        os.replace(temp_path, output_path)
    except BaseException:
        _discard(temp_path)
        raise
    return count


__all__ = [
    "list_data_files",
    "load_records",
    "write_parquet_atomic",
    "write_jsonl_atomic",
]
