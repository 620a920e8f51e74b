"""CSV ingestion for long-form series tables."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

import pandas as pd


def _detect_delimiter(path: Path) -> str:
    """Detect delimiter from CSV sample. Fallback to comma."""
    with path.open("r", encoding="utf-8", errors="ignore", newline="") as handle:
        sample = handle.read(8192)

    if not sample.strip():
        return ","

    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t|")
    except csv.Error:
        return ","
    return dialect.delimiter


def read_series_csv(path: Path, required_columns: Sequence[str] = ()) -> pd.DataFrame:
    """Read a long-form CSV (one row per series/key/value) into a dataframe.

    Every column is read as text so keys like ``"01"`` and ``"1"`` stay
    distinct stacking categories; numeric conversion is left to the caller.
    """
    if not path.exists():
        raise FileNotFoundError(f"CSV does not exist: {path}")
    if not path.is_file():
        raise ValueError(f"CSV path is not a file: {path}")

    try:
        delimiter = _detect_delimiter(path)
        frame = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=False)
    except Exception as exc:
        raise RuntimeError(f"Failed to read CSV: {path}") from exc

    missing = [column for column in required_columns if column not in frame.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}")
    return frame
