"""Adapters between long-form pandas tables and stacking datasets."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import pandas as pd

from stacking.dataset import Dataset
from stacking.segments import StackSegment

SEGMENT_COLUMNS: tuple[str, ...] = ("key", "index", "value", "offset", "start", "end")


def datasets_from_frame(
    frame: pd.DataFrame,
    series_column: str,
    series_order: Sequence[str] | None = None,
) -> list[Dataset]:
    """Split ``frame`` into one dataset per series, bottom layer first.

    Without ``series_order`` series stack in order of first appearance. With
    it, the listed series come first in that order and any unlisted series
    follow in appearance order. Records are the rows as plain dicts.
    """
    if series_column not in frame.columns:
        raise ValueError(f"Series column not found: {series_column}")

    names = [str(name) for name in pd.unique(frame[series_column].astype(str))]
    if series_order:
        unknown = [name for name in series_order if name not in names]
        if unknown:
            raise ValueError(f"series_order names missing from data: {unknown}")
        names = list(series_order) + [name for name in names if name not in series_order]

    labels = frame[series_column].astype(str)
    datasets: list[Dataset] = []
    for name in names:
        rows = frame.loc[labels == name].to_dict(orient="records")
        datasets.append(Dataset(data=tuple(rows), metadata={"series": name}))
    return datasets


def series_name(dataset: Dataset) -> Any:
    """Return the series label stored on a dataset built by ``datasets_from_frame``."""
    metadata = dataset.metadata
    if isinstance(metadata, Mapping) and "series" in metadata:
        return metadata["series"]
    return None


def segments_to_frame(
    segments: Mapping[Dataset, Sequence[StackSegment]],
    series_column: str = "series",
) -> pd.DataFrame:
    """Flatten segments into a tidy table, one row per record."""
    if series_column in SEGMENT_COLUMNS:
        raise ValueError(f"series_column {series_column!r} clashes with segment columns {SEGMENT_COLUMNS}")

    rows = [
        {
            series_column: series_name(dataset),
            "key": segment.key,
            "index": segment.index,
            "value": segment.value,
            "offset": segment.offset,
            "start": segment.start,
            "end": segment.end,
        }
        for dataset, dataset_segments in segments.items()
        for segment in dataset_segments
    ]
    return pd.DataFrame(rows, columns=[series_column, *SEGMENT_COLUMNS])
