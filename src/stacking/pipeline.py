"""Batch stacking of long-form CSV files with per-file reports."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
from tqdm.auto import tqdm

from core.config import StackingConfig
from core.health import StackRunReport, add_error, finalize_report
from core.io_atomic import atomic_write_csv, atomic_write_json
from core.logging import get_logger
from core.paths import build_output_paths, discover_csv_files
from stacking.dataset import Dataset, field_accessor
from stacking.domain import domain_keys, find_duplicate_keys
from stacking.extent import RecordFilter, compute_stack_extent
from stacking.frames import datasets_from_frame, segments_to_frame, series_name
from stacking.ingest import read_series_csv
from stacking.offsets import compute_stack_offsets
from stacking.segments import compute_stack_segments, value_axis

LOGGER = get_logger(__name__)

_TRUTHY: frozenset[str] = frozenset({"1", "true", "yes", "y", "t"})


def _extent_filter(column: str) -> RecordFilter:
    def _keep(record: dict[str, Any], index: int, dataset: Dataset) -> bool:
        del index, dataset
        return str(record[column]).strip().lower() in _TRUTHY

    return _keep


def _prepare_frame(frame: pd.DataFrame, cfg: StackingConfig, report: StackRunReport) -> pd.DataFrame:
    """Convert the value column to float, recording unparseable cells."""
    out = frame.copy()
    original = out[cfg.value_column].astype(str).str.strip()
    converted = pd.to_numeric(original, errors="coerce")
    invalid = int((original.ne("") & converted.isna()).sum())
    if invalid > 0:
        LOGGER.warning("Non-numeric values detected | column=%s count=%d", cfg.value_column, invalid)
        add_error(
            report,
            stage="prepare",
            code="INVALID_NUMERIC",
            message=f"Non-numeric values in {cfg.value_column}: {invalid}",
            count=invalid,
        )
    out[cfg.value_column] = converted.astype("float64")
    return out


def stack_frame(frame: pd.DataFrame, cfg: StackingConfig, report: StackRunReport) -> pd.DataFrame:
    """Stack one long-form table and fill ``report``; returns the segments table."""
    frame = _prepare_frame(frame, cfg, report)
    datasets = datasets_from_frame(frame, cfg.series_column, cfg.series_order or None)
    key_accessor = field_accessor(cfg.key_column)
    value_accessor = field_accessor(cfg.value_column)

    report.rows_in = int(len(frame))
    report.series_count = len(datasets)
    report.series_order = [str(series_name(dataset)) for dataset in datasets]
    report.domain_key_count = len(domain_keys(datasets, key_accessor))
    report.value_axis = value_axis(cfg.orientation)

    duplicates = find_duplicate_keys(datasets, key_accessor)
    report.duplicate_keys = {str(series_name(dataset)): keys for dataset, keys in duplicates.items()}
    if duplicates:
        LOGGER.warning("Duplicate keys inside series; last row wins | series=%s", sorted(report.duplicate_keys))
        if cfg.fail_on_duplicate_keys:
            add_error(
                report,
                stage="stack",
                code="DUPLICATE_KEYS",
                message="Keys repeat inside a series.",
                duplicate_keys=report.duplicate_keys,
            )

    offsets = compute_stack_offsets(datasets, key_accessor, value_accessor)
    record_filter = _extent_filter(cfg.extent_filter_column) if cfg.extent_filter_column else None
    report.extent_min, report.extent_max = compute_stack_extent(
        datasets, key_accessor, value_accessor, offsets, record_filter
    )

    segments = compute_stack_segments(datasets, key_accessor, value_accessor, offsets)
    report.segment_count = sum(len(items) for items in segments.values())
    return segments_to_frame(segments, series_column=cfg.series_column)


def stack_file(src_csv: Path, cfg: StackingConfig, run_root: Path, dry_run: bool = False) -> StackRunReport:
    """Stack one CSV file; failures end up in the report, never raised."""
    report = StackRunReport(input_file=str(src_csv))
    paths = build_output_paths(src_csv, cfg.input_root, run_root)

    try:
        frame = read_series_csv(src_csv, cfg.required_columns)
    except (RuntimeError, ValueError, FileNotFoundError) as exc:
        add_error(report, stage="read", code="READ_FAILED", message=str(exc))
        frame = None

    segments_frame: pd.DataFrame | None = None
    if frame is not None:
        if frame.empty:
            add_error(report, stage="read", code="EMPTY_INPUT", message="CSV has no data rows.")
        else:
            try:
                segments_frame = stack_frame(frame, cfg, report)
            except (KeyError, ValueError) as exc:
                add_error(report, stage="stack", code="STACK_FAILED", message=str(exc))

    finalize_report(report)

    if report.status == "success" and segments_frame is not None and not dry_run:
        try:
            atomic_write_csv(segments_frame, paths.offsets_csv)
            report.output_file = str(paths.offsets_csv)
        except RuntimeError as exc:
            add_error(report, stage="write", code="CSV_WRITE_FAILED", message=str(exc))
            finalize_report(report)

    if not dry_run:
        atomic_write_json(report.to_dict(), paths.report_json)

    return report


def stack_all(cfg: StackingConfig, run_root: Path, dry_run: bool = False) -> list[StackRunReport]:
    """Run stacking for every discovered CSV file."""
    csv_files = discover_csv_files(cfg.input_root, cfg.csv_glob)
    LOGGER.info("Discovered CSV files | count=%d", len(csv_files))

    reports: list[StackRunReport] = []
    for src_csv in tqdm(csv_files, desc="Stacking CSV", unit="file"):
        report = stack_file(src_csv, cfg=cfg, run_root=run_root, dry_run=dry_run)
        reports.append(report)
        LOGGER.info(
            "Processed file | file=%s status=%s series=%d keys=%d extent=(%s, %s)",
            src_csv,
            report.status,
            report.series_count,
            report.domain_key_count,
            report.extent_min,
            report.extent_max,
        )

    return reports
