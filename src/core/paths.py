"""Path utilities for input discovery and run output layout."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SYSTEM_NAMES = {"thumbs.db", "desktop.ini"}
SYSTEM_DIRS = {"__macosx"}


@dataclass(frozen=True)
class StackOutputPaths:
    """Output locations for one stacked input file."""

    offsets_csv: Path
    report_json: Path


def ensure_within_root(path: Path, root: Path) -> None:
    """Ensure the given path resolves under the provided root path."""
    resolved_path = path.resolve()
    resolved_root = root.resolve()
    try:
        resolved_path.relative_to(resolved_root)
    except ValueError as exc:
        raise ValueError(f"Path escapes root: {resolved_path} (root: {resolved_root})") from exc


def discover_csv_files(input_root: Path, pattern: str = "**/*.csv") -> list[Path]:
    """Discover CSV files recursively from the input root, sorted."""
    if not input_root.exists():
        raise FileNotFoundError(f"Input root does not exist: {input_root}")
    if not input_root.is_dir():
        raise NotADirectoryError(f"Input root is not a directory: {input_root}")

    files = [
        path
        for path in input_root.glob(pattern)
        if path.is_file() and path.suffix.lower() == ".csv" and not _is_hidden_or_system(path, input_root)
    ]
    return sorted(files)


def _is_hidden_or_system(path: Path, input_root: Path) -> bool:
    rel_parts = path.relative_to(input_root).parts
    for part in rel_parts:
        lower_part = part.lower()
        if part.startswith(".") or lower_part in SYSTEM_DIRS or lower_part.startswith(tuple(SYSTEM_NAMES)):
            return True
    return False


def build_output_paths(src_csv: Path, input_root: Path, run_root: Path) -> StackOutputPaths:
    """Mirror ``src_csv`` under ``run_root`` as an offsets table and a per-file report."""
    rel_path = src_csv.resolve().relative_to(input_root.resolve())
    offsets_root = run_root / "offsets"
    reports_root = run_root / "reports" / "per_file"

    offsets_csv = (offsets_root / rel_path).with_suffix(".offsets.csv")
    report_json = (reports_root / rel_path).with_suffix(".json")
    ensure_within_root(offsets_csv, offsets_root)
    ensure_within_root(report_json, reports_root)
    return StackOutputPaths(offsets_csv=offsets_csv, report_json=report_json)
