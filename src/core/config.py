"""Stacking pipeline configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from stacking.frames import SEGMENT_COLUMNS

VALID_ORIENTATIONS: tuple[str, ...] = ("vertical", "horizontal")


@dataclass(frozen=True)
class StackingConfig:
    """Batch stacking configuration values."""

    input_root: Path
    runs_root: Path
    csv_glob: str
    series_column: str
    key_column: str
    value_column: str
    orientation: str
    series_order: tuple[str, ...]
    extent_filter_column: str | None
    fail_on_duplicate_keys: bool

    @property
    def required_columns(self) -> tuple[str, ...]:
        """Columns every input CSV must provide."""
        columns = [self.series_column, self.key_column, self.value_column]
        if self.extent_filter_column:
            columns.append(self.extent_filter_column)
        return tuple(columns)


def _resolve_path(value: str, base_dir: Path) -> Path:
    path = Path(value)
    return path if path.is_absolute() else (base_dir / path).resolve()


def _get_required(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise KeyError(f"Missing required config key: {key}")
    return data[key]


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def load_config(path: Path) -> StackingConfig:
    """Load and validate stacking config from YAML."""
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    base_dir = path.resolve().parent

    cfg = StackingConfig(
        input_root=_resolve_path(str(_get_required(raw, "input_root")), base_dir),
        runs_root=_resolve_path(str(_get_required(raw, "runs_root")), base_dir),
        csv_glob=str(raw.get("csv_glob", "**/*.csv")),
        series_column=str(raw.get("series_column", "series")),
        key_column=str(raw.get("key_column", "key")),
        value_column=str(raw.get("value_column", "value")),
        orientation=str(raw.get("orientation", "vertical")).strip().lower(),
        series_order=tuple(str(item) for item in (raw.get("series_order") or [])),
        extent_filter_column=_optional_str(raw.get("extent_filter_column")),
        fail_on_duplicate_keys=bool(raw.get("fail_on_duplicate_keys", False)),
    )
    validate_config(cfg)
    return cfg


def validate_config(cfg: StackingConfig) -> None:
    """Validate config fields and semantic constraints."""
    if not cfg.input_root.exists():
        raise FileNotFoundError(f"input_root does not exist: {cfg.input_root}")
    if not cfg.input_root.is_dir():
        raise NotADirectoryError(f"input_root is not a directory: {cfg.input_root}")
    if not cfg.csv_glob.strip():
        raise ValueError("csv_glob cannot be empty.")
    if cfg.orientation not in VALID_ORIENTATIONS:
        raise ValueError(f"orientation must be one of {VALID_ORIENTATIONS}, got: {cfg.orientation!r}")

    columns = (cfg.series_column, cfg.key_column, cfg.value_column)
    if any(not column.strip() for column in columns):
        raise ValueError("series_column, key_column and value_column cannot be empty.")
    if len(set(columns)) != len(columns):
        raise ValueError(f"series, key and value columns must be distinct: {columns}")
    if cfg.series_column in SEGMENT_COLUMNS:
        raise ValueError(f"series_column cannot be one of the output columns {SEGMENT_COLUMNS}: {cfg.series_column!r}")
    if len(set(cfg.series_order)) != len(cfg.series_order):
        raise ValueError("series_order contains duplicate series names.")
