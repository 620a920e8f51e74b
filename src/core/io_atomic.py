"""Atomic writers for offsets tables and run reports."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pandas as pd


def _atomic_replace(dest: Path, write: Callable[[Path], None], kind: str) -> None:
    """Run ``write`` against a sibling temp file, then move it over ``dest``.

    The temp file never survives a failed write; the failure surfaces as
    ``RuntimeError`` naming the destination.
    """
    tmp = dest.with_name(f"{dest.name}.tmp")
    tmp.parent.mkdir(parents=True, exist_ok=True)

    try:
        write(tmp)
        os.replace(tmp, dest)
    except Exception as exc:
        tmp.unlink(missing_ok=True)
        raise RuntimeError(f"Failed to atomically write {kind}: {dest}") from exc


def atomic_write_csv(df: pd.DataFrame, dest: Path) -> None:
    """Write a segments table as CSV without its index."""
    _atomic_replace(dest, lambda tmp: df.to_csv(tmp, index=False), "csv")


def atomic_write_json(payload: dict[str, Any], dest: Path) -> None:
    """Write a report dictionary as indented UTF-8 JSON."""

    def _write(tmp: Path) -> None:
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")

    _atomic_replace(dest, _write, "json")
