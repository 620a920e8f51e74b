"""Tests for CSV discovery and run output layout."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.paths import build_output_paths, discover_csv_files, ensure_within_root


def test_discover_csv_files_skips_hidden_and_system_entries(tmp_path: Path) -> None:
    visible = tmp_path / "charts" / "sales.csv"
    hidden_dir = tmp_path / ".hidden" / "costs.csv"
    macos_dir = tmp_path / "__MACOSX" / "sales.csv"
    thumbs = tmp_path / "charts" / "Thumbs.db.csv"

    for path in (visible, hidden_dir, macos_dir, thumbs):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("series,key,value\n", encoding="utf-8")

    assert discover_csv_files(tmp_path) == [visible]


def test_discover_csv_files_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="Input root does not exist"):
        discover_csv_files(tmp_path / "missing")


def test_build_output_paths_mirrors_input_tree(tmp_path: Path) -> None:
    input_root = tmp_path / "in"
    src = input_root / "q1" / "sales.csv"
    src.parent.mkdir(parents=True)
    src.write_text("series,key,value\n", encoding="utf-8")
    run_root = tmp_path / "runs" / "r1"

    paths = build_output_paths(src, input_root, run_root)

    assert paths.offsets_csv == run_root / "offsets" / "q1" / "sales.offsets.csv"
    assert paths.report_json == run_root / "reports" / "per_file" / "q1" / "sales.json"


def test_ensure_within_root_rejects_escape(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="Path escapes root"):
        ensure_within_root(tmp_path / ".." / "elsewhere.csv", tmp_path)
