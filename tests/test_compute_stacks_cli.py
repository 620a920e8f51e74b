"""Integration-style tests for the batch stacking pipeline and CLI."""

from __future__ import annotations

import json
import runpy
import sys
from pathlib import Path

import pandas as pd
import pytest

from core.config import StackingConfig
from core.health import summarize_reports
from stacking.pipeline import stack_file

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SCRIPT_PATH = PROJECT_ROOT / "scripts" / "compute_stacks.py"

GOOD_CSV = "\n".join(
    [
        "series,key,value,visible",
        "north,a,1,true",
        "north,b,2,true",
        "south,a,3,true",
        "south,b,4,false",
    ]
)


def _config(input_root: Path, runs_root: Path, **overrides: object) -> StackingConfig:
    values: dict[str, object] = {
        "input_root": input_root,
        "runs_root": runs_root,
        "csv_glob": "**/*.csv",
        "series_column": "series",
        "key_column": "key",
        "value_column": "value",
        "orientation": "vertical",
        "series_order": (),
        "extent_filter_column": None,
        "fail_on_duplicate_keys": False,
    }
    values.update(overrides)
    return StackingConfig(**values)  # type: ignore[arg-type]


def _write_config(config_path: Path, input_root: Path, runs_root: Path) -> None:
    config_path.write_text(
        "\n".join([f"input_root: {input_root.as_posix()}", f"runs_root: {runs_root.as_posix()}"]),
        encoding="utf-8",
    )


def _input_root(tmp_path: Path) -> Path:
    input_root = tmp_path / "in"
    (input_root / "charts").mkdir(parents=True)
    return input_root


def test_stack_file_writes_segments_and_report(tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    src = input_root / "charts" / "sales.csv"
    src.write_text(GOOD_CSV, encoding="utf-8")
    run_root = tmp_path / "runs" / "r1" / "stack_offsets"

    report = stack_file(src, cfg=_config(input_root, tmp_path / "runs"), run_root=run_root)

    offsets_csv = run_root / "offsets" / "charts" / "sales.offsets.csv"
    report_json = run_root / "reports" / "per_file" / "charts" / "sales.json"
    assert report.status == "success"
    assert report.output_file == str(offsets_csv)
    assert (report.series_count, report.domain_key_count, report.segment_count) == (2, 2, 4)
    assert report.series_order == ["north", "south"]
    assert (report.extent_min, report.extent_max) == (0.0, 6.0)
    assert report.value_axis == "y"

    table = pd.read_csv(offsets_csv)
    assert table["offset"].tolist() == [0.0, 0.0, 1.0, 2.0]
    assert json.loads(report_json.read_text(encoding="utf-8"))["status"] == "success"


def test_stack_file_extent_filter_and_orientation(tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    src = input_root / "sales.csv"
    src.write_text(GOOD_CSV, encoding="utf-8")
    cfg = _config(input_root, tmp_path / "runs", extent_filter_column="visible", orientation="horizontal")

    report = stack_file(src, cfg=cfg, run_root=tmp_path / "runs" / "r2", dry_run=True)

    assert report.status == "success"
    assert (report.extent_min, report.extent_max) == (0.0, 4.0)
    assert report.value_axis == "x"
    assert report.output_file is None
    assert not (tmp_path / "runs" / "r2").exists()


def test_stack_file_duplicate_keys_warn_or_fail(tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    src = input_root / "dupes.csv"
    src.write_text("series,key,value\nnorth,a,1\nnorth,a,5\nsouth,a,1\n", encoding="utf-8")

    lenient = stack_file(src, cfg=_config(input_root, tmp_path / "runs"), run_root=tmp_path / "lenient", dry_run=True)
    strict = stack_file(
        src,
        cfg=_config(input_root, tmp_path / "runs", fail_on_duplicate_keys=True),
        run_root=tmp_path / "strict",
        dry_run=True,
    )

    assert lenient.status == "success"
    assert lenient.duplicate_keys == {"north": ["a"]}
    assert lenient.extent_max == 6.0
    assert strict.status == "failed"
    assert [error.code for error in strict.errors] == ["DUPLICATE_KEYS"]


def test_stack_file_failures_are_reported_not_raised(tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    missing_column = input_root / "broken.csv"
    missing_column.write_text("series,key\nnorth,a\n", encoding="utf-8")
    bad_numbers = input_root / "bad_numbers.csv"
    bad_numbers.write_text("series,key,value\nnorth,a,lots\n", encoding="utf-8")
    run_root = tmp_path / "runs" / "r3"
    cfg = _config(input_root, tmp_path / "runs")

    broken = stack_file(missing_column, cfg=cfg, run_root=run_root)
    invalid = stack_file(bad_numbers, cfg=cfg, run_root=run_root)

    assert broken.status == "failed"
    assert broken.errors[0].code == "READ_FAILED"
    assert invalid.status == "failed"
    assert invalid.errors[0].code == "INVALID_NUMERIC"
    assert not (run_root / "offsets").exists()
    assert (run_root / "reports" / "per_file" / "broken.json").exists()

    summary = summarize_reports([broken, invalid])
    assert summary["failed_files"] == 2
    assert summary["failed_inputs"] == [str(missing_column), str(bad_numbers)]


def test_cli_help_exits_cleanly() -> None:
    module = runpy.run_path(str(SCRIPT_PATH))
    main = module["main"]

    with pytest.raises(SystemExit) as exc:
        main.__globals__["sys"].argv = ["compute_stacks.py", "--help"]
        main()
    assert exc.value.code == 0


def test_cli_writes_summary_and_returns_zero(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    (input_root / "charts" / "sales.csv").write_text(GOOD_CSV, encoding="utf-8")
    (input_root / ".hidden.csv").write_text("not,a,stack\n", encoding="utf-8")
    runs_root = tmp_path / "runs"
    config_path = tmp_path / "stacking.yaml"
    _write_config(config_path, input_root, runs_root)

    module = runpy.run_path(str(SCRIPT_PATH))
    monkeypatch.setattr(sys, "argv", ["compute_stacks.py", "--config", str(config_path), "--run-id", "cli_ok"])
    exit_code = module["main"]()

    run_root = runs_root / "cli_ok" / "stack_offsets"
    summary = json.loads((run_root / "reports" / "summary.json").read_text(encoding="utf-8"))
    assert exit_code == 0
    assert summary["total_files"] == 1
    assert summary["succeeded_files"] == 1
    assert summary["run_id"] == "cli_ok"
    assert (run_root / "offsets" / "charts" / "sales.offsets.csv").exists()


def test_cli_returns_one_when_any_file_fails(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    (input_root / "good.csv").write_text(GOOD_CSV, encoding="utf-8")
    (input_root / "empty.csv").write_text("series,key,value\n", encoding="utf-8")
    runs_root = tmp_path / "runs"
    config_path = tmp_path / "stacking.yaml"
    _write_config(config_path, input_root, runs_root)

    module = runpy.run_path(str(SCRIPT_PATH))
    monkeypatch.setattr(sys, "argv", ["compute_stacks.py", "--config", str(config_path), "--run-id", "cli_fail"])
    exit_code = module["main"]()

    summary_path = runs_root / "cli_fail" / "stack_offsets" / "reports" / "summary.json"
    summary = json.loads(summary_path.read_text(encoding="utf-8"))
    assert exit_code == 1
    assert summary["failed_files"] == 1
    assert summary["failed_inputs"] == [str(input_root / "empty.csv")]


def test_stack_file_blank_cell_in_negative_series_sits_on_negative_stack(tmp_path: Path) -> None:
    input_root = _input_root(tmp_path)
    src = input_root / "gaps.csv"
    src.write_text(
        "\n".join(
            [
                "series,key,value",
                "gain,a,5",
                "gain,b,5",
                "loss,a,-2",
                "loss,b,-2",
                "gap,a,-1",
                "gap,b,",
            ]
        ),
        encoding="utf-8",
    )
    run_root = tmp_path / "runs" / "gaps"

    report = stack_file(src, cfg=_config(input_root, tmp_path / "runs"), run_root=run_root)

    assert report.status == "success"
    assert (report.extent_min, report.extent_max) == (-3.0, 5.0)
    table = pd.read_csv(run_root / "offsets" / "gaps.offsets.csv")
    gap_rows = table.loc[table["series"] == "gap"]
    assert gap_rows["key"].tolist() == ["a", "b"]
    assert gap_rows["offset"].tolist() == [-2.0, -2.0]
