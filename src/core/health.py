"""Per-file stacking run reports and batch summaries."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class StructuredError:
    """Structured error payload for per-file stacking reports."""

    stage: str
    code: str
    message: str
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class StackRunReport:
    """Outcome of stacking one input file."""

    input_file: str
    rows_in: int = 0
    series_count: int = 0
    domain_key_count: int = 0
    segment_count: int = 0
    series_order: list[str] = field(default_factory=list)
    duplicate_keys: dict[str, list[str]] = field(default_factory=dict)
    extent_min: float | None = None
    extent_max: float | None = None
    value_axis: str | None = None
    status: str = "failed"
    output_file: str | None = None
    errors: list[StructuredError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialize report as a JSON-ready dictionary."""
        return asdict(self)


def add_error(report: StackRunReport, stage: str, code: str, message: str, **context: Any) -> None:
    """Append a structured error into report."""
    report.errors.append(StructuredError(stage=stage, code=code, message=message, context=context))


def health_check(report: StackRunReport) -> bool:
    """Return True when the file stacked cleanly."""
    return (
        report.series_count > 0
        and report.extent_min is not None
        and report.extent_max is not None
        and report.extent_min <= 0.0 <= report.extent_max
        and len(report.errors) == 0
    )


def finalize_report(report: StackRunReport) -> StackRunReport:
    """Finalize status according to gate checks."""
    report.status = "success" if health_check(report) else "failed"
    return report


def summarize_reports(reports: list[StackRunReport]) -> dict[str, Any]:
    """Build global summary report across all files."""
    total_files = len(reports)
    succeeded_files = sum(1 for item in reports if item.status == "success")

    return {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "total_files": total_files,
        "succeeded_files": succeeded_files,
        "failed_files": total_files - succeeded_files,
        "total_rows_in": sum(item.rows_in for item in reports),
        "total_segments": sum(item.segment_count for item in reports),
        "files_with_duplicate_keys": [item.input_file for item in reports if item.duplicate_keys],
        "failed_inputs": [item.input_file for item in reports if item.status == "failed"],
    }
