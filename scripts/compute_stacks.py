"""CLI entrypoint for batch stack offset computation."""

from __future__ import annotations

import argparse
import sys
from datetime import datetime, timezone
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from core.config import load_config
from core.health import summarize_reports
from core.io_atomic import atomic_write_json
from core.logging import get_logger, setup_logging
from stacking.pipeline import stack_all

LOGGER = get_logger(__name__)


def parse_args() -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(description="Compute stack offsets and extents for long-form series CSV files.")
    parser.add_argument("--config", type=Path, default=PROJECT_ROOT / "configs" / "stacking.yaml", help="YAML config path.")
    parser.add_argument("--dry-run", action="store_true", help="Stack and report without writing outputs.")
    parser.add_argument("--run-id", type=str, default="", help="Custom run id. Default: current UTC timestamp.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    return parser.parse_args()


def main() -> int:
    """Run batch stacking and return process exit code."""
    args = parse_args()
    setup_logging(args.log_level)

    cfg = load_config(args.config)

    run_id = args.run_id.strip() or datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
    run_root = cfg.runs_root / run_id / "stack_offsets"
    LOGGER.info("Run layout | run_id=%s run_root=%s orientation=%s", run_id, run_root, cfg.orientation)

    reports = stack_all(cfg=cfg, run_root=run_root, dry_run=args.dry_run)
    summary = summarize_reports(reports)
    summary["run_id"] = run_id
    summary["run_root"] = str(run_root)

    LOGGER.info("Summary: total=%d success=%d failed=%d", summary["total_files"], summary["succeeded_files"], summary["failed_files"])

    if not args.dry_run:
        summary_path = run_root / "reports" / "summary.json"
        atomic_write_json(summary, summary_path)
        LOGGER.info("Summary report written to %s", summary_path)

    return 0 if summary["failed_files"] == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
