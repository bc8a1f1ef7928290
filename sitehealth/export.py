"""Local report snapshots: opt-in, nothing leaves the machine."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .report import Report

logger = logging.getLogger(__name__)

# ~/.sitehealth/reports/
REPORTS_DIR = Path.home() / ".sitehealth" / "reports"


def save_report(report: Report, directory: Optional[Path] = None) -> Optional[Path]:
    """Save a report snapshot. Returns the path, or None for an empty report."""
    if report.is_empty:
        return None
    target = Path(directory) if directory is not None else REPORTS_DIR
    target.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
    path = target / f"{stamp}.json"
    path.write_text(json.dumps(report.to_dict(), indent=2))
    logger.debug("Saved report to %s", path)
    return path


def load_reports(directory: Optional[Path] = None) -> list[dict]:
    """Load all saved snapshots, oldest first. Unreadable files are skipped."""
    source = Path(directory) if directory is not None else REPORTS_DIR
    if not source.exists():
        return []
    reports = []
    for f in sorted(source.glob("*.json")):
        try:
            reports.append(json.loads(f.read_text()))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Skipping unreadable report %s: %s", f, e)
    return reports


def get_stats(directory: Optional[Path] = None) -> dict:
    """Aggregate saved snapshots: runs, non-good verdicts per check, worst per run."""
    reports = load_reports(directory)
    by_check: dict[str, int] = {}
    by_worst: dict[str, int] = {}
    for r in reports:
        for v in r.get("verdicts", []):
            if v.get("severity") != "good":
                check_id = v.get("check_id", "?")
                by_check[check_id] = by_check.get(check_id, 0) + 1
        worst = r.get("worst") or "none"
        by_worst[worst] = by_worst.get(worst, 0) + 1
    return {
        "total_runs": len(reports),
        "by_check": by_check,
        "by_worst": by_worst,
    }
