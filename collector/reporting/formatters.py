"""Output formatters for run summaries."""

import json
from dataclasses import asdict

from collector.models.reporting import RunSummary


def format_summary_text(s: RunSummary) -> str:
    """Plain text summary for logging."""
    status = "Aborted" if s.aborted else "Complete"
    lines = [
        f"=== Collection {status} ({s.failure_policy}) | Run {s.run_id[:8]} ===",
        f"Cities: {s.cities_total} total, {s.cities_complete} complete, "
        f"{s.cities_failed} failed",
    ]
    if s.failed_city_ids:
        lines.append(f"Failed: {', '.join(s.failed_city_ids)}")
    if s.snapshot_path:
        lines.append(f"Snapshot: {s.snapshot_path} ({s.last_update})")
    if s.archives_written:
        lines.append(f"Archived: {', '.join(s.archives_written)}")
    if s.errors:
        lines.append(f"Errors: {len(s.errors)}")
    lines.append(f"Duration: {s.duration_seconds:.1f}s")
    return "\n".join(lines)


def format_summary_json(s: RunSummary) -> str:
    """JSON summary for programmatic consumption."""
    return json.dumps(asdict(s), ensure_ascii=False, indent=2)
