"""Run reporting models."""

from dataclasses import dataclass, field


@dataclass
class RunSummary:
    run_id: str
    failure_policy: str
    last_update: str = ""
    cities_total: int = 0
    cities_complete: int = 0
    cities_failed: int = 0
    failed_city_ids: list[str] = field(default_factory=list)
    snapshot_path: str = ""
    archives_written: list[str] = field(default_factory=list)
    aborted: bool = False
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)
