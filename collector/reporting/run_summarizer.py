"""Run summarizer: aggregates collection outcomes into a RunSummary."""

from pathlib import Path

from collector.models.reporting import RunSummary
from collector.models.snapshot import CityRecord


class RunSummarizer:
    def __init__(self, run_id: str, failure_policy: str):
        self.summary = RunSummary(run_id=run_id, failure_policy=failure_policy)

    def record_cities(self, records: list[CityRecord], total: int) -> None:
        self.summary.cities_total = total
        self.summary.cities_complete = sum(
            1 for r in records if r.realtime is not None and r.weather is not None
        )

    def record_city_failure(self, city_id: str, error: str) -> None:
        self.summary.cities_failed += 1
        self.summary.failed_city_ids.append(city_id)
        self.summary.errors.append(error)

    def record_abort(self) -> None:
        self.summary.aborted = True

    def record_snapshot(self, path: Path, last_update: str) -> None:
        self.summary.snapshot_path = str(path)
        self.summary.last_update = last_update

    def record_archives(self, paths: list[Path]) -> None:
        self.summary.archives_written = [str(p) for p in paths]

    def record_duration(self, seconds: float) -> None:
        self.summary.duration_seconds = seconds

    def record_error(self, error: str) -> None:
        self.summary.errors.append(error)

    def finalize(self) -> RunSummary:
        return self.summary
