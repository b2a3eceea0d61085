"""Collect pipeline: one batch run over every city, start to snapshot."""

import logging
import time
import uuid

from collector.config.schema import CollectorConfig, FailurePolicy
from collector.ingest.city_directory import CityDirectoryClient
from collector.ingest.errors import CityDirectoryError, RetryExhaustedError
from collector.ingest.forecast_fetcher import ForecastFetcher
from collector.ingest.realtime_fetcher import RealtimeFetcher
from collector.models.common import epoch_ms, format_last_update, local_now
from collector.models.reporting import RunSummary
from collector.models.snapshot import CityEntry, CityRecord, Snapshot
from collector.reporting.formatters import format_summary_text
from collector.reporting.run_summarizer import RunSummarizer
from collector.storage.archiver import archive_months
from collector.storage.snapshot_writer import SnapshotWriter

logger = logging.getLogger(__name__)


class CollectPipeline:
    def __init__(
        self,
        config: CollectorConfig,
        realtime: RealtimeFetcher | None = None,
        forecast: ForecastFetcher | None = None,
        directory: CityDirectoryClient | None = None,
    ):
        self.config = config
        fetch = config.fetch
        base_delay = fetch.retry_base_delay_ms / 1000
        self.realtime = realtime or RealtimeFetcher(
            base_url=fetch.realtime_base_url,
            user_agent=fetch.user_agent,
            referer=fetch.referer,
            timeout=fetch.timeout_seconds,
            max_attempts=fetch.max_attempts,
            retry_base_delay=base_delay,
        )
        self.forecast = forecast or ForecastFetcher(
            base_url=fetch.forecast_base_url,
            timeout=fetch.timeout_seconds,
            max_attempts=fetch.max_attempts,
            retry_base_delay=base_delay,
        )
        self.directory = directory or CityDirectoryClient(
            url=config.directory.url, timeout=fetch.timeout_seconds
        )
        self.writer = SnapshotWriter(config.storage.output_dir)
        # (city id, error message) for every city skipped by the last collect()
        self.failures: list[tuple[str, str]] = []

    def load_cities(self) -> list[CityEntry]:
        """Configured cities if any, else the portal's city directory."""
        if self.config.cities:
            return [
                CityEntry(id=c.id, province=c.province, city=c.city)
                for c in self.config.cities
                if c.enabled
            ]
        return self.directory.list_cities()

    def fetch_city(self, record: CityRecord) -> CityRecord:
        """Fill in realtime then forecast data. Raises RetryExhaustedError.

        The record is only touched once both fetches succeed, so a failed
        city carries neither field.
        """
        realtime = self.realtime.fetch(record.id)
        time.sleep(self.config.fetch.request_pause_ms / 1000)
        weather = self.forecast.fetch(record.id)
        record.realtime = realtime
        record.weather = weather
        return record

    def collect(self, cities: list[CityEntry]) -> list[CityRecord]:
        """Fetch every city in order.

        Under the skip policy a city whose retries are exhausted is logged
        and kept with only its id, province and city. Under the abort policy the first
        such error propagates.
        """
        policy = self.config.batch.failure_policy
        self.failures = []
        records: list[CityRecord] = []

        for i, entry in enumerate(cities, start=1):
            record = CityRecord.from_entry(entry)
            records.append(record)
            logger.info(
                "Fetching %s %s (%s) [%d/%d]",
                entry.province, entry.city, entry.id, i, len(cities),
            )
            try:
                self.fetch_city(record)
            except RetryExhaustedError as e:
                self.failures.append((entry.id, str(e)))
                if policy == FailurePolicy.ABORT:
                    raise
                logger.error("Skipping %s (%s): %s", entry.city, entry.id, e)

        return records

    def run(self, archive: bool = False) -> RunSummary:
        """Execute a full collection run and write the snapshot."""
        start_time = time.monotonic()
        run_id = str(uuid.uuid4())
        storage = self.config.storage
        summarizer = RunSummarizer(run_id, self.config.batch.failure_policy.value)

        # Snapshot is stamped with the run start, not the write time.
        now = local_now(storage.timezone)

        try:
            cities = self.load_cities()
        except CityDirectoryError as e:
            logger.error("Cannot load city list: %s", e)
            summarizer.record_error(str(e))
            return self._finish(summarizer, start_time)

        try:
            records = self.collect(cities)
        except RetryExhaustedError as e:
            logger.error("Collection aborted: %s", e)
            for city_id, error in self.failures:
                summarizer.record_city_failure(city_id, error)
            summarizer.record_cities([], len(cities))
            summarizer.record_abort()
            return self._finish(summarizer, start_time)

        for city_id, error in self.failures:
            summarizer.record_city_failure(city_id, error)
        summarizer.record_cities(records, len(cities))

        snapshot = Snapshot(
            timestamp=epoch_ms(now),
            last_update=format_last_update(now),
            data=records,
        )
        path = self.writer.write(snapshot, now)
        summarizer.record_snapshot(path, snapshot.last_update)

        if archive or storage.archive_on_collect:
            summarizer.record_archives(
                archive_months(storage.output_dir, now.date(), storage.archive_dir)
            )

        return self._finish(summarizer, start_time)

    def _finish(self, summarizer: RunSummarizer, start_time: float) -> RunSummary:
        summarizer.record_duration(time.monotonic() - start_time)
        summary = summarizer.finalize()
        logger.info("\n%s", format_summary_text(summary))
        return summary
