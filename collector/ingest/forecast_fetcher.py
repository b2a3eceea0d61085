"""Forecast fetcher: retrieves and parses the one-day forecast page."""

import logging

import httpx

from collector.config.defaults import DEFAULT_FORECAST_BASE_URL
from collector.ingest.forecast_parser import parse_forecast_page
from collector.ingest.retry import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    linear_backoff,
    retry_call,
)
from collector.models.common import LocationId
from collector.models.forecast import ForecastRecord

logger = logging.getLogger(__name__)


class ForecastFetcher:
    def __init__(
        self,
        base_url: str = DEFAULT_FORECAST_BASE_URL,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_base_delay: float = DEFAULT_BASE_DELAY,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay

    def page_url(self, location_id: LocationId) -> str:
        return f"{self.base_url}/weather1d/{location_id}.shtml"

    def fetch(self, location_id: LocationId) -> ForecastRecord:
        """Fetch today's day/night forecast for a location.

        HTTP errors, empty documents and unexpected page structure are all
        retried. Raises RetryExhaustedError once attempts run out.
        """
        return retry_call(
            lambda: self._fetch_once(location_id),
            location_id,
            what="weather data",
            max_attempts=self.max_attempts,
            delay_schedule=linear_backoff(self.retry_base_delay),
        )

    def _fetch_once(self, location_id: LocationId) -> ForecastRecord:
        url = self.page_url(location_id)
        resp = httpx.get(url, timeout=self.timeout, follow_redirects=True)
        resp.raise_for_status()
        # Stray bytes become U+FFFD instead of failing the page
        html = resp.content.decode("utf-8", errors="replace")
        record = parse_forecast_page(html)
        logger.debug("Parsed forecast for %s from %s", location_id, url)
        return record
