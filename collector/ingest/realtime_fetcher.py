"""Realtime fetcher: current observations from the sk_2d endpoint."""

import json
import logging

import httpx

from collector.config.defaults import (
    DEFAULT_REALTIME_BASE_URL,
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
)
from collector.ingest.errors import RealtimePayloadError
from collector.ingest.retry import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    linear_backoff,
    retry_call,
)
from collector.models.common import LocationId
from collector.models.realtime import RealtimeRecord

logger = logging.getLogger(__name__)

PAYLOAD_PREFIX = "var dataSK="


class RealtimeFetcher:
    def __init__(
        self,
        base_url: str = DEFAULT_REALTIME_BASE_URL,
        user_agent: str = DEFAULT_USER_AGENT,
        referer: str = DEFAULT_REFERER,
        timeout: float = 30.0,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_base_delay: float = DEFAULT_BASE_DELAY,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.referer = referer
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_base_delay = retry_base_delay

    def endpoint_url(self, location_id: LocationId) -> str:
        return f"{self.base_url}/sk_2d/{location_id}.html"

    def fetch(self, location_id: LocationId) -> RealtimeRecord:
        """Fetch the realtime observation record for a location.

        Raises RetryExhaustedError once attempts run out.
        """
        return retry_call(
            lambda: self._fetch_once(location_id),
            location_id,
            what="realtime data",
            max_attempts=self.max_attempts,
            delay_schedule=linear_backoff(self.retry_base_delay),
        )

    def _fetch_once(self, location_id: LocationId) -> RealtimeRecord:
        headers = {"User-Agent": self.user_agent, "Referer": self.referer}
        resp = httpx.get(
            self.endpoint_url(location_id),
            headers=headers,
            timeout=self.timeout,
            follow_redirects=True,
        )
        resp.raise_for_status()
        return decode_realtime_payload(resp.text)


def decode_realtime_payload(text: str) -> RealtimeRecord:
    """Strip the ``var dataSK=`` wrapper and decode the JSON object inside.

    A trailing semicolon is optional. Raises RealtimePayloadError on a
    missing prefix, invalid JSON or a non-object payload.
    """
    body = text.lstrip("\ufeff").strip()
    if not body.startswith(PAYLOAD_PREFIX):
        raise RealtimePayloadError(
            f"Payload does not start with {PAYLOAD_PREFIX!r}: {body[:40]!r}"
        )
    body = body[len(PAYLOAD_PREFIX):].rstrip().removesuffix(";")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise RealtimePayloadError(f"Invalid realtime JSON: {e}") from e
    if not isinstance(data, dict):
        raise RealtimePayloadError(
            f"Expected a JSON object, got {type(data).__name__}"
        )
    return data
