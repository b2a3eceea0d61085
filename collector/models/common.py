"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from typing import TypeAlias
from zoneinfo import ZoneInfo

LocationId: TypeAlias = str

LAST_UPDATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DATE_FORMAT = "%Y-%m-%d"


def utc_now() -> datetime:
    return datetime.now(UTC)


def local_now(timezone: str) -> datetime:
    """Current time in the named IANA timezone."""
    return utc_now().astimezone(ZoneInfo(timezone))


def epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def format_last_update(dt: datetime) -> str:
    return dt.strftime(LAST_UPDATE_FORMAT)


def format_date(dt: datetime) -> str:
    return dt.strftime(DATE_FORMAT)
