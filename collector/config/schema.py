"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator

from collector.config.defaults import (
    DEFAULT_CITY_DIRECTORY_URL,
    DEFAULT_FORECAST_BASE_URL,
    DEFAULT_REALTIME_BASE_URL,
    DEFAULT_REFERER,
    DEFAULT_USER_AGENT,
)


class FailurePolicy(StrEnum):
    SKIP = "skip"    # log the city and keep going
    ABORT = "abort"  # first exhausted city fails the run


class CityConfig(BaseModel):
    model_config = {"extra": "forbid"}

    id: str
    province: str
    city: str
    enabled: bool = True


class FetchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    forecast_base_url: str = DEFAULT_FORECAST_BASE_URL
    realtime_base_url: str = DEFAULT_REALTIME_BASE_URL
    user_agent: str = DEFAULT_USER_AGENT
    referer: str = DEFAULT_REFERER
    timeout_seconds: float = Field(default=30.0, gt=0.0)
    max_attempts: int = Field(default=3, ge=1)
    retry_base_delay_ms: int = Field(default=1000, ge=0)
    request_pause_ms: int = Field(default=100, ge=0)


class DirectoryConfig(BaseModel):
    model_config = {"extra": "forbid"}

    url: str = DEFAULT_CITY_DIRECTORY_URL


class BatchConfig(BaseModel):
    model_config = {"extra": "forbid"}

    failure_policy: FailurePolicy = FailurePolicy.SKIP


class StorageConfig(BaseModel):
    model_config = {"extra": "forbid"}

    output_dir: str = "weathers"
    archive_dir: str = "archives"
    archive_on_collect: bool = False
    timezone: str = "Asia/Shanghai"

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value


class CollectorConfig(BaseModel):
    model_config = {"extra": "forbid"}

    fetch: FetchConfig = FetchConfig()
    directory: DirectoryConfig = DirectoryConfig()
    batch: BatchConfig = BatchConfig()
    storage: StorageConfig = StorageConfig()
    cities: list[CityConfig] = []
