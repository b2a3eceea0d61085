"""City and batch snapshot models written to disk."""

from dataclasses import dataclass, field
from typing import Any

from collector.models.common import LocationId
from collector.models.forecast import ForecastRecord
from collector.models.realtime import RealtimeRecord


@dataclass(frozen=True)
class CityEntry:
    id: LocationId
    province: str
    city: str


@dataclass
class CityRecord:
    id: LocationId
    province: str
    city: str
    realtime: RealtimeRecord | None = None
    weather: ForecastRecord | None = None

    @classmethod
    def from_entry(cls, entry: CityEntry) -> "CityRecord":
        return cls(id=entry.id, province=entry.province, city=entry.city)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "province": self.province,
            "city": self.city,
        }
        if self.realtime is not None:
            data["realtime"] = self.realtime
        if self.weather is not None:
            data["weather"] = self.weather.to_dict()
        return data


@dataclass
class Snapshot:
    timestamp: int    # epoch milliseconds
    last_update: str  # YYYY-MM-DD HH:MM:SS
    data: list[CityRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "lastUpdate": self.last_update,
            "data": [record.to_dict() for record in self.data],
        }
