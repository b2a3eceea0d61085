"""Day/night forecast models scraped from the one-day forecast page.

Every scraped field is optional. ``None`` means the element was not in the
markup; an empty string means the element was there but rendered blank.
Serialization drops ``None`` fields and keeps empty strings.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class WindInfo:
    direction: str | None = None       # e.g. "北风", from the span's title
    direction_code: str | None = None  # icon class, e.g. "N"
    level: str | None = None           # e.g. "<3级"

    def to_dict(self) -> dict[str, str]:
        return _drop_absent({
            "direction": self.direction,
            "directionCode": self.direction_code,
            "level": self.level,
        })


@dataclass(frozen=True)
class ForecastPart:
    date: str | None = None
    weather: str | None = None
    sky: str | None = None      # day only
    temp: str | None = None
    temp_unit: str | None = None
    wind: WindInfo = field(default_factory=WindInfo)
    sunrise: str | None = None  # day only
    sunset: str | None = None   # night only

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = _drop_absent({
            "date": self.date,
            "weather": self.weather,
            "sky": self.sky,
            "temp": self.temp,
            "tempUnit": self.temp_unit,
        })
        data["wind"] = self.wind.to_dict()
        data.update(_drop_absent({"sunrise": self.sunrise, "sunset": self.sunset}))
        return data


@dataclass(frozen=True)
class ForecastRecord:
    day: ForecastPart
    night: ForecastPart

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day.to_dict(), "night": self.night.to_dict()}


def _drop_absent(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}
