"""Declarative extraction of day/night blocks from the one-day forecast page."""

from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from collector.ingest.errors import ForecastParseError, ForecastStructureError
from collector.models.forecast import ForecastPart, ForecastRecord, WindInfo

TODAY_BLOCKS_SELECTOR = "#today > div.t > ul > li"


@dataclass(frozen=True)
class FieldRule:
    """Output field <- first match of ``selector``; text, or ``attr`` if set."""

    name: str
    selector: str
    attr: str | None = None


COMMON_FIELDS: tuple[FieldRule, ...] = (
    FieldRule("date", "h1"),
    FieldRule("weather", "p.wea"),
    FieldRule("temp", "p.tem > span"),
    FieldRule("temp_unit", "p.tem > em"),
    FieldRule("wind.direction", "p.win > span", attr="title"),
    FieldRule("wind.direction_code", "p.win > i", attr="class"),
    FieldRule("wind.level", "p.win > span"),
)

DAY_FIELDS: tuple[FieldRule, ...] = COMMON_FIELDS + (
    FieldRule("sky", "p.sky > span"),
    FieldRule("sunrise", "p.sun > span"),
)

# Night blocks have no sky paragraph; p.sun carries the sunset time.
NIGHT_FIELDS: tuple[FieldRule, ...] = COMMON_FIELDS + (
    FieldRule("sunset", "p.sun > span"),
)


def parse_forecast_page(html: str) -> ForecastRecord:
    """Parse the forecast page markup into a day/night ForecastRecord.

    Raises ForecastParseError when the markup holds no elements at all and
    ForecastStructureError unless exactly two today-blocks are present.
    """
    # Keep class="..." as the raw attribute string instead of a token list.
    soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
    if soup.find() is None:
        raise ForecastParseError("Failed to parse HTML")

    blocks = soup.select(TODAY_BLOCKS_SELECTOR)
    if len(blocks) != 2:
        raise ForecastStructureError(
            f"Failed to find today's weather: expected 2 blocks, got {len(blocks)}"
        )
    day, night = blocks

    return ForecastRecord(
        day=build_part(extract_fields(day, DAY_FIELDS)),
        night=build_part(extract_fields(night, NIGHT_FIELDS)),
    )


def extract_fields(
    element: Tag, rules: tuple[FieldRule, ...]
) -> dict[str, str | None]:
    """Apply each rule to ``element``. A missing node or attribute is None."""
    values: dict[str, str | None] = {}
    for rule in rules:
        node = element.select_one(rule.selector)
        if node is None:
            values[rule.name] = None
        elif rule.attr is not None:
            values[rule.name] = _attr_text(node, rule.attr)
        else:
            values[rule.name] = node.get_text()
    return values


def build_part(values: dict[str, str | None]) -> ForecastPart:
    return ForecastPart(
        date=values.get("date"),
        weather=values.get("weather"),
        sky=values.get("sky"),
        temp=values.get("temp"),
        temp_unit=values.get("temp_unit"),
        wind=WindInfo(
            direction=values.get("wind.direction"),
            direction_code=values.get("wind.direction_code"),
            level=values.get("wind.level"),
        ),
        sunrise=values.get("sunrise"),
        sunset=values.get("sunset"),
    )


def _attr_text(node: Tag, attr: str) -> str | None:
    value = node.get(attr)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)
