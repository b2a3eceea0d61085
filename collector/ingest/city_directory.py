"""City directory client: resolves the portal's city list to location ids."""

import json
import logging

import httpx

from collector.config.defaults import DEFAULT_CITY_DIRECTORY_URL
from collector.ingest.errors import CityDirectoryError
from collector.models.snapshot import CityEntry

logger = logging.getLogger(__name__)

DIRECTORY_PREFIX = "var city_data = "


class CityDirectoryClient:
    def __init__(self, url: str = DEFAULT_CITY_DIRECTORY_URL, timeout: float = 30.0):
        self.url = url
        self.timeout = timeout

    def list_cities(self) -> list[CityEntry]:
        """Fetch the directory and return one entry per province."""
        try:
            resp = httpx.get(self.url, timeout=self.timeout, follow_redirects=True)
            resp.raise_for_status()
            text = resp.content.decode("utf-8")
        except httpx.HTTPStatusError as e:
            logger.error("City directory error for %s: %s", self.url, e)
            raise CityDirectoryError(f"City directory returned an error: {e}") from e
        except httpx.RequestError as e:
            logger.error("City directory request failed for %s: %s", self.url, e)
            raise CityDirectoryError(f"City directory unreachable: {e}") from e
        except UnicodeDecodeError as e:
            raise CityDirectoryError(f"City directory is not UTF-8: {e}") from e

        entries = parse_city_directory(text)
        logger.info("Loaded %d cities from %s", len(entries), self.url)
        return entries


def parse_city_directory(text: str) -> list[CityEntry]:
    """Decode ``var city_data = {...}`` into city entries.

    The document nests province -> city -> district -> {AREAID, NAMECN}.
    Each province contributes its first city, using the district that shares
    the city's name (the city proper), or the first district otherwise.
    """
    body = text.lstrip("\ufeff").strip()
    if body.startswith(DIRECTORY_PREFIX):
        body = body[len(DIRECTORY_PREFIX):]
    body = body.rstrip().removesuffix(";")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise CityDirectoryError(f"Invalid city directory JSON: {e}") from e
    if not isinstance(data, dict):
        raise CityDirectoryError("City directory is not a JSON object")

    entries: list[CityEntry] = []
    for province, groups in data.items():
        if not isinstance(groups, dict) or not groups:
            logger.warning("Skipping province %s with no cities", province)
            continue
        city_name, districts = next(iter(groups.items()))
        if not isinstance(districts, dict) or not districts:
            logger.warning("Skipping %s/%s with no districts", province, city_name)
            continue
        district = districts.get(city_name) or next(iter(districts.values()))
        area_id = district.get("AREAID") if isinstance(district, dict) else None
        if not area_id:
            logger.warning("Skipping %s/%s without AREAID", province, city_name)
            continue
        entries.append(
            CityEntry(
                id=str(area_id),
                province=province,
                city=district.get("NAMECN", city_name),
            )
        )
    return entries
