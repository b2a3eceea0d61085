"""Shared test fixtures."""

from pathlib import Path

import pytest

from collector.config.schema import CityConfig, CollectorConfig, StorageConfig
from collector.tests.helpers import DIRECTORY_URL, FORECAST_BASE, REALTIME_BASE

FIXTURE_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def forecast_html() -> str:
    return (FIXTURE_DIR / "weather1d_101010100.shtml").read_text(encoding="utf-8")


@pytest.fixture
def realtime_text() -> str:
    return (FIXTURE_DIR / "realtime_101010100.html").read_text(encoding="utf-8")


@pytest.fixture
def city_js() -> str:
    return (FIXTURE_DIR / "city.js").read_text(encoding="utf-8")


@pytest.fixture
def test_config(tmp_path: Path) -> CollectorConfig:
    """Config pointed at test hosts and a temp output directory."""
    return CollectorConfig(
        fetch={
            "forecast_base_url": FORECAST_BASE,
            "realtime_base_url": REALTIME_BASE,
        },
        directory={"url": DIRECTORY_URL},
        storage=StorageConfig(output_dir=str(tmp_path / "weathers")),
        cities=[
            CityConfig(id="101010100", province="北京", city="北京"),
            CityConfig(id="101020100", province="上海", city="上海"),
        ],
    )

