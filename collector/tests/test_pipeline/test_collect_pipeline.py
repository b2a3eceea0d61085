"""Tests for the collect pipeline with mocked remote endpoints."""

import json
from pathlib import Path
from unittest.mock import call, patch

import httpx
import pytest
import respx

from collector.config.schema import CollectorConfig, FailurePolicy
from collector.ingest.errors import RetryExhaustedError
from collector.models.snapshot import CityEntry
from collector.pipeline.collect_pipeline import CollectPipeline
from collector.tests.helpers import DIRECTORY_URL, FORECAST_BASE, REALTIME_BASE

BEIJING = CityEntry(id="101010100", province="北京", city="北京")
SHANGHAI = CityEntry(id="101020100", province="上海", city="上海")


def _mock_city(
    city_id: str, realtime: httpx.Response, forecast: httpx.Response
) -> tuple[respx.Route, respx.Route]:
    rt = respx.get(f"{REALTIME_BASE}/sk_2d/{city_id}.html").mock(return_value=realtime)
    fc = respx.get(f"{FORECAST_BASE}/weather1d/{city_id}.shtml").mock(
        return_value=forecast
    )
    return rt, fc


def _ok(realtime_text: str, forecast_html: str) -> tuple[httpx.Response, httpx.Response]:
    return (
        httpx.Response(200, text=realtime_text),
        httpx.Response(200, content=forecast_html.encode("utf-8")),
    )


def _abort(config: CollectorConfig) -> CollectorConfig:
    return config.model_copy(
        update={
            "batch": config.batch.model_copy(
                update={"failure_policy": FailurePolicy.ABORT}
            )
        }
    )


class TestLoadCities:
    def test_configured_cities(self, test_config: CollectorConfig):
        cities = CollectPipeline(test_config).load_cities()
        assert cities == [BEIJING, SHANGHAI]

    def test_disabled_cities_skipped(self, test_config: CollectorConfig):
        test_config.cities[1].enabled = False
        assert CollectPipeline(test_config).load_cities() == [BEIJING]

    @respx.mock
    def test_directory_when_unconfigured(self, test_config: CollectorConfig, city_js: str):
        config = test_config.model_copy(update={"cities": []})
        respx.get(DIRECTORY_URL).mock(
            return_value=httpx.Response(200, content=city_js.encode("utf-8"))
        )
        cities = CollectPipeline(config).load_cities()
        assert [c.province for c in cities] == ["北京", "河北", "香港"]


class TestCollect:
    @respx.mock
    def test_all_cities_succeed_in_order(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        _mock_city(BEIJING.id, *_ok(realtime_text, forecast_html))
        _mock_city(SHANGHAI.id, *_ok(realtime_text, forecast_html))

        with patch("collector.pipeline.collect_pipeline.time.sleep") as sleep:
            records = CollectPipeline(test_config).collect([BEIJING, SHANGHAI])

        assert [r.id for r in records] == [BEIJING.id, SHANGHAI.id]
        assert all(r.realtime is not None and r.weather is not None for r in records)
        # 100ms pause between realtime and forecast, once per city
        assert sleep.call_args_list == [call(0.1), call(0.1)]

    @respx.mock
    def test_realtime_fetched_before_forecast(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        rt, fc = _mock_city(BEIJING.id, *_ok(realtime_text, forecast_html))

        with patch("collector.pipeline.collect_pipeline.time.sleep"):
            CollectPipeline(test_config).collect([BEIJING])

        calls = [c.request.url.host for c in respx.calls]
        assert calls == ["test-realtime.example.com", "test-forecast.example.com"]
        assert rt.call_count == 1
        assert fc.call_count == 1

    @respx.mock
    def test_skip_failed_city_and_continue(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        _mock_city(BEIJING.id, *_ok(realtime_text, forecast_html))
        rt, fc = _mock_city(
            SHANGHAI.id,
            httpx.Response(500),
            httpx.Response(200, content=forecast_html.encode("utf-8")),
        )

        pipeline = CollectPipeline(test_config)
        with patch("collector.pipeline.collect_pipeline.time.sleep") as sleep:
            records = pipeline.collect([BEIJING, SHANGHAI])

        assert len(records) == 2
        first, second = (r.to_dict() for r in records)
        assert "realtime" in first and "weather" in first
        assert "realtime" not in second and "weather" not in second
        assert second["id"] == SHANGHAI.id
        assert rt.call_count == 3
        assert fc.call_count == 0
        # Beijing pause, then Shanghai's two backoffs
        assert sleep.call_args_list == [call(0.1), call(1.0), call(2.0)]
        assert [city_id for city_id, _ in pipeline.failures] == [SHANGHAI.id]

    @respx.mock
    def test_forecast_failure_drops_realtime(
        self, test_config: CollectorConfig, realtime_text: str
    ):
        rt, fc = _mock_city(
            BEIJING.id,
            httpx.Response(200, text=realtime_text),
            httpx.Response(500),
        )

        with patch("collector.pipeline.collect_pipeline.time.sleep"):
            pipeline = CollectPipeline(test_config)
            records = pipeline.collect([BEIJING])

        assert rt.call_count == 1
        assert fc.call_count == 3
        assert records[0].realtime is None
        assert records[0].weather is None
        assert sorted(records[0].to_dict()) == ["city", "id", "province"]
        assert pipeline.failures[0][0] == BEIJING.id

    @respx.mock
    def test_abort_policy_raises(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        _mock_city(BEIJING.id, httpx.Response(500), httpx.Response(500))
        rt, _ = _mock_city(SHANGHAI.id, *_ok(realtime_text, forecast_html))

        with (
            patch("collector.pipeline.collect_pipeline.time.sleep"),
            pytest.raises(RetryExhaustedError, match="101010100"),
        ):
            CollectPipeline(_abort(test_config)).collect([BEIJING, SHANGHAI])
        assert rt.call_count == 0


class TestRun:
    @respx.mock
    def test_writes_snapshot(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        _mock_city(BEIJING.id, *_ok(realtime_text, forecast_html))
        _mock_city(SHANGHAI.id, httpx.Response(500), httpx.Response(500))

        with patch("collector.pipeline.collect_pipeline.time.sleep"):
            summary = CollectPipeline(test_config).run()

        assert summary.cities_total == 2
        assert summary.cities_complete == 1
        assert summary.cities_failed == 1
        assert summary.failed_city_ids == [SHANGHAI.id]
        assert not summary.aborted

        path = Path(summary.snapshot_path)
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["lastUpdate"] == summary.last_update
        assert isinstance(data["timestamp"], int)
        assert [c["id"] for c in data["data"]] == [BEIJING.id, SHANGHAI.id]
        assert data["data"][0]["weather"]["day"]["tempUnit"] == "°C"

        root = Path(test_config.storage.output_dir)
        assert (root / "latest.json").read_text(encoding="utf-8") == path.read_text(
            encoding="utf-8"
        )

    @respx.mock
    def test_abort_writes_nothing(self, test_config: CollectorConfig):
        _mock_city(BEIJING.id, httpx.Response(500), httpx.Response(500))

        with patch("collector.pipeline.collect_pipeline.time.sleep"):
            summary = CollectPipeline(_abort(test_config)).run()

        assert summary.aborted
        assert summary.snapshot_path == ""
        assert summary.failed_city_ids == [BEIJING.id]
        assert len(summary.errors) == 1
        assert not Path(test_config.storage.output_dir).exists()

    @respx.mock
    def test_directory_failure(self, test_config: CollectorConfig):
        config = test_config.model_copy(update={"cities": []})
        respx.get(DIRECTORY_URL).mock(return_value=httpx.Response(503))

        summary = CollectPipeline(config).run()
        assert summary.errors
        assert summary.snapshot_path == ""

    @respx.mock
    def test_archive_after_write(
        self, test_config: CollectorConfig, realtime_text: str, forecast_html: str
    ):
        root = Path(test_config.storage.output_dir)
        old = root / "2000-01-01"
        old.mkdir(parents=True)
        (old / "latest.json").write_text("{}")
        _mock_city(BEIJING.id, *_ok(realtime_text, forecast_html))
        _mock_city(SHANGHAI.id, *_ok(realtime_text, forecast_html))

        with patch("collector.pipeline.collect_pipeline.time.sleep"):
            summary = CollectPipeline(test_config).run(archive=True)

        assert summary.archives_written == [str(root / "archives" / "2000-01.zip")]
        assert not old.exists()
