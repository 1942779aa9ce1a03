"""
Weather source tests against a mocked Open-Meteo endpoint.

Run with: pytest tests/test_weather_service.py -v
"""
import asyncio
from datetime import date

import httpx
import pytest

from app.services.farmer.weather_service import (
    WeatherDataError,
    build_params,
    decode_forecast,
    describe_weathercode,
    fetch_forecast,
)

PAYLOAD = {
    "latitude": 34.1,
    "longitude": 74.8,
    "current_weather": {"temperature": 18.2, "windspeed": 6.1, "winddirection": 200, "weathercode": 2, "time": "2025-04-01T09:00"},
    "daily": {
        "time": ["2025-04-01", "2025-04-02", "2025-04-03"],
        "temperature_2m_max": [22.0, 33.5, 19.0],
        "temperature_2m_min": [8.0, 12.0, 1.5],
        "apparent_temperature_max": [21.0, 34.0, 17.5],
        "precipitation_sum": [0.0, 0.0, 12.4],
        "precipitation_probability_max": [5, 10, 80],
        "windspeed_10m_max": [9.0, 11.0, 22.0],
        "weathercode": [1, 0, 63],
        "uv_index_max": [5.1, 7.2, 2.0],
    },
}


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestDecode:

    def test_daily_rows(self):
        report = decode_forecast(PAYLOAD, 34.1, 74.8)
        assert len(report.daily) == 3
        third = report.daily[2]
        assert third.date == date(2025, 4, 3)
        assert third.precipitation_prob == 80
        assert third.wind_speed == 22.0
        assert report.current.temperature == 18.2

    def test_short_series_become_absent(self):
        payload = {"current_weather": {}, "daily": {"time": ["2025-04-01", "2025-04-02"], "uv_index_max": [3.0]}}
        report = decode_forecast(payload, 0, 0)
        assert report.daily[0].uv_index == 3.0
        assert report.daily[1].uv_index is None

    @pytest.mark.parametrize("missing", ["current_weather", "daily"])
    def test_missing_section_is_fatal(self, missing):
        payload = dict(PAYLOAD)
        del payload[missing]
        with pytest.raises(WeatherDataError):
            decode_forecast(payload, 0, 0)

    def test_bad_date_is_fatal(self):
        payload = {"current_weather": {}, "daily": {"time": ["not-a-date"]}}
        with pytest.raises(WeatherDataError):
            decode_forecast(payload, 0, 0)

    def test_weathercode_labels(self):
        assert describe_weathercode(0) == "Clear"
        assert describe_weathercode(95) == "Thunderstorm"
        assert describe_weathercode(None) == "Unknown"
        assert describe_weathercode(12345) == "Unknown"


class TestFetch:

    def test_request_parameters(self):
        seen = {}

        def handler(request):
            seen.update(dict(request.url.params))
            return httpx.Response(200, json=PAYLOAD)

        async def scenario():
            async with client_for(handler) as client:
                return await fetch_forecast(34.1, 74.8, client=client)

        report = asyncio.run(scenario())
        assert report.latitude == 34.1
        assert seen["current_weather"] == "true"
        assert seen["forecast_days"] == "7"
        assert seen["timezone"] == "auto"
        assert "precipitation_probability_max" in seen["daily"]

    def test_http_error(self):
        async def scenario():
            async with client_for(lambda request: httpx.Response(503)) as client:
                await fetch_forecast(0, 0, client=client)

        with pytest.raises(WeatherDataError, match="Failed to fetch weather"):
            asyncio.run(scenario())

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        async def scenario():
            async with client_for(handler) as client:
                await fetch_forecast(0, 0, client=client)

        with pytest.raises(WeatherDataError):
            asyncio.run(scenario())

    def test_non_json_body(self):
        async def scenario():
            async with client_for(lambda request: httpx.Response(200, text="<html>")) as client:
                await fetch_forecast(0, 0, client=client)

        with pytest.raises(WeatherDataError):
            asyncio.run(scenario())

    def test_payload_without_daily(self):
        async def scenario():
            body = {"current_weather": {"temperature": 10}}
            async with client_for(lambda request: httpx.Response(200, json=body)) as client:
                await fetch_forecast(0, 0, client=client)

        with pytest.raises(WeatherDataError, match="Invalid weather data"):
            asyncio.run(scenario())

    def test_build_params_days(self):
        assert build_params(1.0, 2.0, days=3)["forecast_days"] == 3
