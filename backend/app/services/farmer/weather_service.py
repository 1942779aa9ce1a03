# backend/app/services/farmer/weather_service.py

"""
Weather source (Open-Meteo)

Fetches current conditions plus a 7-day daily forecast for a coordinate and
decodes it into typed ForecastDay records. A payload without
``current_weather`` or ``daily`` is a hard failure for that fetch.
No retries: the caller decides whether to ask again.
"""

from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.logger import get_logger
from app.schemas.farmer.weather import CurrentWeather, ForecastDay, WeatherReport

logger = get_logger("weather")

DAILY_VARIABLES = [
    "temperature_2m_max",
    "temperature_2m_min",
    "apparent_temperature_max",
    "precipitation_sum",
    "precipitation_probability_max",
    "windspeed_10m_max",
    "weathercode",
    "uv_index_max",
]

# WMO weather interpretation codes
WEATHERCODE_LABELS = {
    (0,): "Clear",
    (1, 2): "Partly Cloudy",
    (3,): "Overcast",
    (45, 48): "Fog",
    (51, 53, 55, 61, 63, 65): "Rain",
    (71, 73, 75): "Snow",
    (95, 96, 99): "Thunderstorm",
}


class WeatherDataError(Exception):
    """Weather fetch failed or returned an unusable payload."""


def describe_weathercode(code: Optional[int]) -> str:
    if code is None:
        return "Unknown"
    for codes, label in WEATHERCODE_LABELS.items():
        if code in codes:
            return label
    return "Unknown"


def build_params(latitude: float, longitude: float, days: int = settings.FORECAST_DAYS) -> Dict[str, Any]:
    return {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": "true",
        "daily": ",".join(DAILY_VARIABLES),
        "forecast_days": days,
        "timezone": "auto",
    }


# -------------------------
# Decode
# -------------------------
def _at(series: Optional[List[Any]], i: int) -> Any:
    if not series or i >= len(series):
        return None
    return series[i]


def decode_daily(daily: Dict[str, Any]) -> List[ForecastDay]:
    dates = daily.get("time")
    if not isinstance(dates, list):
        raise WeatherDataError("Invalid weather data: daily.time missing")

    days = []
    for i, d in enumerate(dates):
        days.append(ForecastDay(
            date=d,
            temp_max=_at(daily.get("temperature_2m_max"), i),
            temp_min=_at(daily.get("temperature_2m_min"), i),
            feels_like_max=_at(daily.get("apparent_temperature_max"), i),
            precipitation=_at(daily.get("precipitation_sum"), i),
            precipitation_prob=_at(daily.get("precipitation_probability_max"), i),
            wind_speed=_at(daily.get("windspeed_10m_max"), i),
            weathercode=_at(daily.get("weathercode"), i),
            uv_index=_at(daily.get("uv_index_max"), i),
        ))
    return days


def decode_forecast(data: Dict[str, Any], latitude: float, longitude: float) -> WeatherReport:
    if not isinstance(data, dict):
        raise WeatherDataError("Invalid weather data")
    current = data.get("current_weather")
    daily = data.get("daily")
    if not isinstance(current, dict) or not isinstance(daily, dict):
        raise WeatherDataError("Invalid weather data")

    try:
        return WeatherReport(
            latitude=latitude,
            longitude=longitude,
            current=CurrentWeather(**current),
            daily=decode_daily(daily),
        )
    except ValidationError as exc:
        raise WeatherDataError("Invalid weather data") from exc


# -------------------------
# Fetch
# -------------------------
async def fetch_forecast(
    latitude: float,
    longitude: float,
    client: Optional[httpx.AsyncClient] = None,
) -> WeatherReport:
    params = build_params(latitude, longitude)
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.WEATHER_TIMEOUT_SECONDS)

    try:
        resp = await client.get(settings.OPEN_METEO_URL, params=params)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Weather fetch failed: %s", exc)
        raise WeatherDataError("Failed to fetch weather") from exc
    finally:
        if owns_client:
            await client.aclose()

    try:
        return decode_forecast(data, latitude, longitude)
    except WeatherDataError:
        logger.warning("Weather payload rejected for %s,%s", latitude, longitude)
        raise
