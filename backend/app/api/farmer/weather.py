# backend/app/api/farmer/weather.py

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

import httpx

from app.schemas.farmer.weather import ForecastSummary, WeatherOverview, WeatherReport
from app.services.farmer.irrigation_risk_service import smart_actions, summarize_forecast
from app.services.farmer.spray_schedule import get_schedule
from app.services.farmer.weather_service import WeatherDataError, fetch_forecast

router = APIRouter()


def get_weather_client() -> Optional[httpx.AsyncClient]:
    """None lets fetch_forecast open (and close) its own client."""
    return None


async def _report(latitude: float, longitude: float, client) -> WeatherReport:
    try:
        return await fetch_forecast(latitude, longitude, client=client)
    except WeatherDataError as exc:
        raise HTTPException(status_code=502, detail=str(exc))


@router.get("/weather", response_model=WeatherOverview)
async def weather_overview(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    client=Depends(get_weather_client),
):
    """
    7-day forecast, spray windows, irrigation advice and the spray-schedule
    actions still worth doing given the next three days.
    """
    report = await _report(lat, lon, client)
    return WeatherOverview(
        report=report,
        summary=summarize_forecast(report.daily),
        smart_actions=smart_actions(get_schedule(), report.daily),
    )


@router.get("/weather/summary", response_model=ForecastSummary)
async def weather_summary(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    client=Depends(get_weather_client),
):
    report = await _report(lat, lon, client)
    return summarize_forecast(report.daily)
