# backend/app/schemas/farmer/weather.py

from typing import Optional, List
from datetime import date
from pydantic import BaseModel, ConfigDict


class ForecastDay(BaseModel):
    date: date
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None
    feels_like_max: Optional[float] = None
    precipitation: Optional[float] = None
    precipitation_prob: Optional[float] = None
    wind_speed: Optional[float] = None
    weathercode: Optional[int] = None
    uv_index: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class CurrentWeather(BaseModel):
    temperature: Optional[float] = None
    windspeed: Optional[float] = None
    winddirection: Optional[float] = None
    weathercode: Optional[int] = None
    time: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class WeatherReport(BaseModel):
    latitude: float
    longitude: float
    current: CurrentWeather
    daily: List[ForecastDay]


class SprayWindow(BaseModel):
    date: date
    status: str
    badge: str
    condition: str


class ForecastSummary(BaseModel):
    heavy_rain: bool
    frost_risk: bool
    spray_safe: bool
    irrigation_advice: Optional[str] = None
    irrigation_message: str = ""
    spray_windows: List[SprayWindow] = []


class SmartAction(BaseModel):
    id: str
    title: str
    target_pest: str = ""
    chemical: str = ""
    dosage: str = ""
    stage: str = ""

    model_config = ConfigDict(extra="ignore")


class WeatherOverview(BaseModel):
    report: WeatherReport
    summary: ForecastSummary
    smart_actions: List[SmartAction] = []
