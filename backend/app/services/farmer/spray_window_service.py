# backend/app/services/farmer/spray_window_service.py

"""
Spray-Window Evaluator

Classifies one forecast day for pesticide / fungicide application:
 - RED     : rain chance >= 70 % or wind > 15 km/h
 - AMBER   : max temperature >= 32 C or rain chance >= 40 %
 - GREEN   : otherwise
 - UNKNOWN : no day

RED is checked first and short-circuits; rain/wind always dominate heat.
"""

from typing import Optional
import enum

from app.schemas.farmer.weather import ForecastDay
from app.services.farmer.reference_ranges import SPRAY_THRESHOLDS, SprayThresholds


class SprayStatus(str, enum.Enum):
    RED = "RED"
    AMBER = "AMBER"
    GREEN = "GREEN"
    UNKNOWN = "UNKNOWN"


SPRAY_BADGES = {
    SprayStatus.RED: "Do NOT Spray",
    SprayStatus.AMBER: "Spray with Caution",
    SprayStatus.GREEN: "Safe to Spray",
    SprayStatus.UNKNOWN: "Unknown",
}


def _num(x: Optional[float]) -> float:
    return 0.0 if x is None else float(x)


def evaluate(day: Optional[ForecastDay], thresholds: SprayThresholds = SPRAY_THRESHOLDS) -> SprayStatus:
    if day is None:
        return SprayStatus.UNKNOWN

    rain_prob = _num(day.precipitation_prob)
    wind = _num(day.wind_speed)
    max_temp = _num(day.temp_max)

    if rain_prob >= thresholds.heavy_rain_pct or wind > thresholds.wind_kmh:
        return SprayStatus.RED

    if max_temp >= thresholds.high_temp_c or rain_prob >= thresholds.marginal_rain_pct:
        return SprayStatus.AMBER

    return SprayStatus.GREEN


def is_spray_safe_day(day: Optional[ForecastDay]) -> bool:
    return evaluate(day) is SprayStatus.GREEN


def spray_badge(day: Optional[ForecastDay]) -> str:
    return SPRAY_BADGES[evaluate(day)]


def is_heavy_rain(day: Optional[ForecastDay], thresholds: SprayThresholds = SPRAY_THRESHOLDS) -> bool:
    if day is None:
        return False
    return _num(day.precipitation_prob) >= thresholds.heavy_rain_pct


def is_frost_risk(day: Optional[ForecastDay], thresholds: SprayThresholds = SPRAY_THRESHOLDS) -> bool:
    # a missing minimum is not evidence of frost
    if day is None or day.temp_min is None:
        return False
    return day.temp_min <= thresholds.frost_temp_c
