# backend/app/services/farmer/irrigation_risk_service.py

"""
Irrigation / Risk Summarizer (7-day window)

Derives from a daily forecast:
 - heavy_rain        : any day with rain chance >= 70 %
 - frost_risk        : any day with min temperature <= 2 C
 - spray_safe        : any GREEN spray window
 - irrigation_advice : first match of
       1. any of the next 3 days RED          -> not recommended
       2. any day hot (>= 32 C) and dry (< 30 %) -> recommended
       3. otherwise                           -> moderate, only if soil dry
 - smart_actions     : spray-schedule candidates, rain-sensitive ones hidden
                       while the next 3 days hold a RED window; top 3 kept
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence
import enum

from app.schemas.farmer.weather import ForecastDay, ForecastSummary, SmartAction, SprayWindow
from app.services.farmer.reference_ranges import SPRAY_THRESHOLDS
from app.services.farmer.spray_window_service import (
    SprayStatus,
    evaluate,
    is_frost_risk,
    is_heavy_rain,
    is_spray_safe_day,
    spray_badge,
)
from app.services.farmer.weather_service import describe_weathercode

LOOKAHEAD_DAYS = 3
SMART_ACTION_LIMIT = 3

# treatments that wash off in rain
RAIN_SENSITIVE_PESTS = ("scab",)


class IrrigationAdvice(str, enum.Enum):
    NOT_RECOMMENDED = "NOT_RECOMMENDED"
    RECOMMENDED_HOT_DRY = "RECOMMENDED_HOT_DRY"
    MODERATE = "MODERATE"


IRRIGATION_MESSAGES = {
    IrrigationAdvice.NOT_RECOMMENDED: "Irrigation not recommended, rainfall or wind expected",
    IrrigationAdvice.RECOMMENDED_HOT_DRY: "Irrigation recommended, hot & dry conditions",
    IrrigationAdvice.MODERATE: "Moderate irrigation only if soil is dry",
}


# -------------------------
# Window helpers
# -------------------------
def _next_days(days: Sequence[ForecastDay], n: int = LOOKAHEAD_DAYS) -> Sequence[ForecastDay]:
    return days[:n]


def red_in_lookahead(days: Sequence[ForecastDay], n: int = LOOKAHEAD_DAYS) -> bool:
    return any(evaluate(d) is SprayStatus.RED for d in _next_days(days, n))


def _is_hot_dry(day: ForecastDay) -> bool:
    temp_max = day.temp_max or 0.0
    rain_prob = day.precipitation_prob or 0.0
    return temp_max >= SPRAY_THRESHOLDS.high_temp_c and rain_prob < SPRAY_THRESHOLDS.dry_rain_pct


# -------------------------
# Irrigation advice
# -------------------------
def irrigation_advice(days: Sequence[ForecastDay]) -> Optional[IrrigationAdvice]:
    if not days:
        return None

    if red_in_lookahead(days):
        return IrrigationAdvice.NOT_RECOMMENDED

    if any(_is_hot_dry(d) for d in days if d is not None):
        return IrrigationAdvice.RECOMMENDED_HOT_DRY

    return IrrigationAdvice.MODERATE


def summarize_forecast(days: Sequence[ForecastDay]) -> ForecastSummary:
    advice = irrigation_advice(days)
    windows = [
        SprayWindow(
            date=d.date,
            status=evaluate(d).value,
            badge=spray_badge(d),
            condition=describe_weathercode(d.weathercode),
        )
        for d in days
        if d is not None
    ]
    return ForecastSummary(
        heavy_rain=any(is_heavy_rain(d) for d in days),
        frost_risk=any(is_frost_risk(d) for d in days),
        spray_safe=any(is_spray_safe_day(d) for d in days),
        irrigation_advice=advice.value if advice else None,
        irrigation_message=IRRIGATION_MESSAGES[advice] if advice else "",
        spray_windows=windows,
    )


# -------------------------
# Smart action filtering
# -------------------------
def is_rain_sensitive(candidate: Dict[str, Any]) -> bool:
    target = (candidate.get("target_pest") or "").lower()
    return any(p in target for p in RAIN_SENSITIVE_PESTS)


def smart_actions(
    candidates: Iterable[Dict[str, Any]],
    days: Sequence[ForecastDay],
    limit: int = SMART_ACTION_LIMIT,
) -> List[SmartAction]:
    """Stable filter over the schedule; never re-sorted."""
    blocked = red_in_lookahead(days)
    kept = []
    for item in candidates:
        if blocked and is_rain_sensitive(item):
            continue
        kept.append(SmartAction(**item))
        if len(kept) >= limit:
            break
    return kept
