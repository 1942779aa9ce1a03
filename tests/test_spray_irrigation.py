"""
Spray-window and irrigation/risk summary tests.

Run with: pytest tests/test_spray_irrigation.py -v
"""
from datetime import date

from app.schemas.farmer.weather import ForecastDay
from app.services.farmer.irrigation_risk_service import (
    IrrigationAdvice,
    irrigation_advice,
    smart_actions,
    summarize_forecast,
)
from app.services.farmer.spray_schedule import get_schedule
from app.services.farmer.spray_window_service import (
    SprayStatus,
    evaluate,
    is_frost_risk,
    spray_badge,
)

D = date(2025, 4, 1)


class TestSprayWindow:
    """Single-day spray classification."""

    def test_heavy_rain_is_red(self):
        day = ForecastDay(date=D, temp_max=25, precipitation_prob=75, wind_speed=5)
        assert evaluate(day) is SprayStatus.RED

    def test_hot_day_is_amber(self):
        day = ForecastDay(date=D, temp_max=33, precipitation_prob=10, wind_speed=5)
        assert evaluate(day) is SprayStatus.AMBER

    def test_calm_day_is_green(self):
        day = ForecastDay(date=D, temp_max=25, precipitation_prob=10, wind_speed=5)
        assert evaluate(day) is SprayStatus.GREEN

    def test_wind_dominates_heat(self):
        day = ForecastDay(date=D, temp_max=35, precipitation_prob=0, wind_speed=16)
        assert evaluate(day) is SprayStatus.RED

    def test_wind_at_threshold_is_not_red(self):
        day = ForecastDay(date=D, temp_max=20, precipitation_prob=0, wind_speed=15)
        assert evaluate(day) is SprayStatus.GREEN

    def test_marginal_rain_is_amber(self):
        day = ForecastDay(date=D, temp_max=20, precipitation_prob=40, wind_speed=5)
        assert evaluate(day) is SprayStatus.AMBER

    def test_missing_numbers_count_as_zero(self):
        assert evaluate(ForecastDay(date=D)) is SprayStatus.GREEN

    def test_no_day_is_unknown(self):
        assert evaluate(None) is SprayStatus.UNKNOWN
        assert spray_badge(None) == "Unknown"

    def test_badges(self):
        assert spray_badge(ForecastDay(date=D, precipitation_prob=90)) == "Do NOT Spray"
        assert spray_badge(ForecastDay(date=D, temp_max=32)) == "Spray with Caution"
        assert spray_badge(ForecastDay(date=D)) == "Safe to Spray"

    def test_frost_needs_a_minimum(self):
        assert is_frost_risk(ForecastDay(date=D, temp_min=1.5))
        assert not is_frost_risk(ForecastDay(date=D))


class TestIrrigationAdvice:

    def test_red_on_third_day_blocks_irrigation(self, make_forecast):
        days = make_forecast({}, {}, {"precipitation_prob": 80}, {"temp_max": 34})
        assert irrigation_advice(days) is IrrigationAdvice.NOT_RECOMMENDED

    def test_red_after_lookahead_is_ignored(self, make_forecast):
        days = make_forecast({}, {}, {}, {"precipitation_prob": 80})
        assert irrigation_advice(days) is IrrigationAdvice.MODERATE

    def test_hot_and_dry_anywhere_recommends(self, make_forecast):
        days = make_forecast({}, {}, {}, {}, {"temp_max": 33, "precipitation_prob": 5})
        assert irrigation_advice(days) is IrrigationAdvice.RECOMMENDED_HOT_DRY

    def test_hot_but_showery_is_moderate(self, make_forecast):
        days = make_forecast({"temp_max": 33, "precipitation_prob": 35})
        assert irrigation_advice(days) is IrrigationAdvice.MODERATE

    def test_empty_forecast_has_no_advice(self):
        assert irrigation_advice([]) is None


class TestForecastSummary:

    def test_flags(self, make_forecast):
        days = make_forecast(
            {"precipitation_prob": 72},
            {"temp_min": 1.0},
            {},
        )
        summary = summarize_forecast(days)
        assert summary.heavy_rain
        assert summary.frost_risk
        assert summary.spray_safe
        assert summary.irrigation_advice == "NOT_RECOMMENDED"
        assert summary.irrigation_message.startswith("Irrigation not recommended")

    def test_spray_windows_per_day(self, make_forecast):
        days = make_forecast({"weathercode": 61, "precipitation_prob": 90}, {"weathercode": 0})
        windows = summarize_forecast(days).spray_windows
        assert [w.status for w in windows] == ["RED", "GREEN"]
        assert windows[0].condition == "Rain"
        assert windows[1].badge == "Safe to Spray"

    def test_empty_forecast(self):
        summary = summarize_forecast([])
        assert not summary.spray_safe
        assert summary.irrigation_advice is None
        assert summary.spray_windows == []


class TestSmartActions:

    def test_top_three_when_dry(self, make_forecast):
        actions = smart_actions(get_schedule(), make_forecast({}, {}, {}))
        assert [a.id for a in actions] == ["dormant-oil", "green-tip-scab", "pink-bud-scab"]

    def test_scab_hidden_when_rain_expected(self, make_forecast):
        days = make_forecast({}, {"precipitation_prob": 85}, {})
        actions = smart_actions(get_schedule(), days)
        assert len(actions) == 3
        assert all("scab" not in a.target_pest.lower() for a in actions)
        assert [a.id for a in actions] == ["dormant-oil", "petal-fall-mite", "walnut-size-blotch"]

    def test_filter_is_stable(self, make_forecast):
        candidates = [
            {"id": "b", "title": "B", "target_pest": "mite"},
            {"id": "a", "title": "A", "target_pest": "Apple scab"},
            {"id": "c", "title": "C", "target_pest": "aphid"},
        ]
        days = make_forecast({"wind_speed": 30})
        assert [a.id for a in smart_actions(candidates, days)] == ["b", "c"]

    def test_schedule_is_copied(self):
        schedule = get_schedule()
        schedule[0]["title"] = "changed"
        assert get_schedule()[0]["title"] != "changed"
