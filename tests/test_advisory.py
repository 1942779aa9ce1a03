"""
Measurement decode/submission and advisory aggregator tests.

Run with: pytest tests/test_advisory.py -v
"""
import asyncio
from datetime import date

import pytest

from app.schemas.farmer.measurement import Sample, SoilTestCreate, WaterTestCreate
from app.services.farmer.measurement_service import (
    EmptySubmissionError,
    analytics_sample,
    coerce_value,
    decode_analytics_rows,
    decode_soil_row,
    decode_water_row,
    nutrient_history,
    record_soil_test,
    record_water_test,
)
from app.services.farmer.measurement_store import InMemoryMeasurementStore
from app.services.farmer.soil_advisory_service import (
    action_list,
    deficiency_alerts,
    field_advisory,
    health_matrix,
    select_latest_sample,
    summarize_sample,
    top_summary,
)


def soil_sample(recorded, source="manual", **values):
    return Sample(field_id="f1", family="soil", source=source, recorded_date=recorded, values=values)


def reading(metric, value, recorded):
    return {"field_id": "f1", "metric": metric, "value": value, "recorded_date": recorded}


class TestDecode:
    """Raw rows become typed samples; junk becomes absent."""

    @pytest.mark.parametrize("raw,expected", [
        (6.5, 6.5),
        (7, 7.0),
        ("5.2", 5.2),
        ("  ", None),
        ("n/a", None),
        (None, None),
        (True, None),
        (float("nan"), None),
    ])
    def test_coerce_value(self, raw, expected):
        assert coerce_value(raw) == expected

    def test_soil_row(self):
        sample = decode_soil_row({"field_id": "f1", "recorded_date": "2025-03-10", "soil_ph": "6.2", "zn": "bad"})
        assert sample.recorded_date == date(2025, 3, 10)
        assert sample.values["soil_ph"] == 6.2
        assert sample.values["zn"] is None
        assert sample.source == "manual"

    def test_row_without_date_is_dropped(self):
        assert decode_soil_row({"field_id": "f1", "soil_ph": 6.2}) is None

    def test_water_row_uses_test_date(self):
        sample = decode_water_row({"field_id": "f1", "test_date": date(2025, 2, 1), "ph": 7.1})
        assert sample.family == "water"
        assert sample.recorded_date == date(2025, 2, 1)

    def test_analytics_rows_sorted_and_normalized(self):
        rows = [
            {"field_id": "f1", "metric_type": "N", "metric_value": 300, "recorded_date": "2025-01-01"},
            {"field_id": "f1", "metric_type": "P", "metric_value": 10, "recorded_date": "2025-02-01"},
            {"field_id": "f1", "metric_type": "K", "metric_value": 200, "recorded_date": None},
        ]
        readings = decode_analytics_rows(rows)
        assert [r["metric"] for r in readings] == ["phosphorus", "nitrogen"]

    def test_analytics_sample_uses_newest_date(self):
        readings = [
            reading("nitrogen", 300.0, date(2025, 2, 1)),
            reading("phosphorus", 25.0, date(2025, 2, 1)),
            reading("potassium", 100.0, date(2025, 1, 1)),
        ]
        sample = analytics_sample(readings, "f1")
        assert sample.source == "analytics"
        assert sample.recorded_date == date(2025, 2, 1)
        assert set(sample.values) == {"nitrogen", "phosphorus"}

    def test_no_readings_no_sample(self):
        assert analytics_sample([], "f1") is None


class TestSubmission:

    def test_empty_soil_submission_rejected_before_write(self):
        store = InMemoryMeasurementStore()
        with pytest.raises(EmptySubmissionError, match="at least one value"):
            asyncio.run(record_soil_test(store, "f1", SoilTestCreate(user_id="u1")))
        assert asyncio.run(store.latest_soil_results("f1")) == []

    def test_date_defaults_to_today(self):
        store = InMemoryMeasurementStore()
        sample = asyncio.run(record_soil_test(store, "f1", SoilTestCreate(user_id="u1", soil_ph=6.4)))
        assert sample.recorded_date == date.today()
        assert sample.values["soil_ph"] == 6.4

    def test_water_submission(self):
        store = InMemoryMeasurementStore()
        payload = WaterTestCreate(user_id="u1", recorded_date=date(2025, 3, 1), ph=7.0, report_url="http://lab/r.pdf")
        sample = asyncio.run(record_water_test(store, "f1", payload))
        assert sample.family == "water"
        rows = asyncio.run(store.latest_water_results("f1"))
        assert rows[0]["report_url"] == "http://lab/r.pdf"

    def test_empty_water_submission_rejected(self):
        store = InMemoryMeasurementStore()
        with pytest.raises(EmptySubmissionError):
            asyncio.run(record_water_test(store, "f1", WaterTestCreate(user_id="u1", report_url="x")))

    def test_nan_only_submission_is_empty(self):
        store = InMemoryMeasurementStore()
        asyncio.run(record_soil_test(store, "f1", SoilTestCreate(user_id="u1", recorded_date=date(2025, 4, 1), soil_ph=5.0)))
        with pytest.raises(EmptySubmissionError):
            asyncio.run(record_soil_test(
                store, "f1", SoilTestCreate(user_id="u1", recorded_date=date(2025, 5, 1), soil_ph=float("nan")),
            ))
        with pytest.raises(EmptySubmissionError):
            asyncio.run(record_water_test(store, "f1", WaterTestCreate(user_id="u1", ph=float("inf"))))
        rows = asyncio.run(store.latest_soil_results("f1"))
        assert [r["recorded_date"] for r in rows] == [date(2025, 4, 1)]

    def test_nan_next_to_a_real_value_is_stored_absent(self):
        store = InMemoryMeasurementStore()
        payload = SoilTestCreate(user_id="u1", recorded_date=date(2025, 4, 1), soil_ph=float("nan"), nitrogen=280.0)
        sample = asyncio.run(record_soil_test(store, "f1", payload))
        assert sample.values["soil_ph"] is None
        assert asyncio.run(store.latest_soil_results("f1"))[0]["soil_ph"] is None


class TestSummaryView:
    """Binary lacking / excess view of the latest sample."""

    def test_lacking_and_excess(self):
        sample = soil_sample(date(2025, 3, 1), soil_ph=5.8, nitrogen=500.0, zn=1.0, fe=None)
        summary = summarize_sample(sample)
        assert [e.key for e in summary.lacking] == ["soil_ph"]
        assert [e.key for e in summary.excess] == ["nitrogen"]

    def test_marginal_value_is_still_lacking(self):
        # amber in the alert view, plain "lacking" in the summary view
        summary = summarize_sample(soil_sample(date(2025, 3, 1), soil_ph=5.9))
        assert summary.lacking[0].key == "soil_ph"

    def test_no_sample(self):
        summary = summarize_sample(None)
        assert summary.lacking == [] and summary.excess == []


class TestLatestSample:

    def test_newer_analytics_wins(self):
        manual = soil_sample(date(2025, 1, 1))
        analytics = soil_sample(date(2025, 2, 1), source="analytics")
        assert select_latest_sample(manual, analytics) is analytics

    def test_tie_goes_to_manual(self):
        manual = soil_sample(date(2025, 2, 1))
        analytics = soil_sample(date(2025, 2, 1), source="analytics")
        assert select_latest_sample(manual, analytics) is manual

    def test_either_missing(self):
        manual = soil_sample(date(2025, 2, 1))
        assert select_latest_sample(manual, None) is manual
        assert select_latest_sample(None, manual) is manual
        assert select_latest_sample(None, None) is None


class TestDeficiencyAlerts:

    def test_newest_reading_per_metric(self):
        readings = [
            reading("nitrogen", 150.0, date(2025, 3, 1)),
            reading("nitrogen", 300.0, date(2025, 1, 1)),
            reading("soil_ph", 5.8, date(2025, 2, 1)),
        ]
        alerts = {a.parameter: a for a in deficiency_alerts(readings)}
        assert alerts["nitrogen"].status == "red"
        assert alerts["soil_ph"].status == "amber"

    def test_absent_newest_value_is_omitted(self):
        readings = [
            reading("nitrogen", None, date(2025, 3, 1)),
            reading("nitrogen", 150.0, date(2025, 1, 1)),
        ]
        assert deficiency_alerts(readings) == []

    def test_action_list_red_first_deduped_capped(self):
        readings = [
            reading("soil_ph", 5.8, date(2025, 3, 1)),       # amber
            reading("nitrogen", 100.0, date(2025, 3, 1)),    # red
            reading("phosphorus", 5.0, date(2025, 3, 1)),    # red
            reading("potassium", 50.0, date(2025, 3, 1)),    # red
            reading("mn", 0.1, date(2025, 3, 1)),            # red, no advisory
        ]
        actions = action_list(deficiency_alerts(readings))
        assert len(actions) == 3
        assert actions[0] == "Apply recommended dose of nitrogen fertilizer."
        assert all("lime" not in a for a in actions)

    def test_action_list_dedupes(self):
        readings = [reading("nitrogen", 100.0, date(2025, 3, 1))]
        alerts = deficiency_alerts(readings) * 2
        assert action_list(alerts) == ["Apply recommended dose of nitrogen fertilizer."]


class TestStoreBackedViews:

    def _store_with_field(self):
        store = InMemoryMeasurementStore()
        field = asyncio.run(store.create_field("u1", "North block"))
        return store, field["id"]

    def test_field_advisory_prefers_newer_analytics(self):
        store, fid = self._store_with_field()
        asyncio.run(record_soil_test(store, fid, SoilTestCreate(user_id="u1", recorded_date=date(2025, 1, 1), soil_ph=6.5)))
        asyncio.run(store.insert_analytic(fid, "N", 150.0, date(2025, 2, 1)))

        advisory = asyncio.run(field_advisory(store, fid, "soil"))
        assert advisory.has_test
        assert advisory.source == "analytics"
        assert advisory.summary.lacking[0].key == "nitrogen"
        assert advisory.actions == ["Apply recommended dose of nitrogen fertilizer."]

    def test_field_advisory_without_tests(self):
        store, fid = self._store_with_field()
        advisory = asyncio.run(field_advisory(store, fid, "water"))
        assert not advisory.has_test
        assert advisory.classifications == []
        assert advisory.deficiency_alerts == []

    def test_top_summary_picks_newest_field(self):
        store = InMemoryMeasurementStore()
        a = asyncio.run(store.create_field("u1", "A"))
        b = asyncio.run(store.create_field("u1", "B"))
        asyncio.run(record_soil_test(store, a["id"], SoilTestCreate(user_id="u1", recorded_date=date(2025, 1, 1), soil_ph=5.0)))
        asyncio.run(record_soil_test(store, b["id"], SoilTestCreate(user_id="u1", recorded_date=date(2025, 3, 1), soil_ph=8.0)))

        top = asyncio.run(top_summary(store, "u1", "soil"))
        assert top.field_name == "B"
        assert [e.key for e in top.summary.excess] == ["soil_ph"]

    def test_top_summary_empty(self):
        top = asyncio.run(top_summary(InMemoryMeasurementStore(), "nobody", "water"))
        assert top.field_id is None

    def test_health_matrix(self):
        store, fid = self._store_with_field()
        asyncio.run(record_soil_test(store, fid, SoilTestCreate(user_id="u1", recorded_date=date(2025, 1, 1), soil_ph=5.0, nitrogen=300.0)))

        matrix = asyncio.run(health_matrix(store, fid))
        assert matrix.soil == "red"
        assert "Soil pH" in matrix.soil_detail
        assert matrix.water == "gray"
        assert matrix.pest == "gray"
        assert matrix.pest_detail == "No pest data"

    def test_nutrient_history(self):
        store, fid = self._store_with_field()
        for d, n in ((date(2025, 1, 1), 250.0), (date(2025, 3, 1), 300.0)):
            asyncio.run(record_soil_test(store, fid, SoilTestCreate(user_id="u1", recorded_date=d, nitrogen=n)))
        history = asyncio.run(nutrient_history(store, fid))
        assert history["dates"] == [date(2025, 3, 1), date(2025, 1, 1)]
        assert history["nutrients"]["nitrogen"] == [300.0, 250.0]
