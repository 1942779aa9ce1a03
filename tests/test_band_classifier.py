"""
Band classifier and reference range tests.

Run with: pytest tests/test_band_classifier.py -v
"""
import math

import pytest

from app.services.farmer.band_classifier import (
    BandStatus,
    classify,
    classify_parameter,
    worst_status,
)
from app.services.farmer.reference_ranges import (
    SOIL_PARAMETERS,
    WATER_PARAMETERS,
    Direction,
    advisory_for,
    get_parameter,
    normalize_metric,
)

PH_RANGE = (6.0, 7.5)


class TestClassify:
    """RAG band around the optimal range."""

    def test_inside_band_is_green(self):
        assert classify(6.5, PH_RANGE) is BandStatus.green

    def test_edges_are_green(self):
        assert classify(6.0, PH_RANGE) is BandStatus.green
        assert classify(7.5, PH_RANGE) is BandStatus.green

    def test_just_below_band_is_amber(self):
        # margin = 0.15 * 1.5 = 0.225, amber covers [5.775, 6.0)
        assert classify(5.8, PH_RANGE) is BandStatus.amber

    def test_far_below_band_is_red(self):
        assert classify(5.0, PH_RANGE) is BandStatus.red

    def test_above_band(self):
        assert classify(7.7, PH_RANGE) is BandStatus.amber
        assert classify(8.5, PH_RANGE) is BandStatus.red

    def test_missing_value_is_gray(self):
        assert classify(None, PH_RANGE) is BandStatus.gray
        assert classify(float("nan"), PH_RANGE) is BandStatus.gray

    def test_zero_width_band_has_no_amber(self):
        assert classify(5.0, (5.0, 5.0)) is BandStatus.green
        assert classify(5.01, (5.0, 5.0)) is BandStatus.red
        assert classify(4.99, (5.0, 5.0)) is BandStatus.red

    def test_custom_margin_fraction(self):
        assert classify(5.5, PH_RANGE, margin_fraction=0.5) is BandStatus.amber
        assert classify(5.5, PH_RANGE, margin_fraction=0.1) is BandStatus.red

    def test_idempotent(self):
        for value in (4.0, 5.8, 6.5, 7.6, 9.0, None):
            assert classify(value, PH_RANGE) is classify(value, PH_RANGE)

    def test_severity_never_decreases_moving_away_from_band(self):
        severity = {BandStatus.green: 0, BandStatus.amber: 1, BandStatus.red: 2}
        below = [6.0 - i * 0.05 for i in range(40)]
        above = [7.5 + i * 0.05 for i in range(40)]
        for series in (below, above):
            ranks = [severity[classify(v, PH_RANGE)] for v in series]
            assert ranks == sorted(ranks)


class TestClassifyParameter:
    """Advisory text attached to out-of-band results."""

    def test_green_has_no_advisory(self):
        result = classify_parameter(SOIL_PARAMETERS["soil_ph"], 6.8)
        assert result.status == "green"
        assert result.advisory == ""

    def test_low_value_gets_deficiency_text(self):
        result = classify_parameter(SOIL_PARAMETERS["nitrogen"], 150.0)
        assert result.status == "red"
        assert result.advisory == "Apply recommended dose of nitrogen fertilizer."

    def test_high_value_gets_toxicity_text(self):
        result = classify_parameter(SOIL_PARAMETERS["nitrogen"], 470.0)
        assert result.status == "amber"
        assert "Reduce nitrogen" in result.advisory

    def test_unregistered_advisory_is_empty(self):
        result = classify_parameter(SOIL_PARAMETERS["mn"], 0.1)
        assert result.status == "red"
        assert result.advisory == ""

    def test_gray_keeps_value_absent(self):
        result = classify_parameter(WATER_PARAMETERS["tds"], math.nan)
        assert result.status == "gray"
        assert result.value is None


class TestWorstStatus:

    def test_red_beats_everything(self):
        assert worst_status(["green", "amber", "red", "gray"]) is BandStatus.red

    def test_gray_only_when_nothing_known(self):
        assert worst_status(["gray", "gray"]) is BandStatus.gray
        assert worst_status(["gray", "green"]) is BandStatus.green

    def test_empty_is_gray(self):
        assert worst_status([]) is BandStatus.gray


class TestReferenceRanges:

    def test_green_ranges_are_ordered(self):
        for table in (SOIL_PARAMETERS, WATER_PARAMETERS):
            for param in table.values():
                lo, hi = param.green
                assert lo <= hi, param.key

    def test_same_key_differs_between_families(self):
        assert get_parameter("soil", "ec").green != get_parameter("water", "ec").green

    @pytest.mark.parametrize("code,key", [("N", "nitrogen"), ("P", "phosphorus"), ("K", "potassium")])
    def test_analytics_aliases(self, code, key):
        assert normalize_metric(code) == key

    def test_unknown_metric_passes_through(self):
        assert normalize_metric("soil_ph") == "soil_ph"

    def test_advisory_lookup(self):
        assert advisory_for("zn", Direction.deficiency).startswith("Apply zinc")
        assert advisory_for("zn", Direction.excess) == ""
