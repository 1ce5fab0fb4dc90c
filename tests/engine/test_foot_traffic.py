"""Tests for time-of-day pedestrian scoring."""

from src.engine.foot_traffic import (
    analyze_trend,
    build_by_period,
    build_combinations,
    build_timeline,
    period_column,
    period_score,
    trend_direction,
)
from src.models.zone import TrendRow
from tests.conftest import MIDTOWN, WATCHED

ALL = ("morning", "afternoon", "evening")


class TestPeriodColumn:
    def test_all_periods_use_average(self):
        assert period_column(ALL, "2024") == "average_2024"

    def test_pairs_in_any_order(self):
        assert period_column(["evening", "morning"], "2024") == "morning_evening_2024"
        assert period_column(["afternoon", "morning"], "pred_2025") == "morning_afternoon_pred_2025"

    def test_single_period(self):
        assert period_column(["evening"], "2023") == "evening_2023"

    def test_unknown_combination(self):
        assert period_column(["morning", "night"], "2024") is None


class TestPeriodScore:
    def test_precomputed_column(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        assert period_score(row, ALL, "2024") == 7.0
        assert period_score(row, ["morning", "evening"], "2024") == 7.0
        assert period_score(row, ["afternoon", "evening"], "2024") == 7.5

    def test_missing_precomputed_reads_zero(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == MIDTOWN)
        assert period_score(row, ["morning", "evening"], "2024") == 0

    def test_mean_of_present_periods(self):
        row = TrendRow(geoid="1", values={"morning_2024": 4.0, "night_2024": 8.0})
        assert period_score(row, ["morning", "night", "dawn"], "2024") == 6.0


class TestTimeline:
    def test_available_and_missing_years(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        timeline, metadata = build_timeline(row, ALL)
        assert timeline["2024"] == 70
        assert timeline["2020"] is None
        assert "2020" in metadata.missing_years
        assert metadata.available_years == ["2023", "2024", "pred_2025", "pred_2026", "pred_2027"]
        assert metadata.optimization_used == "database_precalculated"

    def test_by_period_scaled(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        by_period = build_by_period(row)
        assert by_period["morning"]["2024"] == 60
        assert by_period["evening"]["2020"] is None

    def test_combinations_raw(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        combos = build_combinations(row)
        assert combos["2024"]["morning_afternoon"] == 6.5
        assert combos["2024"]["average_all"] == 7.0
        assert combos["2021"]["average_all"] is None


class TestTrend:
    def test_predictions_against_current(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        direction, change = analyze_trend(row, ALL)
        # future mean 8.0 vs 7.0 in 2024
        assert direction == "increasing"
        assert change == "14.3"

    def test_history_when_no_predictions(self):
        row = TrendRow(geoid="1", values={"average_2022": 4.0, "average_2023": 6.0, "average_2024": 4.0})
        direction, change = analyze_trend(row, ALL)
        assert direction == "decreasing"
        assert change == "-20.0"

    def test_unknown_without_data(self):
        assert analyze_trend(TrendRow(geoid="1"), ALL) == ("unknown", "0")


class TestTrendDirection:
    def test_directions(self):
        """Shared by incident and pedestrian trends; equal values read as stable."""
        assert trend_direction(8.0, 7.0) == "increasing"
        assert trend_direction(6.0, 7.0) == "decreasing"
        assert trend_direction(7.0, 7.0) == "stable"
