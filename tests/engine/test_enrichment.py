"""Tests for top-N incident and pedestrian enrichment."""

from src.engine.enrichment import (
    analyze_crime_trend,
    attach_crime,
    attach_foot_traffic,
    crime_enrichment,
    foot_traffic_enrichment,
)
from src.models.scoring import RankedZone
from src.models.zone import TrendRow
from tests.conftest import MIDTOWN, UPTOWN, WATCHED


def _ranked(geoid: str) -> RankedZone:
    return RankedZone(
        geoid=geoid, tract_name="", display_name="", nta_name="",
        custom_score=50, resilience_score=50, foot_traffic_score=80, crime_score=60,
        flood_risk_score=50, rent_score=40, poi_score=30, avg_rent=None,
    )


class TestCrimeTrend:
    def test_predictions_against_current(self):
        row = TrendRow(geoid="1", values={"pred_2025": 5.0, "pred_2026": 6.0, "pred_2027": 7.0})
        assert analyze_crime_trend(row) == ("increasing", "30.0")

    def test_current_falls_back_to_last_observed(self):
        row = TrendRow(geoid="1", values={"year_2024": 8.0, "pred_2026": 6.0})
        assert analyze_crime_trend(row) == ("decreasing", "-25.0")

    def test_history_when_no_predictions(self, crime_rows):
        row = next(r for r in crime_rows if r.geoid == MIDTOWN)
        # 5.0 against the 2022-2024 mean of 4.333
        direction, change = analyze_crime_trend(row)
        assert direction == "increasing"
        assert change == "15.4"

    def test_unknown_without_data(self):
        assert analyze_crime_trend(TrendRow(geoid="1")) == ("unknown", "0")

    def test_flat_predictions_are_stable(self):
        """Predictions equal to the current year report a stable trend."""
        row = TrendRow(geoid="1", values={"pred_2025": 5.0, "pred_2026": 5.0, "pred_2027": 5.0})
        assert analyze_crime_trend(row) == ("stable", "0.0")


class TestCrimeEnrichment:
    def test_timeline_scaled(self, crime_rows):
        row = next(r for r in crime_rows if r.geoid == WATCHED)
        enrichment = crime_enrichment(_ranked(WATCHED), row)
        assert enrichment.main_score == 60
        assert enrichment.timeline["year_2024"] == 65
        assert enrichment.timeline["pred_2027"] == 80
        assert enrichment.metadata.missing_years == []

    def test_requested_years_only(self, crime_rows):
        row = next(r for r in crime_rows if r.geoid == MIDTOWN)
        enrichment = crime_enrichment(_ranked(MIDTOWN), row, years=("year_2020", "year_2024"))
        assert enrichment.timeline == {"year_2020": None, "year_2024": 50}
        assert enrichment.metadata.missing_years == ["year_2020"]

    def test_default_without_row(self):
        enrichment = crime_enrichment(_ranked("1"), None)
        assert enrichment.timeline == {}
        assert enrichment.trend_direction == "unknown"
        assert enrichment.trend_change == "0"
        assert enrichment.metadata.data_gap_notes == ["No detailed crime data available"]


class TestFootTrafficEnrichment:
    def test_full_series(self, foot_traffic_rows):
        row = next(r for r in foot_traffic_rows if r.geoid == WATCHED)
        enrichment = foot_traffic_enrichment(_ranked(WATCHED), row, ["morning", "evening"])
        assert enrichment.main_score == 80
        assert enrichment.periods_used == ("morning", "evening")
        assert enrichment.timeline["2024"] == 70
        assert set(enrichment.by_period) == {"morning", "afternoon", "evening"}
        assert enrichment.trend_direction == "increasing"

    def test_default_without_row(self):
        enrichment = foot_traffic_enrichment(_ranked("1"), None)
        assert enrichment.timeline == {}
        assert enrichment.metadata.optimization_used == "none"
        assert enrichment.trend_direction == "unknown"


class TestAttach:
    def test_every_zone_enriched(self, crime_rows, foot_traffic_rows):
        zones = [_ranked(WATCHED), _ranked(UPTOWN)]
        attach_crime(zones, crime_rows)
        attach_foot_traffic(zones, foot_traffic_rows, ["morning"])
        assert zones[0].crime.timeline["pred_2025"] == 60
        assert zones[1].crime.trend_direction == "unknown"
        assert zones[0].foot_traffic.periods_used == ("morning",)
        assert zones[1].foot_traffic.timeline == {}

    def test_failed_fetch_gives_defaults(self):
        zones = [_ranked(WATCHED)]
        attach_crime(zones, None)
        attach_foot_traffic(zones, None)
        assert zones[0].crime.main_score == 60
        assert zones[0].foot_traffic.main_score == 80
