"""Tests for rent filtering, zone scoring and top-N selection."""

import math

from src.engine.percentages import calculate_percentages
from src.engine.ranking import (
    FALLBACK_SOURCE,
    PREDICTION_SOURCE,
    filter_by_rent,
    score_zone,
    score_zones,
    select_top,
    top_count,
    watched_rents,
)
from src.engine.weights import build_weight_set
from src.models.scoring import CompositionFilter, PercentageResults, RankedZone, RankingRequest
from src.models.zone import TrendRow, ZoneRow
from tests.conftest import BROOKLYN, MIDTOWN, UPTOWN, WATCHED


def _ranked(geoid: str, score: float) -> RankedZone:
    return RankedZone(
        geoid=geoid, tract_name="", display_name="", nta_name="",
        custom_score=score, resilience_score=0, foot_traffic_score=0, crime_score=0,
        flood_risk_score=0, rent_score=0, poi_score=0, avg_rent=None,
    )


class TestRentFilter:
    def test_range_inclusive(self, zones):
        kept = filter_by_rent(zones, (1800, 2500))
        assert {z.geoid for z in kept} == {WATCHED, MIDTOWN, BROOKLYN}

    def test_unknown_rent_always_kept(self, zones):
        """Zones with no rent figure are never filtered out."""
        kept = filter_by_rent(zones, (0, 100))
        assert [z.geoid for z in kept] == [BROOKLYN]

    def test_watched_zone_bypasses_filter(self, zones):
        """A watched zone survives a rent range that excludes it."""
        kept = filter_by_rent(zones, (0, 100), watched={WATCHED})
        assert {z.geoid for z in kept} == {WATCHED, BROOKLYN}

    def test_unbounded(self, zones):
        assert len(filter_by_rent(zones, (0, math.inf))) == len(zones)

    def test_watched_rents_report(self, zones):
        report = watched_rents(zones, (0, 2000), watched={WATCHED, "36061099999"})
        assert len(report) == 1
        assert report[0].geoid == WATCHED
        assert report[0].avg_rent == 2500
        assert not report[0].passed


class TestTopSelection:
    def test_count_rounds_up(self):
        """Fractional counts round up to the next whole zone."""
        assert top_count(37, 10) == 4
        assert top_count(10, 10) == 1
        assert top_count(0, 10) == 0
        assert top_count(5, 100) == 5

    def test_sorted_descending(self):
        ranked = [_ranked("a", 10), _ranked("b", 90), _ranked("c", 50)]
        top = select_top(ranked, 50)
        assert [z.geoid for z in top] == ["b", "c"]

    def test_thirty_seven_zones_at_ten_percent(self):
        """Ten percent of 37 zones keeps ceil(3.7) = 4."""
        ranked = [_ranked(str(i), i) for i in range(37)]
        top = select_top(ranked, 10)
        assert [z.custom_score for z in top] == [36, 35, 34, 33]


class TestScoreZone:
    def test_independent_factors_only(self):
        zone = ZoneRow(geoid=WATCHED, foot_traffic_score=8, crime_score=6, flood_risk_score=5,
                       rent_score=4, poi_score=3, avg_rent=2500)
        ws = build_weight_set([], composition_active=False)
        ranked = score_zone(zone, RankingRequest(), PercentageResults(), ws)
        # 0.45*80 + 0.25*60 + 0.15*50 + 0.10*40 + 0.05*30
        assert abs(ranked.custom_score - 64.0) < 1e-9
        assert ranked.demographic_score == 0
        assert ranked.demographic_match_pct is None
        assert ranked.data_sources["crime_score_source"] == FALLBACK_SOURCE

    def test_prediction_rows_preferred(self):
        """Current-year prediction rows replace the static zone scores."""
        zone = ZoneRow(geoid="1", foot_traffic_score=2, crime_score=2)
        crime = TrendRow(geoid="1", values={"pred_2025": 7.0})
        foot = TrendRow(geoid="1", values={"average_pred_2025": 9.0})
        ws = build_weight_set([], composition_active=False)
        ranked = score_zone(zone, RankingRequest(), PercentageResults(), ws,
                            crime_row=crime, foot_traffic_row=foot)
        assert ranked.crime_score == 70
        assert ranked.foot_traffic_score == 90
        assert ranked.data_sources["crime_score_source"] == PREDICTION_SOURCE
        assert ranked.data_sources["foot_traffic_source"] == PREDICTION_SOURCE

    def test_blank_prediction_falls_back_to_zone(self):
        zone = ZoneRow(geoid="1", crime_score=3)
        crime = TrendRow(geoid="1", values={"pred_2025": None})
        ws = build_weight_set([], composition_active=False)
        ranked = score_zone(zone, RankingRequest(), PercentageResults(), ws, crime_row=crime)
        assert ranked.crime_score == 30

    def test_names_from_demographics_label(self):
        zone = ZoneRow(geoid=WATCHED)
        ws = build_weight_set([], composition_active=False)
        ranked = score_zone(zone, RankingRequest(), PercentageResults(), ws, label="Koreatown")
        assert ranked.tract_name == "Koreatown-500"
        assert ranked.display_name == "Koreatown-500 (Manhattan)"


class TestScoreZones:
    def test_korean_composite(self, zones, ethnicity_rows, demographic_rows, demographic_only_weights):
        """10% Korean share with demographic-only weights scores 40."""
        composition = CompositionFilter(ethnicities=("korean",))
        request = RankingRequest(weights=demographic_only_weights, composition=composition)
        percentages = calculate_percentages(composition, ethnicity_rows, None, None)
        ws = build_weight_set(request.weights, composition.is_active)

        scored = {z.geoid: z for z in score_zones(
            zones, request, percentages, ws, demographic_rows=demographic_rows
        )}
        assert scored[WATCHED].custom_score == 40
        assert scored[WATCHED].demographic_match_pct == 10
        assert scored[BROOKLYN].custom_score == 20
        assert scored[UPTOWN].custom_score == 0
        assert scored[WATCHED].nta_name == "Koreatown"
        assert scored[BROOKLYN].nta_name == "Unknown Area"

    def test_scores_bounded(self, zones):
        ws = build_weight_set([("crime", 100), ("poi", 100)], composition_active=False)
        for ranked in score_zones(zones, RankingRequest(), PercentageResults(), ws):
            assert 0 <= ranked.custom_score <= 100

    def test_string_scores_coerced(self, zones):
        ws = build_weight_set([], composition_active=False)
        scored = {z.geoid: z for z in score_zones(zones, RankingRequest(), PercentageResults(), ws)}
        assert scored[BROOKLYN].crime_score == 75
        assert scored[BROOKLYN].flood_risk_score == 0
