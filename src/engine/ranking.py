"""Zone ranking: rent filter, composite scoring and top-N selection.

Flow: zones → rent filter → per-factor scores → composite → sort → top N%.

Incident and pedestrian factors prefer the current prediction year from the
trend tables when those rows are supplied, and fall back to the zone row's
own factor value otherwise. Pure functions. No I/O.
"""

import logging
import math
from collections.abc import Collection, Mapping, Sequence

from src.engine.foot_traffic import period_score
from src.engine.tracts import tract_names
from src.engine.weights import clamp, composite_score, composition_score, normalize_factor
from src.models.scoring import (
    Factor,
    PercentageResults,
    RankedZone,
    RankingRequest,
    WatchedRent,
    WeightSet,
)
from src.models.zone import CompositionRow, TrendRow, ZoneRow

logger = logging.getLogger(__name__)

PREDICTION_SOURCE = "prediction"
FALLBACK_SOURCE = "resilience_zones_fallback"


def filter_by_rent(
    zones: Sequence[ZoneRow],
    rent_range: tuple[float, float],
    watched: Collection[str] = (),
) -> list[ZoneRow]:
    """Keep zones with unknown rent, rent in range, or on the watch list."""
    low, high = rent_range
    kept = [
        z for z in zones
        if z.avg_rent is None or low <= z.avg_rent <= high or z.geoid in watched
    ]
    logger.info("Rent filter %s kept %d of %d zones", rent_range, len(kept), len(zones))
    return kept


def watched_rents(
    zones: Sequence[ZoneRow],
    rent_range: tuple[float, float],
    watched: Collection[str],
) -> list[WatchedRent]:
    low, high = rent_range
    return [
        WatchedRent(
            geoid=z.geoid,
            avg_rent=z.avg_rent,
            passed=z.avg_rent is None or low <= z.avg_rent <= high,
        )
        for z in zones
        if z.geoid in watched
    ]


def top_count(total: int, top_percent: float) -> int:
    return math.ceil(total * top_percent / 100)


def select_top(zones: Sequence[RankedZone], top_percent: float) -> list[RankedZone]:
    """Sort by composite score (descending) and keep the top percentage."""
    ranked = sorted(zones, key=lambda z: z.custom_score, reverse=True)
    return ranked[: top_count(len(ranked), top_percent)]


def _match_pct(active: bool, fractions: Mapping[str, float], geoid: str) -> float | None:
    if not active:
        return None
    return fractions.get(geoid, 0.0) * 100


def score_zone(
    zone: ZoneRow,
    request: RankingRequest,
    percentages: PercentageResults,
    weight_set: WeightSet,
    crime_row: TrendRow | None = None,
    foot_traffic_row: TrendRow | None = None,
    label: str | None = None,
    prediction_year: str = "pred_2025",
) -> RankedZone:
    geoid = zone.geoid
    composition = request.composition
    composition_active = composition.is_active

    crime_raw = (crime_row.get(prediction_year) if crime_row else None) or zone.crime_score or 0
    if foot_traffic_row is not None:
        foot_raw = period_score(foot_traffic_row, request.time_periods, prediction_year)
    else:
        foot_raw = zone.foot_traffic_score or 0

    demographic = 0.0
    if composition_active:
        demographic = composition_score(
            geoid, composition, percentages, request.demographic_weights
        )

    factor_scores = {
        Factor.FOOT_TRAFFIC: normalize_factor(foot_raw),
        Factor.DEMOGRAPHIC: demographic,
        Factor.CRIME: normalize_factor(crime_raw),
        Factor.FLOOD_RISK: normalize_factor(zone.flood_risk_score),
        Factor.RENT: normalize_factor(zone.rent_score),
        Factor.POI: normalize_factor(zone.poi_score),
    }

    tract_name, display_name, nta_name = tract_names(geoid, label)
    breakdown = percentages.ethnicity_breakdowns.get(geoid)

    return RankedZone(
        geoid=geoid,
        tract_name=tract_name,
        display_name=display_name,
        nta_name=nta_name,
        custom_score=composite_score(factor_scores, weight_set),
        resilience_score=normalize_factor(zone.resilience_score),
        foot_traffic_score=factor_scores[Factor.FOOT_TRAFFIC],
        crime_score=factor_scores[Factor.CRIME],
        flood_risk_score=factor_scores[Factor.FLOOD_RISK],
        rent_score=factor_scores[Factor.RENT],
        poi_score=factor_scores[Factor.POI],
        avg_rent=zone.avg_rent,
        demographic_score=clamp(demographic),
        demographic_match_pct=_match_pct(
            composition.ethnicity_active, percentages.ethnic_percent, geoid
        ),
        gender_match_pct=_match_pct(composition.gender_active, percentages.gender_percent, geoid),
        age_match_pct=_match_pct(composition.age_active, percentages.age_percent, geoid),
        income_match_pct=_match_pct(composition.income_active, percentages.income_percent, geoid),
        combined_match_pct=demographic / 100 if composition_active else None,
        overcounting_detected=breakdown.overcounting_detected if breakdown else False,
        data_sources={
            "crime_score_source": PREDICTION_SOURCE if crime_row else FALLBACK_SOURCE,
            "foot_traffic_source": PREDICTION_SOURCE if foot_traffic_row else FALLBACK_SOURCE,
            "crime_score_current": crime_raw,
            "foot_traffic_score_current": foot_raw,
        },
    )


def score_zones(
    zones: Sequence[ZoneRow],
    request: RankingRequest,
    percentages: PercentageResults,
    weight_set: WeightSet,
    crime_rows: Sequence[TrendRow] | None = None,
    foot_traffic_rows: Sequence[TrendRow] | None = None,
    demographic_rows: Sequence[CompositionRow] | None = None,
    prediction_year: str = "pred_2025",
) -> list[RankedZone]:
    """Score every zone; trend and demographic rows are optional lookups."""
    crime_by_geoid = {r.geoid: r for r in crime_rows or ()}
    foot_by_geoid = {r.geoid: r for r in foot_traffic_rows or ()}
    labels = {r.geoid: r.label for r in demographic_rows or ()}

    scored = [
        score_zone(
            zone,
            request,
            percentages,
            weight_set,
            crime_row=crime_by_geoid.get(zone.geoid),
            foot_traffic_row=foot_by_geoid.get(zone.geoid),
            label=labels.get(zone.geoid),
            prediction_year=prediction_year,
        )
        for zone in zones
    ]
    logger.info(
        "Scored %d zones (%d with incident predictions, %d with pedestrian predictions)",
        len(scored), len(crime_by_geoid), len(foot_by_geoid),
    )
    return scored
