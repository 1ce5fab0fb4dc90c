"""Top-N enrichment: incident and pedestrian time series.

Only zones that survived ranking are enriched, so the per-year and
per-period breakdown is never built for zones outside the returned set.
"""

import logging
from collections.abc import Sequence

from src.engine import foot_traffic
from src.models.scoring import (
    CRIME_YEARS,
    FOOT_TRAFFIC_YEARS,
    TIME_PERIODS,
    CrimeEnrichment,
    FootTrafficEnrichment,
    RankedZone,
    TimelineMetadata,
)
from src.models.zone import TrendRow

logger = logging.getLogger(__name__)

RECENT_CRIME_YEARS: tuple[str, ...] = ("year_2020", "year_2021", "year_2022", "year_2023", "year_2024")
FUTURE_CRIME_YEARS: tuple[str, ...] = ("pred_2026", "pred_2027")


def analyze_crime_trend(row: TrendRow) -> tuple[str, str]:
    """Direction and percent change of incidents around the current year.

    Compares the average of the later predictions with the current year; if
    no predictions exist, compares the current year with the observed years.
    """
    current = row.get("pred_2025") or row.get("year_2024") or 0.0

    future = [v for v in (row.get(y) for y in FUTURE_CRIME_YEARS) if v is not None]
    if future:
        future_avg = sum(future) / len(future)
        change = (future_avg - current) / current * 100 if current > 0 else 0.0
        return foot_traffic.trend_direction(future_avg, current), f"{change:.1f}"

    recent = [v for v in (row.get(y) for y in RECENT_CRIME_YEARS) if v is not None]
    if recent:
        recent_avg = sum(recent) / len(recent)
        change = (current - recent_avg) / recent_avg * 100 if recent_avg > 0 else 0.0
        return foot_traffic.trend_direction(current, recent_avg), f"{change:.1f}"

    return "unknown", "0"


def crime_enrichment(
    zone: RankedZone, row: TrendRow | None, years: Sequence[str] = CRIME_YEARS
) -> CrimeEnrichment:
    if row is None:
        return CrimeEnrichment(
            main_score=zone.crime_score,
            metadata=TimelineMetadata(
                missing_years=list(years),
                data_gap_notes=["No detailed crime data available"],
            ),
        )

    timeline: dict[str, float | None] = {}
    metadata = TimelineMetadata()
    for year in years:
        value = row.get(year)
        if value is not None:
            timeline[year] = value * 10
            metadata.available_years.append(year)
        else:
            timeline[year] = None
            metadata.missing_years.append(year)

    direction, change = analyze_crime_trend(row)
    return CrimeEnrichment(
        main_score=zone.crime_score,
        timeline=timeline,
        metadata=metadata,
        trend_direction=direction,
        trend_change=change,
    )


def foot_traffic_enrichment(
    zone: RankedZone,
    row: TrendRow | None,
    periods: Sequence[str] = TIME_PERIODS,
    years: Sequence[str] = FOOT_TRAFFIC_YEARS,
) -> FootTrafficEnrichment:
    if row is None:
        return FootTrafficEnrichment(
            main_score=zone.foot_traffic_score,
            periods_used=tuple(periods),
            metadata=TimelineMetadata(
                missing_years=list(years),
                data_gap_notes=["No detailed foot traffic data available"],
                optimization_used="none",
            ),
        )

    timeline, metadata = foot_traffic.build_timeline(row, periods, years)
    direction, change = foot_traffic.analyze_trend(row, periods)
    return FootTrafficEnrichment(
        main_score=zone.foot_traffic_score,
        periods_used=tuple(periods),
        timeline=timeline,
        metadata=metadata,
        by_period=foot_traffic.build_by_period(row, years),
        combinations=foot_traffic.build_combinations(row, years),
        trend_direction=direction,
        trend_change=change,
    )


def attach_crime(
    zones: Sequence[RankedZone],
    rows: Sequence[TrendRow] | None,
    years: Sequence[str] = CRIME_YEARS,
) -> None:
    by_geoid = {r.geoid: r for r in rows or ()}
    for zone in zones:
        zone.crime = crime_enrichment(zone, by_geoid.get(zone.geoid), years)
    matched = sum(1 for z in zones if z.geoid in by_geoid)
    logger.info("Incident timelines attached: %d of %d zones had detail", matched, len(zones))


def attach_foot_traffic(
    zones: Sequence[RankedZone],
    rows: Sequence[TrendRow] | None,
    periods: Sequence[str] = TIME_PERIODS,
) -> None:
    by_geoid = {r.geoid: r for r in rows or ()}
    for zone in zones:
        zone.foot_traffic = foot_traffic_enrichment(zone, by_geoid.get(zone.geoid), periods)
    matched = sum(1 for z in zones if z.geoid in by_geoid)
    logger.info("Pedestrian timelines attached: %d of %d zones had detail", matched, len(zones))
