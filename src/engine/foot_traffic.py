"""Pedestrian-activity scoring by time of day.

The foot traffic table stores per-period columns (`morning_2024`, ...) plus
precomputed combinations: `average_{year}` for all three periods and
`{a}_{b}_{year}` for each pair. A precomputed column is preferred whenever
the requested periods match one exactly.
"""

from collections.abc import Sequence

from src.models.scoring import FOOT_TRAFFIC_YEARS, TIME_PERIODS, TimelineMetadata
from src.models.zone import TrendRow

# Sorted period tuple -> precomputed column prefix
_COMBINED_COLUMNS: dict[tuple[str, ...], str] = {
    ("afternoon", "evening", "morning"): "average",
    ("afternoon", "morning"): "morning_afternoon",
    ("evening", "morning"): "morning_evening",
    ("afternoon", "evening"): "afternoon_evening",
}

PAIR_COLUMNS: tuple[str, ...] = ("morning_afternoon", "morning_evening", "afternoon_evening")

RECENT_YEARS: tuple[str, ...] = ("2020", "2021", "2022", "2023", "2024")
FUTURE_YEARS: tuple[str, ...] = ("pred_2025", "pred_2026", "pred_2027")


def period_column(periods: Sequence[str], year: str) -> str | None:
    """Name of the single column covering exactly these periods, if any."""
    key = tuple(sorted(set(periods)))
    if key in _COMBINED_COLUMNS:
        return f"{_COMBINED_COLUMNS[key]}_{year}"
    if len(key) == 1:
        return f"{key[0]}_{year}"
    return None


def period_score(row: TrendRow, periods: Sequence[str], year: str) -> float:
    """Raw (0-10) pedestrian score for the requested periods in one year."""
    column = period_column(periods, year)
    if column is not None:
        return row.number(column)

    values = [row.get(f"{p}_{year}") for p in periods]
    present = [v for v in values if v is not None]
    return sum(present) / len(present) if present else 0.0


def build_timeline(
    row: TrendRow, periods: Sequence[str], years: Sequence[str] = FOOT_TRAFFIC_YEARS
) -> tuple[dict[str, float | None], TimelineMetadata]:
    timeline: dict[str, float | None] = {}
    metadata = TimelineMetadata(optimization_used="database_precalculated")
    for year in years:
        score = period_score(row, periods, year)
        if score > 0:
            timeline[year] = score * 10
            metadata.available_years.append(year)
        else:
            timeline[year] = None
            metadata.missing_years.append(year)
    metadata.available_years.sort()
    return timeline, metadata


def build_by_period(
    row: TrendRow, years: Sequence[str] = FOOT_TRAFFIC_YEARS
) -> dict[str, dict[str, float | None]]:
    by_period: dict[str, dict[str, float | None]] = {}
    for period in TIME_PERIODS:
        by_period[period] = {}
        for year in years:
            value = row.get(f"{period}_{year}")
            by_period[period][year] = value * 10 if value is not None else None
    return by_period


def build_combinations(
    row: TrendRow, years: Sequence[str] = FOOT_TRAFFIC_YEARS
) -> dict[str, dict[str, float | None]]:
    combinations: dict[str, dict[str, float | None]] = {}
    for year in years:
        entry = {pair: row.get(f"{pair}_{year}") or None for pair in PAIR_COLUMNS}
        entry["average_all"] = row.get(f"average_{year}") or None
        combinations[year] = entry
    return combinations


def trend_direction(new: float, old: float) -> str:
    if new > old:
        return "increasing"
    if new < old:
        return "decreasing"
    return "stable"


def analyze_trend(row: TrendRow, periods: Sequence[str]) -> tuple[str, str]:
    """Compare predicted years against the latest observed year.

    Falls back to the latest year versus the average of earlier observed
    years when no predictions exist. Returns (direction, percent change).
    """
    current = period_score(row, periods, "2024") or period_score(row, periods, "2023")

    future = [s for s in (period_score(row, periods, y) for y in FUTURE_YEARS) if s > 0]
    if future:
        future_avg = sum(future) / len(future)
        change = (future_avg - current) / current * 100 if current > 0 else 0.0
        return trend_direction(future_avg, current), f"{change:.1f}"

    recent = [s for s in (period_score(row, periods, y) for y in RECENT_YEARS) if s > 0]
    if len(recent) > 1:
        earlier = recent[:-1]
        recent_avg = sum(earlier) / len(earlier)
        change = (current - recent_avg) / recent_avg * 100 if recent_avg > 0 else 0.0
        return trend_direction(current, recent_avg), f"{change:.1f}"

    return "unknown", "0"
