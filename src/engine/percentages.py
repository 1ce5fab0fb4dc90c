"""Composition match fractions per zone.

For every zone row and every requested composition sub-factor, computes the
share of the zone's population (or households) that matches the filter.
A sub-factor that was not requested, or whose table is unavailable, gets an
empty map so scoring can tell "not requested" apart from "matched nobody".

Pure functions. No I/O.
"""

import logging
from collections.abc import Sequence

from src.data.catalog import AGE_BRACKETS, GENDER_COLUMNS, INCOME_BRACKETS
from src.engine.categories import DEFAULT_RESOLVER, CategoryResolver
from src.models.scoring import CompositionFilter, EthnicityBreakdown, PercentageResults
from src.models.zone import CompositionRow

logger = logging.getLogger(__name__)


def ethnicity_percentages(
    ethnicities: Sequence[str],
    rows: Sequence[CompositionRow],
    resolver: CategoryResolver = DEFAULT_RESOLVER,
) -> tuple[dict[str, float], dict[str, EthnicityBreakdown], list[str]]:
    """Share of each zone's population matching any requested ethnicity.

    Each token contributes one deduplicated value (parent or largest child,
    never a sum of children). The ratio is clamped to 1; a raw ratio above 1
    is flagged on the zone's breakdown as an overcount.

    Returns (fractions, breakdowns, unresolved tokens).
    """
    selections = [resolver.resolve(token) for token in ethnicities]
    unresolved = [s.token for s in selections if not s.resolved]

    fractions: dict[str, float] = {}
    breakdowns: dict[str, EthnicityBreakdown] = {}

    for row in rows:
        total = row.total or 0.0
        breakdown = EthnicityBreakdown(geoid=row.geoid, total_population=total)

        for selection in selections:
            token_breakdown = resolver.value_for(selection, row)
            breakdown.tokens.append(token_breakdown)
            breakdown.final_match += token_breakdown.value

        raw_ratio = breakdown.final_match / total if total > 0 else 0.0
        breakdown.raw_ratio = raw_ratio
        breakdown.final_percentage = min(1.0, raw_ratio)

        if raw_ratio > 1.0:
            breakdown.overcounting_detected = True
            logger.warning(
                "Overcount in %s: %.0f matched of %.0f population (%.2f%%)",
                row.geoid, breakdown.final_match, total, raw_ratio * 100,
            )

        fractions[row.geoid] = breakdown.final_percentage
        breakdowns[row.geoid] = breakdown

    logger.info(
        "Ethnicity match computed for %d zones (%d unresolved tokens)",
        len(fractions), len(unresolved),
    )
    return fractions, breakdowns, unresolved


def gender_percentages(
    genders: Sequence[str], rows: Sequence[CompositionRow]
) -> dict[str, float]:
    fractions: dict[str, float] = {}
    for row in rows:
        total = row.total or 0.0
        matched = 0.0
        for gender in genders:
            column = GENDER_COLUMNS.get(gender)
            if column is not None:
                matched += total * row.number(column) / 100
        fractions[row.geoid] = matched / total if total > 0 else 0.0
    return fractions


def age_percentages(
    age_range: tuple[float, float], rows: Sequence[CompositionRow]
) -> dict[str, float]:
    """Sum of the age-bin percentages overlapping the range, as a fraction."""
    low, high = age_range
    brackets = [b for b in AGE_BRACKETS if b.overlaps(low, high)]
    fractions: dict[str, float] = {}
    for row in rows:
        total = row.total or 0.0
        pct = sum(row.number(b.key) for b in brackets)
        fractions[row.geoid] = pct / 100 if total > 0 else 0.0
    return fractions


def income_percentages(
    income_range: tuple[float, float], rows: Sequence[CompositionRow]
) -> dict[str, float]:
    """Matched households over all households counted in the row's brackets."""
    low, high = income_range
    fractions: dict[str, float] = {}
    for row in rows:
        matched = 0.0
        total = 0.0
        for bracket in INCOME_BRACKETS:
            value = row.number(bracket.key)
            total += value
            if bracket.overlaps(low, high):
                matched += value
        fractions[row.geoid] = matched / total if total > 0 else 0.0
    return fractions


def calculate_percentages(
    composition: CompositionFilter,
    ethnicity_rows: Sequence[CompositionRow] | None,
    demographic_rows: Sequence[CompositionRow] | None,
    income_rows: Sequence[CompositionRow] | None,
    resolver: CategoryResolver = DEFAULT_RESOLVER,
) -> PercentageResults:
    """Compute every requested composition fraction map.

    A None table means the fetch failed; its sub-factors stay empty.
    """
    results = PercentageResults()

    if composition.ethnicity_active:
        if ethnicity_rows is None:
            logger.warning("Ethnicity table unavailable; ethnicity matching skipped")
        else:
            (
                results.ethnic_percent,
                results.ethnicity_breakdowns,
                results.unresolved_tokens,
            ) = ethnicity_percentages(composition.ethnicities, ethnicity_rows, resolver)

    if composition.gender_active or composition.age_active:
        if demographic_rows is None:
            logger.warning("Demographics table unavailable; gender/age matching skipped")
        else:
            if composition.gender_active:
                results.gender_percent = gender_percentages(composition.genders, demographic_rows)
            if composition.age_active:
                results.age_percent = age_percentages(composition.age_range, demographic_rows)

    if composition.income_active:
        if income_rows is None:
            logger.warning("Income table unavailable; income matching skipped")
        else:
            results.income_percent = income_percentages(composition.income_range, income_rows)

    return results
