"""Composite weighting engine.

Blends the per-factor 0-100 scores of a zone into one composite score:

  composite = sum(weight[f] * score[f])  clamped to 0-100

Weights arrive from the caller as percentages per factor key and fall back
to DEFAULT_WEIGHTS for any key not supplied. When no composition filter is
active the composition weight cannot be scored, so it is handed over to the
five independent factors instead of silently dragging every score down.
"""

import logging
import math
from collections.abc import Iterable, Mapping

from src.engine.thresholds import score_percentage_match
from src.models.scoring import (
    INDEPENDENT_FACTORS,
    CompositionFilter,
    DemographicWeights,
    Factor,
    PercentageResults,
    WeightSet,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS: Mapping[Factor, float] = {
    Factor.FOOT_TRAFFIC: 0.45,
    Factor.DEMOGRAPHIC: 0.0,
    Factor.CRIME: 0.25,
    Factor.FLOOD_RISK: 0.15,
    Factor.RENT: 0.10,
    Factor.POI: 0.05,
}

_SUM_TOLERANCE = 1e-9


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(high, max(low, value))


def normalize_factor(raw: float | None) -> float:
    """Convert a 0-10 factor value to the 0-100 scale."""
    if raw is None or math.isnan(raw):
        return 0.0
    return clamp(raw * 10)


def apply_caller_weights(weights: Iterable[tuple[str, float]]) -> dict[Factor, float]:
    """Overlay caller percentages (0-100) onto the defaults."""
    final = dict(DEFAULT_WEIGHTS)
    for key, value in weights:
        try:
            factor = Factor(key)
        except ValueError:
            logger.warning("Ignoring weight for unknown factor %r", key)
            continue
        final[factor] = (value or 0) / 100
    return final


def renormalize(weights: dict[Factor, float]) -> dict[Factor, float]:
    total = sum(weights.values())
    if total <= 0 or abs(total - 1.0) < _SUM_TOLERANCE:
        return weights
    logger.info("Renormalizing weights summing to %.3f", total)
    return {factor: w / total for factor, w in weights.items()}


def redistribute_composition(weights: dict[Factor, float]) -> dict[Factor, float]:
    """Move the composition weight onto the independent factors.

    Shares follow the factors' current weights; if all of them are zero the
    freed weight is split evenly.
    """
    freed = weights.get(Factor.DEMOGRAPHIC, 0.0)
    if freed <= 0:
        return weights

    result = dict(weights)
    result[Factor.DEMOGRAPHIC] = 0.0
    others_total = sum(result[f] for f in INDEPENDENT_FACTORS)

    for factor in INDEPENDENT_FACTORS:
        if others_total > 0:
            result[factor] += result[factor] / others_total * freed
        else:
            result[factor] += freed / len(INDEPENDENT_FACTORS)

    logger.info("No composition filter active: redistributed weight %.3f", freed)
    return result


def build_weight_set(
    weights: Iterable[tuple[str, float]], composition_active: bool
) -> WeightSet:
    final = renormalize(apply_caller_weights(weights))
    if not composition_active:
        final = redistribute_composition(final)
    return WeightSet.of(final)


def _sub_factor_fractions(
    geoid: str, composition: CompositionFilter, percentages: PercentageResults
) -> dict[str, float]:
    """Fractions of the sub-factors that were requested and exist for the zone."""
    candidates = (
        ("ethnicity", composition.ethnicity_active, percentages.ethnic_percent),
        ("gender", composition.gender_active, percentages.gender_percent),
        ("age", composition.age_active, percentages.age_percent),
        ("income", composition.income_active, percentages.income_percent),
    )
    return {
        name: fractions[geoid]
        for name, active, fractions in candidates
        if active and geoid in fractions
    }


def composition_score(
    geoid: str,
    composition: CompositionFilter,
    percentages: PercentageResults,
    demographic_weights: DemographicWeights | None = None,
) -> float:
    """Blend the composition sub-factor scores for one zone (0-100).

    With an advanced weight vector, a weighted mean over the sub-factors the
    zone actually has; otherwise a plain mean. Sub-factors that were not
    requested never lower the result.
    """
    fractions = _sub_factor_fractions(geoid, composition, percentages)
    if not fractions:
        return 0.0

    scores = {name: score_percentage_match(f) for name, f in fractions.items()}

    if demographic_weights is not None:
        weighted = 0.0
        total_weight = 0.0
        for name, score in scores.items():
            weight = getattr(demographic_weights, name)
            weighted += score * weight
            total_weight += weight
        result = weighted / total_weight if total_weight > 0 else 0.0
    else:
        result = sum(scores.values()) / len(scores)

    logger.debug("Composition score for %s: %.1f from %s", geoid, result, scores)
    return clamp(result)


def composite_score(factor_scores: Mapping[Factor, float], weight_set: WeightSet) -> float:
    total = sum(factor_scores.get(f, 0.0) * weight_set[f] for f in Factor)
    return clamp(total)
