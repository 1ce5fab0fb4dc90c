"""Zone search routes, the primary API entry point."""

import logging
from itertools import islice

from fastapi import APIRouter, Depends, HTTPException

from src.api.deps import get_search_service
from src.api.schemas import (
    DebugInfo,
    TimelineMetadataResponse,
    WatchedRentResponse,
    ZoneResponse,
    ZoneSearchRequest,
    ZoneSearchResponse,
)
from src.data.loader import ZoneDataUnavailableError
from src.data.search import ZoneSearchService
from src.models.scoring import Factor, RankedZone, RankingResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/zones", tags=["zones"])

SAMPLE_SIZE = 5


def _sample(fractions: dict[str, float], count: int = SAMPLE_SIZE) -> dict[str, float]:
    return dict(islice(fractions.items(), count))


def _zone_to_response(zone: RankedZone) -> ZoneResponse:
    """Flatten a ranked zone and its enrichment into the response shape."""
    resp = ZoneResponse(
        geoid=zone.geoid,
        tract_name=zone.tract_name,
        display_name=zone.display_name,
        nta_name=zone.nta_name,
        custom_score=zone.custom_score,
        resilience_score=zone.resilience_score,
        foot_traffic_score=zone.foot_traffic_score,
        crime_score=zone.crime_score,
        flood_risk_score=zone.flood_risk_score,
        rent_score=zone.rent_score,
        poi_score=zone.poi_score,
        avg_rent=zone.avg_rent,
        demographic_score=zone.demographic_score,
        demographic_match_pct=zone.demographic_match_pct,
        gender_match_pct=zone.gender_match_pct,
        age_match_pct=zone.age_match_pct,
        income_match_pct=zone.income_match_pct,
        combined_match_pct=zone.combined_match_pct,
        overcounting_detected=zone.overcounting_detected,
        data_sources=zone.data_sources,
    )

    if zone.crime is not None:
        resp.main_crime_score = zone.crime.main_score
        resp.crime_timeline = zone.crime.timeline
        resp.crime_timeline_metadata = TimelineMetadataResponse.model_validate(zone.crime.metadata)
        resp.crime_trend_direction = zone.crime.trend_direction
        resp.crime_trend_change = zone.crime.trend_change

    if zone.foot_traffic is not None:
        ft = zone.foot_traffic
        resp.main_foot_traffic_score = ft.main_score
        resp.foot_traffic_timeline = ft.timeline
        resp.foot_traffic_timeline_metadata = TimelineMetadataResponse.model_validate(ft.metadata)
        resp.foot_traffic_by_period = ft.by_period
        resp.foot_traffic_combinations = ft.combinations
        resp.foot_traffic_trend_direction = ft.trend_direction
        resp.foot_traffic_trend_change = ft.trend_change
        resp.foot_traffic_periods_used = list(ft.periods_used)

    return resp


def _debug_info(
    req: ZoneSearchRequest, result: RankingResult, watched: frozenset[str]
) -> DebugInfo:
    demographic_weight = next(
        (w.value for w in req.weights if w.id == Factor.DEMOGRAPHIC.value), 0
    )
    present = {w.geoid for w in result.watched_rents}
    percentages = result.percentages
    return DebugInfo(
        received_ethnicities=req.ethnicities,
        received_genders=req.genders,
        received_age_range=req.age_range,
        received_income_range=req.income_range,
        received_top_n=req.top_n,
        received_crime_years=req.crime_years,
        received_time_periods=req.time_periods,
        received_demographic_scoring=req.demographic_scoring,
        received_weights=[f"{w.id}: {w.value:g}%" for w in req.weights],
        demographic_weight_detected=demographic_weight,
        is_single_factor_request=demographic_weight == 100,
        has_ethnicity_filters=bool(req.ethnicities),
        has_demographic_scoring=req.demographic_scoring is not None,
        watched_rents=[WatchedRentResponse.model_validate(w) for w in result.watched_rents],
        filtered_out_watched=sorted(watched - present),
        unresolved_ethnicities=percentages.unresolved_tokens,
        overcounted_zones=percentages.overcounted_zones,
        sample_demo_scores=_sample(percentages.ethnic_percent),
        sample_gender_scores=_sample(percentages.gender_percent),
        sample_age_scores=_sample(percentages.age_percent),
        sample_income_scores=_sample(percentages.income_percent),
    )


@router.post("/search", response_model=ZoneSearchResponse)
async def search_zones(
    req: ZoneSearchRequest,
    service: ZoneSearchService = Depends(get_search_service),
):
    """Rank every zone for the request and return the top N% with enrichment."""
    logger.info(
        "Zone search: weights=%s ethnicities=%s genders=%s topN=%s",
        [f"{w.id}: {w.value:g}%" for w in req.weights],
        req.ethnicities,
        req.genders,
        req.top_n,
    )
    try:
        result = await service.search(req.to_ranking_request())
    except ZoneDataUnavailableError as e:
        logger.error("Zone search failed: %s", e)
        raise HTTPException(status_code=503, detail=str(e))

    return ZoneSearchResponse(
        zones=[_zone_to_response(z) for z in result.zones],
        total_zones_found=result.total_zones_found,
        top_zones_returned=result.top_zones_returned,
        top_percentage=result.top_percent,
        demographic_scoring_applied=result.demographic_scoring_applied,
        foot_traffic_periods_used=list(result.time_periods),
        weights_used=result.weights.as_dict(),
        debug=_debug_info(req, result, service.watched_zones),
    )
