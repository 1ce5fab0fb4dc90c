"""Zone search: orchestrates data fetching and the ranking engine.

Flow: fetch tables → composition percentages → weights → current-year
predictions → rank → top N% → incident/pedestrian enrichment (top N only)
"""

import logging
from collections.abc import Collection

from src.config import settings
from src.data.base import ZoneDataSource
from src.data.loader import fetch_all_data, fetch_trends
from src.engine.categories import DEFAULT_RESOLVER, CategoryResolver
from src.engine.enrichment import attach_crime, attach_foot_traffic
from src.engine.percentages import calculate_percentages
from src.engine.ranking import filter_by_rent, score_zones, select_top, watched_rents
from src.engine.weights import build_weight_set
from src.models.scoring import RankingRequest, RankingResult

logger = logging.getLogger(__name__)


class ZoneSearchService:
    def __init__(
        self,
        source: ZoneDataSource,
        resolver: CategoryResolver = DEFAULT_RESOLVER,
        watched_zones: Collection[str] | None = None,
        prediction_year: str | None = None,
        rank_with_predictions: bool | None = None,
    ):
        self.source = source
        self.resolver = resolver
        self.watched_zones = frozenset(
            settings.watched_zones if watched_zones is None else watched_zones
        )
        self.prediction_year = prediction_year or settings.current_prediction_year
        self.rank_with_predictions = (
            settings.rank_with_predictions if rank_with_predictions is None else rank_with_predictions
        )

    async def search(self, request: RankingRequest) -> RankingResult:
        """Rank zones for one request and enrich the retained subset.

        Raises ZoneDataUnavailableError when the zone table cannot be read.
        """
        # Step 1: Base tables (concurrent)
        tables = await fetch_all_data(self.source)

        # Step 2: Composition match fractions
        composition = request.composition
        percentages = calculate_percentages(
            composition,
            tables.ethnicity,
            tables.demographics,
            tables.income,
            self.resolver,
        )

        # Step 3: Weights
        weight_set = build_weight_set(request.weights, composition.is_active)
        logger.info("Final weights: %s", weight_set.as_dict())

        # Step 4: Rent filter, plus current-year predictions when configured
        candidates = filter_by_rent(tables.zones, request.rent_range, self.watched_zones)
        crime_now, foot_now = None, None
        if self.rank_with_predictions:
            crime_now, foot_now = await fetch_trends(self.source, [z.geoid for z in candidates])

        # Step 5: Score and truncate
        scored = score_zones(
            candidates,
            request,
            percentages,
            weight_set,
            crime_rows=crime_now,
            foot_traffic_rows=foot_now,
            demographic_rows=tables.demographics,
            prediction_year=self.prediction_year,
        )
        top = select_top(scored, request.top_percent)
        if top:
            logger.info(
                "Top %d of %d zones: scores %.1f to %.1f",
                len(top), len(scored), top[0].custom_score, top[-1].custom_score,
            )

        # Step 6: Full time series for the retained zones only
        crime_detail, foot_detail = await fetch_trends(self.source, [z.geoid for z in top])
        attach_crime(top, crime_detail, request.crime_years)
        attach_foot_traffic(top, foot_detail, request.time_periods)

        return RankingResult(
            zones=top,
            total_zones_found=len(scored),
            top_percent=request.top_percent,
            weights=weight_set,
            percentages=percentages,
            demographic_scoring_applied=request.demographic_weights is not None,
            time_periods=request.time_periods,
            watched_rents=watched_rents(tables.zones, request.rent_range, self.watched_zones),
        )
