"""Pydantic schemas for API request/response models."""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.data.catalog import DEFAULT_AGE_RANGE, DEFAULT_INCOME_RANGE, GENDER_COLUMNS
from src.models.scoring import (
    CRIME_YEARS,
    TIME_PERIODS,
    CompositionFilter,
    DemographicWeights,
    RankingRequest,
)

DEFAULT_TOP_PERCENT = 10


# ---- Request schemas ----

class FactorWeight(BaseModel):
    id: str = Field(..., description="Factor key, e.g. foot_traffic, demographic, crime")
    value: float = Field(..., ge=0, le=100, description="Weight as a percentage")


class DemographicWeightsIn(BaseModel):
    ethnicity: float = Field(..., ge=0, le=1)
    gender: float = Field(..., ge=0, le=1)
    age: float = Field(..., ge=0, le=1)
    income: float = Field(..., ge=0, le=1)


class DemographicScoring(BaseModel):
    """Advanced composition blend. Any other keys the client sends are ignored."""
    weights: DemographicWeightsIn


class ZoneSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    weights: list[FactorWeight] = Field(default_factory=list)
    ethnicities: list[str] = Field(default_factory=list)
    genders: list[str] = Field(default_factory=list)
    age_range: tuple[float, float] = Field(DEFAULT_AGE_RANGE, alias="ageRange")
    income_range: tuple[float, float] = Field(DEFAULT_INCOME_RANGE, alias="incomeRange")
    # JSON has no Infinity; a null upper bound means unbounded
    rent_range: tuple[float, float | None] = Field((0, None), alias="rentRange")
    top_n: float = Field(DEFAULT_TOP_PERCENT, alias="topN")
    crime_years: list[str] = Field(default_factory=lambda: list(CRIME_YEARS), alias="crimeYears")
    time_periods: list[str] = Field(default_factory=lambda: list(TIME_PERIODS), alias="timePeriods")
    demographic_scoring: DemographicScoring | None = Field(None, alias="demographicScoring")

    @field_validator("ethnicities")
    @classmethod
    def _drop_blank_ethnicities(cls, v: list[str]) -> list[str]:
        return [e for e in v if e.strip()]

    @field_validator("genders")
    @classmethod
    def _known_genders(cls, v: list[str]) -> list[str]:
        return [g for g in v if g in GENDER_COLUMNS]

    @field_validator("age_range")
    @classmethod
    def _clamp_age(cls, v: tuple[float, float]) -> tuple[float, float]:
        return tuple(max(0, min(100, a)) for a in v)

    @field_validator("income_range")
    @classmethod
    def _floor_income(cls, v: tuple[float, float]) -> tuple[float, float]:
        return tuple(max(0, i) for i in v)

    @field_validator("rent_range")
    @classmethod
    def _floor_rent(cls, v: tuple[float, float | None]) -> tuple[float, float | None]:
        low, high = v
        return max(0, low), None if high is None or math.isinf(high) else max(0, high)

    @field_validator("top_n")
    @classmethod
    def _top_n_in_range(cls, v: float) -> float:
        return v if 0 < v <= 100 else DEFAULT_TOP_PERCENT

    @field_validator("crime_years")
    @classmethod
    def _crime_years_or_default(cls, v: list[str]) -> list[str]:
        return v or list(CRIME_YEARS)

    @field_validator("time_periods")
    @classmethod
    def _known_time_periods(cls, v: list[str]) -> list[str]:
        return [p for p in v if p in TIME_PERIODS] or list(TIME_PERIODS)

    def to_ranking_request(self) -> RankingRequest:
        low, high = self.rent_range
        demographic_weights = None
        if self.demographic_scoring is not None:
            w = self.demographic_scoring.weights
            demographic_weights = DemographicWeights(
                ethnicity=w.ethnicity, gender=w.gender, age=w.age, income=w.income
            )
        return RankingRequest(
            weights=tuple((w.id, w.value) for w in self.weights),
            composition=CompositionFilter(
                ethnicities=tuple(self.ethnicities),
                genders=tuple(self.genders),
                age_range=self.age_range,
                income_range=self.income_range,
            ),
            rent_range=(low, math.inf if high is None else high),
            top_percent=self.top_n,
            demographic_weights=demographic_weights,
            time_periods=tuple(self.time_periods),
            crime_years=tuple(self.crime_years),
        )


# ---- Response schemas ----

class TimelineMetadataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    available_years: list[str] = Field(default_factory=list)
    missing_years: list[str] = Field(default_factory=list)
    data_gap_notes: list[str] = Field(default_factory=list)
    optimization_used: str | None = None


class ZoneResponse(BaseModel):
    geoid: str
    tract_name: str
    display_name: str
    nta_name: str
    custom_score: float
    resilience_score: float
    foot_traffic_score: float
    crime_score: float
    flood_risk_score: float
    rent_score: float
    poi_score: float
    avg_rent: float | None = None

    demographic_score: float = 0.0
    demographic_match_pct: float | None = None
    gender_match_pct: float | None = None
    age_match_pct: float | None = None
    income_match_pct: float | None = None
    combined_match_pct: float | None = None
    overcounting_detected: bool = False
    data_sources: dict[str, Any] = Field(default_factory=dict)

    # Incident enrichment (top zones only)
    main_crime_score: float | None = None
    crime_timeline: dict[str, float | None] = Field(default_factory=dict)
    crime_timeline_metadata: TimelineMetadataResponse | None = None
    crime_trend_direction: str = "unknown"
    crime_trend_change: str = "0"

    # Pedestrian enrichment (top zones only)
    main_foot_traffic_score: float | None = None
    foot_traffic_timeline: dict[str, float | None] = Field(default_factory=dict)
    foot_traffic_timeline_metadata: TimelineMetadataResponse | None = None
    foot_traffic_by_period: dict[str, dict[str, float | None]] = Field(default_factory=dict)
    foot_traffic_combinations: dict[str, dict[str, float | None]] = Field(default_factory=dict)
    foot_traffic_trend_direction: str = "unknown"
    foot_traffic_trend_change: str = "0"
    foot_traffic_periods_used: list[str] = Field(default_factory=list)


class WatchedRentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    geoid: str = Field(..., serialization_alias="GEOID")
    avg_rent: float | None = None
    passed: bool


class DebugInfo(BaseModel):
    received_ethnicities: list[str]
    received_genders: list[str]
    received_age_range: tuple[float, float]
    received_income_range: tuple[float, float]
    received_top_n: float
    received_crime_years: list[str]
    received_time_periods: list[str]
    received_demographic_scoring: DemographicScoring | None = None
    received_weights: list[str]

    demographic_weight_detected: float
    is_single_factor_request: bool
    has_ethnicity_filters: bool
    has_demographic_scoring: bool

    watched_rents: list[WatchedRentResponse] = Field(default_factory=list)
    filtered_out_watched: list[str] = Field(default_factory=list)
    unresolved_ethnicities: list[str] = Field(default_factory=list)
    overcounted_zones: list[str] = Field(default_factory=list)

    sample_demo_scores: dict[str, float] = Field(default_factory=dict)
    sample_gender_scores: dict[str, float] = Field(default_factory=dict)
    sample_age_scores: dict[str, float] = Field(default_factory=dict)
    sample_income_scores: dict[str, float] = Field(default_factory=dict)


class ZoneSearchResponse(BaseModel):
    zones: list[ZoneResponse]
    total_zones_found: int
    top_zones_returned: int
    top_percentage: float
    demographic_scoring_applied: bool
    foot_traffic_periods_used: list[str]
    weights_used: dict[str, float] = Field(default_factory=dict)
    debug: DebugInfo | None = None
