"""Scoring request, intermediate and result types."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from src.data.catalog import DEFAULT_AGE_RANGE, DEFAULT_INCOME_RANGE

TIME_PERIODS: tuple[str, ...] = ("morning", "afternoon", "evening")

CRIME_YEARS: tuple[str, ...] = (
    "year_2020",
    "year_2021",
    "year_2022",
    "year_2023",
    "year_2024",
    "pred_2025",
    "pred_2026",
    "pred_2027",
)

FOOT_TRAFFIC_YEARS: tuple[str, ...] = (
    "2020",
    "2021",
    "2022",
    "2023",
    "2024",
    "pred_2025",
    "pred_2026",
    "pred_2027",
)


class Factor(str, Enum):
    FOOT_TRAFFIC = "foot_traffic"
    DEMOGRAPHIC = "demographic"  # population composition
    CRIME = "crime"
    FLOOD_RISK = "flood_risk"
    RENT = "rent_score"
    POI = "poi"


INDEPENDENT_FACTORS: tuple[Factor, ...] = (
    Factor.FOOT_TRAFFIC,
    Factor.CRIME,
    Factor.FLOOD_RISK,
    Factor.RENT,
    Factor.POI,
)


class MatchBand(Enum):
    EXCELLENT = "Excellent"
    STRONG = "Strong"
    GOOD = "Good"
    AVERAGE = "Average"
    WEAK = "Weak"
    POOR = "Poor"
    VERY_POOR = "Very Poor"


@dataclass(frozen=True)
class WeightSet:
    """Factor weights as fractions; sums to 1 unless every weight is zero."""

    weights: Mapping[Factor, float]

    def __getitem__(self, factor: Factor) -> float:
        return self.weights.get(factor, 0.0)

    @property
    def total(self) -> float:
        return sum(self.weights.values())

    def as_dict(self) -> dict[str, float]:
        return {factor.value: weight for factor, weight in self.weights.items()}

    @classmethod
    def of(cls, weights: Mapping[Factor, float]) -> "WeightSet":
        return cls(MappingProxyType(dict(weights)))


@dataclass(frozen=True)
class DemographicWeights:
    """Advanced blend of the composition sub-factors (each 0-1)."""

    ethnicity: float
    gender: float
    age: float
    income: float


@dataclass(frozen=True)
class CompositionFilter:
    ethnicities: tuple[str, ...] = ()
    genders: tuple[str, ...] = ()
    age_range: tuple[float, float] | None = None
    income_range: tuple[float, float] | None = None

    @property
    def ethnicity_active(self) -> bool:
        return len(self.ethnicities) > 0

    @property
    def gender_active(self) -> bool:
        return len(self.genders) > 0

    @property
    def age_active(self) -> bool:
        return self.age_range is not None and tuple(self.age_range) != DEFAULT_AGE_RANGE

    @property
    def income_active(self) -> bool:
        return self.income_range is not None and tuple(self.income_range) != DEFAULT_INCOME_RANGE

    @property
    def is_active(self) -> bool:
        return (
            self.ethnicity_active
            or self.gender_active
            or self.age_active
            or self.income_active
        )


@dataclass(frozen=True)
class RankingRequest:
    weights: tuple[tuple[str, float], ...] = ()
    composition: CompositionFilter = field(default_factory=CompositionFilter)
    rent_range: tuple[float, float] = (0, float("inf"))
    top_percent: float = 10
    demographic_weights: DemographicWeights | None = None
    time_periods: tuple[str, ...] = TIME_PERIODS
    crime_years: tuple[str, ...] = CRIME_YEARS


@dataclass(frozen=True)
class CategorySelection:
    token: str
    columns: tuple[str, ...] = ()
    parent: str | None = None

    @property
    def resolved(self) -> bool:
        return len(self.columns) > 0


@dataclass
class ValueInfo:
    column: str
    value: float
    percentage_of_total: float
    note: str | None = None
    selected: bool = False


@dataclass
class TokenBreakdown:
    token: str
    columns: tuple[str, ...]
    method: str  # single_column / parent_column / maximum_child / unresolved
    value: float = 0.0
    values: list[ValueInfo] = field(default_factory=list)


@dataclass
class EthnicityBreakdown:
    geoid: str
    total_population: float
    tokens: list[TokenBreakdown] = field(default_factory=list)
    final_match: float = 0.0
    raw_ratio: float = 0.0
    final_percentage: float = 0.0
    overcounting_detected: bool = False

    @property
    def columns_used(self) -> list[str]:
        return [c for t in self.tokens for c in t.columns]


@dataclass
class PercentageResults:
    ethnic_percent: dict[str, float] = field(default_factory=dict)
    gender_percent: dict[str, float] = field(default_factory=dict)
    age_percent: dict[str, float] = field(default_factory=dict)
    income_percent: dict[str, float] = field(default_factory=dict)
    ethnicity_breakdowns: dict[str, EthnicityBreakdown] = field(default_factory=dict)
    unresolved_tokens: list[str] = field(default_factory=list)

    @property
    def overcounted_zones(self) -> list[str]:
        return [g for g, b in self.ethnicity_breakdowns.items() if b.overcounting_detected]


@dataclass
class TimelineMetadata:
    available_years: list[str] = field(default_factory=list)
    missing_years: list[str] = field(default_factory=list)
    data_gap_notes: list[str] = field(default_factory=list)
    optimization_used: str | None = None


@dataclass
class CrimeEnrichment:
    main_score: float
    timeline: dict[str, float | None] = field(default_factory=dict)
    metadata: TimelineMetadata = field(default_factory=TimelineMetadata)
    trend_direction: str = "unknown"
    trend_change: str = "0"


@dataclass
class FootTrafficEnrichment:
    main_score: float
    periods_used: tuple[str, ...] = TIME_PERIODS
    timeline: dict[str, float | None] = field(default_factory=dict)
    metadata: TimelineMetadata = field(default_factory=TimelineMetadata)
    by_period: dict[str, dict[str, float | None]] = field(default_factory=dict)
    combinations: dict[str, dict[str, float | None]] = field(default_factory=dict)
    trend_direction: str = "unknown"
    trend_change: str = "0"


@dataclass
class RankedZone:
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
    avg_rent: float | None
    demographic_score: float = 0.0
    demographic_match_pct: float | None = None
    gender_match_pct: float | None = None
    age_match_pct: float | None = None
    income_match_pct: float | None = None
    combined_match_pct: float | None = None
    overcounting_detected: bool = False
    data_sources: dict[str, Any] = field(default_factory=dict)
    crime: CrimeEnrichment | None = None
    foot_traffic: FootTrafficEnrichment | None = None


@dataclass(frozen=True)
class WatchedRent:
    geoid: str
    avg_rent: float | None
    passed: bool  # within the requested rent range on its own merits


@dataclass
class RankingResult:
    zones: list[RankedZone]
    total_zones_found: int
    top_percent: float
    weights: WeightSet
    percentages: PercentageResults
    demographic_scoring_applied: bool = False
    time_periods: tuple[str, ...] = TIME_PERIODS
    watched_rents: list[WatchedRent] = field(default_factory=list)

    @property
    def top_zones_returned(self) -> int:
        return len(self.zones)
