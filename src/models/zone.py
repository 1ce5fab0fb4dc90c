"""Row types supplied by the storage layer.

Rows are immutable for the duration of one ranking request. Numeric fields
are already coerced (see src.data.coerce); a None means the field was
missing or unparseable, which is distinct from a stored zero.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from src.data.coerce import to_optional_number

GEOID_KEY = "GEOID"


@dataclass(frozen=True)
class ZoneRow:
    geoid: str
    resilience_score: float | None = None
    foot_traffic_score: float | None = None
    crime_score: float | None = None
    flood_risk_score: float | None = None
    rent_score: float | None = None
    poi_score: float | None = None
    avg_rent: float | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "ZoneRow":
        return cls(
            geoid=str(record.get(GEOID_KEY, "")),
            resilience_score=to_optional_number(record.get("resilience_score")),
            foot_traffic_score=to_optional_number(record.get("foot_traffic_score")),
            crime_score=to_optional_number(record.get("crime_score")),
            flood_risk_score=to_optional_number(record.get("flood_risk_score")),
            rent_score=to_optional_number(record.get("rent_score")),
            poi_score=to_optional_number(record.get("poi_score")),
            avg_rent=to_optional_number(record.get("avg_rent")),
        )


@dataclass(frozen=True)
class SparseRow:
    """A zone-keyed row of named numeric columns.

    `values` only holds columns that were present in the source record;
    unparseable entries are kept as None so that `has()` can tell a column
    that exists but is blank from one the table never had.
    """

    geoid: str
    values: Mapping[str, float | None] = field(default_factory=dict)

    def has(self, column: str) -> bool:
        return self.values.get(column) is not None

    def get(self, column: str) -> float | None:
        return self.values.get(column)

    def number(self, column: str) -> float:
        value = self.values.get(column)
        return 0.0 if value is None else value

    @classmethod
    def _parse_values(
        cls, record: Mapping[str, Any], skip: tuple[str, ...]
    ) -> Mapping[str, float | None]:
        values = {
            str(key): to_optional_number(raw)
            for key, raw in record.items()
            if key != GEOID_KEY and key not in skip
        }
        return MappingProxyType(values)


@dataclass(frozen=True)
class CompositionRow(SparseRow):
    """Ethnicity, age/gender or income table row.

    `total` is the population (or household) denominator; `label` carries an
    optional display field such as the neighborhood tabulation area name.
    """

    total: float | None = None
    label: str | None = None

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        total_key: str | None = None,
        label_key: str | None = None,
    ) -> "CompositionRow":
        skip = tuple(k for k in (label_key,) if k)
        label = record.get(label_key) if label_key else None
        return cls(
            geoid=str(record.get(GEOID_KEY, "")),
            values=cls._parse_values(record, skip),
            total=to_optional_number(record.get(total_key)) if total_key else None,
            label=str(label) if label else None,
        )


@dataclass(frozen=True)
class TrendRow(SparseRow):
    """Per-year incident or pedestrian series for one zone."""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "TrendRow":
        return cls(
            geoid=str(record.get(GEOID_KEY, "")),
            values=cls._parse_values(record, ()),
        )
