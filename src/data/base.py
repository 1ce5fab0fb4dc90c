"""Protocol definition for zone data sources.

A source supplies raw rows for one ranking request. It is read-only and
performs no scoring; implementations raise on failure and the loader
decides which failures are fatal.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from src.models.zone import CompositionRow, TrendRow, ZoneRow


@runtime_checkable
class ZoneDataSource(Protocol):
    async def fetch_zones(self) -> list[ZoneRow]:
        """All zones with their raw factor values and rent."""
        ...

    async def fetch_ethnicity(self) -> list[CompositionRow]:
        """Race/ethnicity counts per zone (total = total population)."""
        ...

    async def fetch_demographics(self) -> list[CompositionRow]:
        """Gender and age-bracket percentages per zone."""
        ...

    async def fetch_income(self) -> list[CompositionRow]:
        """Household counts per income bracket per zone."""
        ...

    async def fetch_crime_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        """Historical and predicted incident scores for the given zones."""
        ...

    async def fetch_foot_traffic_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        """Per-period pedestrian scores for the given zones."""
        ...
