"""In-memory zone source built from a snapshot of raw table records.

Used by the CLI (JSON file on disk) and by tests. A table set to None in
the snapshot behaves like a failed fetch.
"""

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from src.data import records
from src.models.zone import GEOID_KEY, CompositionRow, TrendRow, ZoneRow

SNAPSHOT_TABLES = ("zones", "ethnicity", "demographics", "income", "crime_trends", "foot_traffic_trends")


class SnapshotUnavailableError(LookupError):
    pass


class SnapshotZoneSource:
    def __init__(self, tables: dict[str, list[dict[str, Any]] | None]):
        self.tables = tables

    @classmethod
    def from_json(cls, path: str | Path) -> "SnapshotZoneSource":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls({name: data.get(name) for name in SNAPSHOT_TABLES})

    def _records(self, name: str) -> list[dict[str, Any]]:
        table = self.tables.get(name)
        if table is None:
            raise SnapshotUnavailableError(f"Snapshot has no {name} table")
        return table

    def _subset(self, name: str, geoids: Sequence[str]) -> list[dict[str, Any]]:
        wanted = set(geoids)
        return [r for r in self._records(name) if str(r.get(GEOID_KEY)) in wanted]

    async def fetch_zones(self) -> list[ZoneRow]:
        return records.zone_rows(self._records("zones"))

    async def fetch_ethnicity(self) -> list[CompositionRow]:
        return records.ethnicity_rows(self._records("ethnicity"))

    async def fetch_demographics(self) -> list[CompositionRow]:
        return records.demographic_rows(self._records("demographics"))

    async def fetch_income(self) -> list[CompositionRow]:
        return records.income_rows(self._records("income"))

    async def fetch_crime_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        return records.trend_rows(self._subset("crime_trends", geoids))

    async def fetch_foot_traffic_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        return records.trend_rows(self._subset("foot_traffic_trends", geoids))
