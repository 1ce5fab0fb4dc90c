"""PostgreSQL zone source using SQLAlchemy async Core.

The factor tables are wide (one column per ethnicity, bracket or year), so
rows are read with `SELECT *` and converted through src.data.records rather
than mapped onto ORM classes.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import column, literal_column, select, table
from sqlalchemy.ext.asyncio import AsyncEngine

from src.config import settings
from src.data import records
from src.models.zone import GEOID_KEY, CompositionRow, TrendRow, ZoneRow

logger = logging.getLogger(__name__)


class PostgresZoneSource:
    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def _select(self, table_name: str, geoids: Sequence[str] | None = None) -> list[dict]:
        stmt = select(literal_column("*")).select_from(table(table_name))
        if geoids is not None:
            stmt = stmt.where(column(GEOID_KEY).in_(list(geoids)))
        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            rows = [dict(r) for r in result.mappings().all()]
        logger.debug("Fetched %d rows from %s", len(rows), table_name)
        return rows

    async def fetch_zones(self) -> list[ZoneRow]:
        return records.zone_rows(await self._select(settings.zones_table))

    async def fetch_ethnicity(self) -> list[CompositionRow]:
        return records.ethnicity_rows(await self._select(settings.ethnicity_table))

    async def fetch_demographics(self) -> list[CompositionRow]:
        return records.demographic_rows(await self._select(settings.demographics_table))

    async def fetch_income(self) -> list[CompositionRow]:
        return records.income_rows(await self._select(settings.income_table))

    async def fetch_crime_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        if not geoids:
            return []
        return records.trend_rows(await self._select(settings.crime_trends_table, geoids))

    async def fetch_foot_traffic_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        if not geoids:
            return []
        return records.trend_rows(await self._select(settings.foot_traffic_trends_table, geoids))
