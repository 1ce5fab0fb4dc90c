"""Supabase (PostgREST) zone source over httpx.

Full-table reads are cached in redis; per-zone trend reads are not, since
their geoid set changes with every ranking.
"""

import logging
from collections.abc import Sequence

import httpx

from src.config import settings
from src.data import records
from src.data.cache import RowCache
from src.models.zone import GEOID_KEY, CompositionRow, TrendRow, ZoneRow

logger = logging.getLogger(__name__)


class SupabaseZoneSource:
    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        cache: RowCache | None = None,
    ):
        self.base_url = (base_url or settings.supabase_url).rstrip("/")
        self.api_key = api_key or settings.supabase_key
        self.headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        self.cache = cache or RowCache()

    async def _get(self, table_name: str, params: dict | None = None) -> list[dict]:
        async with httpx.AsyncClient(timeout=30.0) as client:
            resp = await client.get(
                f"{self.base_url}/rest/v1/{table_name}",
                headers=self.headers,
                params={"select": "*", **(params or {})},
            )
            resp.raise_for_status()
            data = resp.json()
        logger.debug("Fetched %d rows from %s", len(data), table_name)
        return data

    async def fetch_table(self, table_name: str) -> list[dict]:
        return await self.cache.get_or_fetch(
            self.cache.key("supabase", table_name), lambda: self._get(table_name)
        )

    async def fetch_subset(self, table_name: str, geoids: Sequence[str]) -> list[dict]:
        if not geoids:
            return []
        in_list = ",".join(f'"{g}"' for g in geoids)
        return await self._get(table_name, {GEOID_KEY: f"in.({in_list})"})

    async def fetch_zones(self) -> list[ZoneRow]:
        return records.zone_rows(await self.fetch_table(settings.zones_table))

    async def fetch_ethnicity(self) -> list[CompositionRow]:
        return records.ethnicity_rows(await self.fetch_table(settings.ethnicity_table))

    async def fetch_demographics(self) -> list[CompositionRow]:
        return records.demographic_rows(await self.fetch_table(settings.demographics_table))

    async def fetch_income(self) -> list[CompositionRow]:
        return records.income_rows(await self.fetch_table(settings.income_table))

    async def fetch_crime_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        return records.trend_rows(await self.fetch_subset(settings.crime_trends_table, geoids))

    async def fetch_foot_traffic_trends(self, geoids: Sequence[str]) -> list[TrendRow]:
        return records.trend_rows(
            await self.fetch_subset(settings.foot_traffic_trends_table, geoids)
        )
