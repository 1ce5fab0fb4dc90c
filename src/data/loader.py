"""Concurrent row fetching for a ranking request.

Only the zone table is required. Every other table degrades to None when
its fetch fails, which disables the factor it feeds instead of failing the
request.
"""

import asyncio
import logging
from collections.abc import Awaitable, Sequence
from dataclasses import dataclass
from typing import TypeVar

from src.data.base import ZoneDataSource
from src.models.zone import CompositionRow, TrendRow, ZoneRow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ZoneDataUnavailableError(RuntimeError):
    """The zone table could not be read, so there is nothing to rank."""


@dataclass(frozen=True)
class FactorTables:
    zones: list[ZoneRow]
    ethnicity: list[CompositionRow] | None = None
    demographics: list[CompositionRow] | None = None
    income: list[CompositionRow] | None = None


def _optional(name: str, result: T | BaseException) -> T | None:
    if isinstance(result, BaseException):
        logger.warning("Failed to fetch %s data, %s filtering disabled: %s", name, name, result)
        return None
    return result


async def fetch_all_data(source: ZoneDataSource) -> FactorTables:
    """Fetch zones plus the three composition tables concurrently."""
    zones, ethnicity, demographics, income = await asyncio.gather(
        source.fetch_zones(),
        source.fetch_ethnicity(),
        source.fetch_demographics(),
        source.fetch_income(),
        return_exceptions=True,
    )

    if isinstance(zones, BaseException):
        raise ZoneDataUnavailableError(f"Failed to fetch zones: {zones}") from zones
    if not zones:
        raise ZoneDataUnavailableError("Zone table is empty")

    tables = FactorTables(
        zones=zones,
        ethnicity=_optional("ethnicity", ethnicity),
        demographics=_optional("demographics", demographics),
        income=_optional("income", income),
    )
    logger.info(
        "Fetched %d zones (ethnicity=%s, demographics=%s, income=%s)",
        len(tables.zones),
        len(tables.ethnicity) if tables.ethnicity is not None else "n/a",
        len(tables.demographics) if tables.demographics is not None else "n/a",
        len(tables.income) if tables.income is not None else "n/a",
    )
    return tables


async def _settle(name: str, fetch: Awaitable[list[TrendRow]]) -> list[TrendRow] | None:
    try:
        return await fetch
    except Exception as e:
        logger.warning("Failed to fetch %s trends: %s", name, e)
        return None


async def fetch_trends(
    source: ZoneDataSource, geoids: Sequence[str]
) -> tuple[list[TrendRow] | None, list[TrendRow] | None]:
    """Fetch incident and pedestrian trend rows for a set of zones concurrently.

    Returns (crime rows, foot traffic rows); a failed fetch yields None.
    """
    if not geoids:
        logger.warning("No zones given for trend fetch")
        return None, None

    crime, foot_traffic = await asyncio.gather(
        _settle("crime", source.fetch_crime_trends(geoids)),
        _settle("foot traffic", source.fetch_foot_traffic_trends(geoids)),
    )
    return crime, foot_traffic
