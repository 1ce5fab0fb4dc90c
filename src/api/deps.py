"""FastAPI dependency injection."""

from sqlalchemy.ext.asyncio import create_async_engine

from src.config import settings
from src.data.base import ZoneDataSource
from src.data.cache import RowCache
from src.data.postgres import PostgresZoneSource
from src.data.search import ZoneSearchService
from src.data.supabase import SupabaseZoneSource

engine = create_async_engine(settings.database_url, echo=settings.debug)
row_cache = RowCache()


def get_zone_source() -> ZoneDataSource:
    if settings.zone_source == "supabase":
        return SupabaseZoneSource(settings.supabase_url, settings.supabase_key, row_cache)
    return PostgresZoneSource(engine)


def get_search_service() -> ZoneSearchService:
    return ZoneSearchService(get_zone_source())
