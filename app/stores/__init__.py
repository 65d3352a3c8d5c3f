# app/stores/__init__.py
from functools import lru_cache

from app.config import settings
from app.stores.base import MAX_CHUNK_SIZE, SiteStore


def build_store(backend: str = None) -> SiteStore:
    backend = backend or settings.STORE_BACKEND
    if backend == "sql":
        from app.database import SessionLocal, init_db
        from app.stores.sql import SqlSiteStore

        init_db()
        return SqlSiteStore(SessionLocal)
    if backend == "supabase":
        from app.stores.supabase import SupabaseSiteStore

        return SupabaseSiteStore(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY,
                                 table=settings.SITES_TABLE, timeout=settings.REQUEST_TIMEOUT)
    raise RuntimeError(f"Unknown STORE_BACKEND: {backend}")


@lru_cache(maxsize=1)
def get_store() -> SiteStore:
    """Process-wide store built from settings; override it in tests."""
    return build_store()


__all__ = ["MAX_CHUNK_SIZE", "SiteStore", "build_store", "get_store"]
