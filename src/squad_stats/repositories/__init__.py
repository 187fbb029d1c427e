"""Table stores: hosted Supabase client and local DuckDB file."""

import logging

from squad_stats.config import Settings
from squad_stats.repositories.base import (
    HISTORY_TABLE,
    PLAYERS_TABLE,
    StoreError,
    TableStore,
)
from squad_stats.repositories.duckdb_store import DuckDBTableStore
from squad_stats.repositories.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def create_table_store(settings: Settings) -> TableStore:
    """Factory function to get the configured table store.

    The hosted store wins when both its URL and key are set; otherwise a
    local DuckDB file is used if a path is configured.

    Raises:
        ValueError: If neither store is configured
    """
    if settings.use_remote_store:
        logger.info("Using hosted Supabase store")
        return SupabaseClient(
            settings.supabase_url,
            settings.supabase_anon_key,
            timeout=settings.request_timeout,
        )
    if settings.database_path:
        logger.info(f"Using local DuckDB store at {settings.database_path}")
        return DuckDBTableStore(settings.database_path)
    raise ValueError("Missing Supabase environment variables")


__all__ = [
    "HISTORY_TABLE",
    "PLAYERS_TABLE",
    "DuckDBTableStore",
    "StoreError",
    "SupabaseClient",
    "TableStore",
    "create_table_store",
]
