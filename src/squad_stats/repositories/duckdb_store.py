"""DuckDB-backed local table store.

Mirrors the hosted tables in a single .duckdb file so the service can run
offline. Like the hosted schema, player_history carries no foreign key to
players: deleting a player leaves its history rows in place.
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Optional

import duckdb
import pandas as pd

from squad_stats.repositories.base import (
    HISTORY_TABLE,
    PLAYERS_TABLE,
    TABLE_COLUMNS,
    StoreError,
    TableStore,
)
from squad_stats.utils import utc_timestamp

logger = logging.getLogger(__name__)

SCHEMA_SQL = f"""
    CREATE TABLE IF NOT EXISTS {PLAYERS_TABLE} (
        id VARCHAR PRIMARY KEY,
        player_name VARCHAR NOT NULL UNIQUE,
        team VARCHAR NOT NULL DEFAULT '',
        role VARCHAR NOT NULL DEFAULT '',
        total_kills BIGINT NOT NULL DEFAULT 0,
        total_assists BIGINT NOT NULL DEFAULT 0,
        total_damage_dealt BIGINT NOT NULL DEFAULT 0,
        total_damage_taken BIGINT NOT NULL DEFAULT 0,
        total_amount_healed BIGINT NOT NULL DEFAULT 0,
        total_games INTEGER NOT NULL DEFAULT 0,
        avg_kills DOUBLE NOT NULL DEFAULT 0,
        avg_assists DOUBLE NOT NULL DEFAULT 0,
        avg_damage_dealt DOUBLE NOT NULL DEFAULT 0,
        avg_damage_taken DOUBLE NOT NULL DEFAULT 0,
        avg_amount_healed DOUBLE NOT NULL DEFAULT 0,
        notes VARCHAR,
        created_at VARCHAR,
        updated_at VARCHAR
    );

    CREATE TABLE IF NOT EXISTS {HISTORY_TABLE} (
        id VARCHAR PRIMARY KEY,
        player_id VARCHAR NOT NULL,
        kills BIGINT NOT NULL DEFAULT 0,
        assists BIGINT NOT NULL DEFAULT 0,
        damage_dealt BIGINT NOT NULL DEFAULT 0,
        damage_taken BIGINT NOT NULL DEFAULT 0,
        amount_healed BIGINT NOT NULL DEFAULT 0,
        game_date VARCHAR,
        notes VARCHAR,
        created_at VARCHAR
    );
"""


class DuckDBTableStore(TableStore):
    """Data access layer - DuckDB queries against a local database file.

    The async methods run their queries synchronously on the calling event
    loop. Each query opens a short-lived connection to a small local file.
    """

    def __init__(self, database_path: str | Path):
        """Initialize with path to the DuckDB database, creating it if needed.

        Args:
            database_path: Path to the .duckdb file
        """
        self._db_path = Path(database_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        with duckdb.connect(str(self._db_path)) as conn:
            for statement in SCHEMA_SQL.split(";"):
                if statement.strip():
                    conn.execute(statement)
            tables = conn.execute("SHOW TABLES").fetchall()
        logger.info(f"DuckDBTableStore: Using {self._db_path} ({len(tables)} tables)")

    @property
    def database_path(self) -> Path:
        return self._db_path

    @staticmethod
    def _columns(table: str, columns) -> list[str]:
        """Validate table and column names against the known schema."""
        known = TABLE_COLUMNS.get(table)
        if known is None:
            raise StoreError(f"Unknown table: {table}")
        unknown = [c for c in columns if c not in known]
        if unknown:
            raise StoreError(f"Unknown column(s) for {table}: {', '.join(unknown)}")
        return list(columns)

    def _where(self, table: str, filters: Optional[dict[str, Any]]) -> tuple[str, list]:
        if not filters:
            return "", []
        columns = self._columns(table, filters.keys())
        clause = " AND ".join(f"{c} = ?" for c in columns)
        return f" WHERE {clause}", [filters[c] for c in columns]

    def _query(self, sql: str, params: list | None = None) -> list[dict]:
        """Execute query and return list of dicts with native Python values."""
        try:
            with duckdb.connect(str(self._db_path)) as conn:
                df = conn.execute(sql, params or []).df()
        except duckdb.Error as e:
            raise StoreError(str(e)) from e

        # NULLs come back as NaN in numeric columns
        df = df.astype(object).where(pd.notna(df), None)
        return df.to_dict(orient="records")

    def _execute(self, sql: str, params: list | None = None) -> None:
        try:
            with duckdb.connect(str(self._db_path)) as conn:
                conn.execute(sql, params or [])
        except duckdb.Error as e:
            raise StoreError(str(e)) from e

    def _prepare_row(self, table: str, row: dict) -> dict:
        """Fill id and timestamps the hosted schema would default."""
        prepared = dict(row)
        now = utc_timestamp()
        prepared.setdefault("id", str(uuid.uuid4()))
        prepared.setdefault("created_at", now)
        if table == PLAYERS_TABLE:
            prepared.setdefault("updated_at", now)
        return prepared

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        self._columns(table, [])
        where, params = self._where(table, filters)
        sql = f"SELECT * FROM {table}{where}"
        if order_by:
            self._columns(table, [order_by])
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        return self._query(sql, params)

    async def insert(self, table: str, rows: list[dict]) -> list[dict]:
        inserted = []
        for row in rows:
            prepared = self._prepare_row(table, row)
            columns = self._columns(table, prepared.keys())
            placeholders = ", ".join("?" for _ in columns)
            self._execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [prepared[c] for c in columns],
            )
            inserted.extend(await self.select(table, {"id": prepared["id"]}))
        return inserted

    async def update(self, table: str, values: dict, filters: dict[str, Any]) -> list[dict]:
        if not values:
            return await self.select(table, filters)
        columns = self._columns(table, values.keys())
        where, where_params = self._where(table, filters)
        assignments = ", ".join(f"{c} = ?" for c in columns)
        self._execute(
            f"UPDATE {table} SET {assignments}{where}",
            [values[c] for c in columns] + where_params,
        )
        return await self.select(table, filters)

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        self._columns(table, [])
        where, params = self._where(table, filters)
        self._execute(f"DELETE FROM {table}{where}", params)

    async def upsert(self, table: str, rows: list[dict], on_conflict: str) -> list[dict]:
        self._columns(table, [on_conflict])
        written = []
        for row in rows:
            prepared = self._prepare_row(table, row)
            columns = self._columns(table, prepared.keys())
            placeholders = ", ".join("?" for _ in columns)
            # Key columns and the original creation time are kept on conflict
            updatable = [c for c in columns if c not in ("id", on_conflict, "created_at")]
            action = (
                "DO UPDATE SET " + ", ".join(f"{c} = EXCLUDED.{c}" for c in updatable)
                if updatable
                else "DO NOTHING"
            )
            self._execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders}) "
                f"ON CONFLICT ({on_conflict}) {action}",
                [prepared[c] for c in columns],
            )
            written.extend(await self.select(table, {on_conflict: prepared[on_conflict]}))
        return written
