"""Table-scoped store contract shared by the hosted and local stores."""

from typing import Any, Optional

PLAYERS_TABLE = "players"
HISTORY_TABLE = "player_history"

# Known columns per table. Local SQL is only ever built from these names.
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    PLAYERS_TABLE: (
        "id",
        "player_name",
        "team",
        "role",
        "total_kills",
        "total_assists",
        "total_damage_dealt",
        "total_damage_taken",
        "total_amount_healed",
        "total_games",
        "avg_kills",
        "avg_assists",
        "avg_damage_dealt",
        "avg_damage_taken",
        "avg_amount_healed",
        "notes",
        "created_at",
        "updated_at",
    ),
    HISTORY_TABLE: (
        "id",
        "player_id",
        "kills",
        "assists",
        "damage_dealt",
        "damage_taken",
        "amount_healed",
        "game_date",
        "notes",
        "created_at",
    ),
}


class StoreError(RuntimeError):
    """Raised when a store operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TableStore:
    """Row-oriented access to the players and player_history tables.

    Filters are column equality matches, e.g. ``{"player_id": "abc"}``.
    Every method raises StoreError on failure.
    """

    async def select(
        self,
        table: str,
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[dict]:
        raise NotImplementedError

    async def insert(self, table: str, rows: list[dict]) -> list[dict]:
        raise NotImplementedError

    async def update(self, table: str, values: dict, filters: dict[str, Any]) -> list[dict]:
        raise NotImplementedError

    async def delete(self, table: str, filters: dict[str, Any]) -> None:
        raise NotImplementedError

    async def upsert(self, table: str, rows: list[dict], on_conflict: str) -> list[dict]:
        raise NotImplementedError

    async def close(self) -> None:
        """Release any held resources."""
        return None
