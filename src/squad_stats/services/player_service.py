"""Dashboard business logic: players, game history, team stats, import/export."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from squad_stats.models.player import (
    STAT_FIELDS,
    DashboardSummary,
    Player,
    PlayerHistory,
    StatComparison,
    TeamStats,
)
from squad_stats.repositories.base import (
    HISTORY_TABLE,
    PLAYERS_TABLE,
    StoreError,
    TableStore,
)
from squad_stats.services import aggregation
from squad_stats.services.csv_export import export_filename, export_players_csv
from squad_stats.services.csv_import import ImportResult, import_csv_file, import_csv_text
from squad_stats.services.team_stats import (
    ALL_TEAMS,
    calculate_team_stats,
    compare_to_team,
    filter_players,
    summarize,
    team_stats_by_name,
)
from squad_stats.utils import utc_timestamp

logger = logging.getLogger(__name__)


class PlayerNotFoundError(LookupError):
    """Raised when a player or one of its history records does not exist."""


@dataclass
class DashboardView:
    """Everything the dashboard view renders in one load."""

    players: list[Player]
    filtered_players: list[Player]
    team_stats: list[TeamStats]
    summary: DashboardSummary
    histories: dict[str, list[PlayerHistory]] = field(default_factory=dict)


@dataclass
class PlayerDetail:
    """A player measured against their team and the league."""

    player: Player
    history: list[PlayerHistory]
    team_stats: Optional[TeamStats]
    comparison: list[StatComparison]
    league: list[TeamStats]


@dataclass
class HistoryChange:
    """Result of adding or removing a game record."""

    player: Player
    record: PlayerHistory


class PlayerService:
    """Core business logic for the player statistics dashboard."""

    def __init__(self, store: TableStore, csv_import_path: Optional[str | Path] = None):
        """Initialize the player service.

        Args:
            store: Hosted or local table store
            csv_import_path: Static CSV resource used by import_default_csv
        """
        self.store = store
        self.csv_import_path = csv_import_path

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_players(self) -> list[Player]:
        rows = await self.store.select(PLAYERS_TABLE, order_by="avg_kills", descending=True)
        return [Player.from_row(row) for row in rows]

    async def get_player(self, player_id: str) -> Player:
        rows = await self.store.select(PLAYERS_TABLE, {"id": player_id})
        if not rows:
            raise PlayerNotFoundError(f"Player not found: {player_id}")
        return Player.from_row(rows[0])

    async def list_history(self, player_id: str) -> list[PlayerHistory]:
        """A player's recorded games, most recent first."""
        rows = await self.store.select(
            HISTORY_TABLE,
            {"player_id": player_id},
            order_by="game_date",
            descending=True,
        )
        return [PlayerHistory.from_row(row) for row in rows]

    async def histories_for(self, players: list[Player]) -> dict[str, list[PlayerHistory]]:
        """History per player. A failed fetch leaves that player's list empty."""
        histories = {}
        for player in players:
            try:
                histories[player.id] = await self.list_history(player.id)
            except StoreError as e:
                logger.warning(f"History fetch failed for {player.player_name}: {e}")
                histories[player.id] = []
        return histories

    async def load_dashboard(
        self,
        search: str = "",
        team: str = ALL_TEAMS,
        include_history: bool = False,
    ) -> DashboardView:
        players = await self.list_players()
        filtered = filter_players(players, search, team)
        view = DashboardView(
            players=players,
            filtered_players=filtered,
            team_stats=calculate_team_stats(players),
            summary=summarize(players),
        )
        if include_history:
            view.histories = await self.histories_for(filtered)
        return view

    async def player_detail(self, player_id: str) -> PlayerDetail:
        """Player with history, team comparison and the league table."""
        player = await self.get_player(player_id)
        league = calculate_team_stats(await self.list_players())
        team_stats = team_stats_by_name(league).get(player.team)
        history = (await self.histories_for([player]))[player.id]
        return PlayerDetail(
            player=player,
            history=history,
            team_stats=team_stats,
            comparison=compare_to_team(player, team_stats) if team_stats else [],
            league=league,
        )

    # ------------------------------------------------------------------
    # Player edits
    # ------------------------------------------------------------------

    async def update_details(
        self,
        player_id: str,
        team: Optional[str] = None,
        role: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Player:
        """Edit a player's team, role and notes. Omitted fields are unchanged."""
        await self.get_player(player_id)
        values = {
            key: value
            for key, value in {"team": team, "role": role, "notes": notes}.items()
            if value is not None
        }
        values["updated_at"] = utc_timestamp()
        rows = await self.store.update(PLAYERS_TABLE, values, {"id": player_id})
        return Player.from_row(rows[0]) if rows else await self.get_player(player_id)

    async def delete_player(self, player_id: str) -> None:
        """Delete a player. Its history rows are left in place."""
        player = await self.get_player(player_id)
        await self.store.delete(PLAYERS_TABLE, {"id": player_id})
        logger.info(f"Deleted player {player.player_name} ({player_id})")

    # ------------------------------------------------------------------
    # Game history
    # ------------------------------------------------------------------

    async def add_history(self, player_id: str, entry: dict) -> HistoryChange:
        """Record a game for a player and roll it into their totals.

        Args:
            player_id: Player the game belongs to
            entry: Stat values plus optional game_date and notes

        The history insert and the totals update are separate writes.
        """
        player = await self.get_player(player_id)

        row = {stat: int(entry.get(stat) or 0) for stat in STAT_FIELDS}
        row["player_id"] = player_id
        row["game_date"] = entry.get("game_date") or utc_timestamp()
        row["notes"] = entry.get("notes") or ""
        inserted = await self.store.insert(HISTORY_TABLE, [row])
        if inserted:
            record = PlayerHistory.from_row(inserted[0])
        else:
            record = PlayerHistory(id="", **row)

        update = aggregation.add_game(player, record)
        await self.store.update(PLAYERS_TABLE, update, {"id": player_id})
        return HistoryChange(player=aggregation.apply_update(player, update), record=record)

    async def delete_history(self, player_id: str, history_id: str) -> HistoryChange:
        """Remove a recorded game and take it back out of the totals."""
        player = await self.get_player(player_id)
        history = await self.list_history(player_id)
        record = next((h for h in history if h.id == history_id), None)
        if record is None:
            raise PlayerNotFoundError(f"History record not found: {history_id}")

        await self.store.delete(HISTORY_TABLE, {"id": history_id})

        update = aggregation.remove_game(player, record)
        await self.store.update(PLAYERS_TABLE, update, {"id": player_id})
        return HistoryChange(player=aggregation.apply_update(player, update), record=record)

    # ------------------------------------------------------------------
    # Import / export
    # ------------------------------------------------------------------

    async def import_default_csv(self) -> ImportResult:
        if not self.csv_import_path:
            return ImportResult(success=False, error="No CSV import path configured")
        return await import_csv_file(self.store, self.csv_import_path)

    async def import_csv(self, text: str) -> ImportResult:
        return await import_csv_text(self.store, text)

    async def export_csv(self, search: str = "", team: str = ALL_TEAMS) -> tuple[str, str]:
        """CSV text and download file name for the filtered player list."""
        players = filter_players(await self.list_players(), search, team)
        return export_players_csv(players), export_filename()
