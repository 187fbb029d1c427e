"""CSV export of the player list."""

import csv
import io
from datetime import date
from typing import Optional

from squad_stats.models.player import Player
from squad_stats.utils import today_iso

EXPORT_HEADER = [
    "Player Name",
    "Team",
    "Role",
    "Avg Kills",
    "Avg Assists",
    "Avg Damage Dealt",
    "Total Games",
]


def export_players_csv(players: list[Player]) -> str:
    """Render players as CSV text, one row per player after the header."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for p in players:
        writer.writerow([
            p.player_name,
            p.team,
            p.role,
            p.avg_kills,
            p.avg_assists,
            p.avg_damage_dealt,
            p.total_games,
        ])
    return buffer.getvalue().rstrip("\n")


def export_filename(today: Optional[date] = None) -> str:
    return f"player-stats-{today_iso(today)}.csv"
