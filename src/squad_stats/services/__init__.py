"""Business logic services."""

from squad_stats.services.csv_import import ImportResult, parse_player_csv
from squad_stats.services.player_service import (
    DashboardView,
    HistoryChange,
    PlayerDetail,
    PlayerNotFoundError,
    PlayerService,
)

__all__ = [
    "DashboardView",
    "HistoryChange",
    "ImportResult",
    "PlayerDetail",
    "PlayerNotFoundError",
    "PlayerService",
    "parse_player_csv",
]
