"""Data models for the player statistics service."""

from squad_stats.models.player import (
    STAT_FIELDS,
    DashboardSummary,
    Player,
    PlayerHistory,
    StatComparison,
    TeamStats,
)

__all__ = [
    "STAT_FIELDS",
    "DashboardSummary",
    "Player",
    "PlayerHistory",
    "StatComparison",
    "TeamStats",
]
