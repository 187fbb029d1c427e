"""Utility modules for squad_stats."""

from squad_stats.utils.timestamps import today_iso, utc_timestamp

__all__ = [
    "today_iso",
    "utc_timestamp",
]
