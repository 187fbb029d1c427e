"""Timestamp helpers for row bookkeeping columns."""

from datetime import date, datetime, timezone


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string (created_at / updated_at)."""
    return datetime.now(timezone.utc).isoformat()


def today_iso(today: date | None = None) -> str:
    """Date part used in export file names, e.g. 2025-11-17."""
    return (today or datetime.now(timezone.utc).date()).isoformat()
