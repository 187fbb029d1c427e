"""Bulk player statistics import from CSV.

Expected columns, by position (the header line is skipped, not checked):

    name, team, role,
    total kills, total assists, total damage dealt, total damage taken,
    total healed, total games,
    avg kills, avg assists, avg damage dealt, avg damage taken, avg healed

Rows are upserted on player_name, so importing the same file twice
overwrites the players it names instead of duplicating them.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from squad_stats.repositories.base import PLAYERS_TABLE, StoreError, TableStore

logger = logging.getLogger(__name__)

# A quoted value (which may contain commas) or a run of non-comma characters.
# Empty fields produce no match.
FIELD_PATTERN = re.compile(r'(".*?"|[^,]+)(?=\s*,|\s*$)')
LEADING_INT = re.compile(r"[+-]?\d+")
LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

MIN_FIELDS = 13

INT_COLUMNS = [
    "total_kills",
    "total_assists",
    "total_damage_dealt",
    "total_damage_taken",
    "total_amount_healed",
    "total_games",
]
FLOAT_COLUMNS = [
    "avg_kills",
    "avg_assists",
    "avg_damage_dealt",
    "avg_damage_taken",
    "avg_amount_healed",
]


@dataclass
class ImportResult:
    """Outcome of a CSV import."""

    success: bool
    count: int = 0
    error: Optional[str] = None


def clean_value(value: str) -> str:
    """Strip one pair of surrounding quotes and whitespace."""
    return re.sub(r'^"|"$', "", value).strip()


def parse_int(value: Optional[str]) -> int:
    """Leading integer of a field, 0 when there is none."""
    match = LEADING_INT.match(value or "")
    return int(match.group()) if match else 0


def parse_float(value: Optional[str]) -> float:
    """Leading decimal number of a field, 0.0 when there is none."""
    match = LEADING_FLOAT.match(value or "")
    return float(match.group()) if match else 0.0


def split_fields(line: str) -> list[str]:
    return [clean_value(v) for v in FIELD_PATTERN.findall(line)]


def parse_player_csv(text: str) -> list[dict]:
    """Parse CSV text into players-table rows.

    Blank lines and lines with fewer than 13 fields are skipped.
    Malformed numeric fields become 0.
    """
    lines = text.split("\n")
    players = []

    for line in lines[1:]:
        if not line.strip():
            continue

        values = split_fields(line)
        if len(values) < MIN_FIELDS:
            logger.debug(f"Skipping short CSV row ({len(values)} fields): {line!r}")
            continue

        # The avg healed column may be missing entirely
        values += [""] * (MIN_FIELDS + 1 - len(values))

        row = {
            "player_name": values[0],
            "team": values[1],
            "role": values[2],
        }
        for offset, column in enumerate(INT_COLUMNS, start=3):
            row[column] = parse_int(values[offset])
        for offset, column in enumerate(FLOAT_COLUMNS, start=9):
            row[column] = parse_float(values[offset])
        players.append(row)

    return players


async def import_csv_text(store: TableStore, text: str) -> ImportResult:
    """Parse CSV text and upsert the players it contains."""
    try:
        players = parse_player_csv(text)
        await store.upsert(PLAYERS_TABLE, players, on_conflict="player_name")
    except StoreError as e:
        logger.error(f"Error importing CSV: {e}")
        return ImportResult(success=False, error=str(e))

    logger.info(f"Imported {len(players)} players from CSV")
    return ImportResult(success=True, count=len(players))


async def import_csv_file(store: TableStore, path: str | Path) -> ImportResult:
    """Read a CSV resource from disk and import it."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Error importing CSV: cannot read {path}: {e}")
        return ImportResult(success=False, error=f"Cannot read {path}: {e.strerror or e}")
    except UnicodeDecodeError as e:
        logger.error(f"Error importing CSV: {path} is not UTF-8 text: {e}")
        return ImportResult(success=False, error=f"Cannot read {path}: not UTF-8 text")

    return await import_csv_text(store, text)
