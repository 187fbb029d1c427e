"""Player, game history and team statistics models."""

from dataclasses import asdict, dataclass, field
from typing import Literal, Optional

# Per-game stat columns, in display order. A player's totals are
# "total_<stat>" and its per-game averages "avg_<stat>".
STAT_FIELDS = ("kills", "assists", "damage_dealt", "damage_taken", "amount_healed")

PerformanceBand = Literal["well_above", "above", "below", "well_below"]


def _as_int(value) -> int:
    if value is None:
        return 0
    return int(value)


def _as_float(value) -> float:
    if value is None:
        return 0.0
    return float(value)


@dataclass
class Player:
    """A player with lifetime totals and per-game averages."""

    id: str
    player_name: str
    team: str
    role: str
    total_kills: int = 0
    total_assists: int = 0
    total_damage_dealt: int = 0
    total_damage_taken: int = 0
    total_amount_healed: int = 0
    total_games: int = 0
    avg_kills: float = 0.0
    avg_assists: float = 0.0
    avg_damage_dealt: float = 0.0
    avg_damage_taken: float = 0.0
    avg_amount_healed: float = 0.0
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "Player":
        """Build a Player from a store row, reading missing stats as zero."""
        values = {
            "id": str(row["id"]),
            "player_name": row.get("player_name") or "",
            "team": row.get("team") or "",
            "role": row.get("role") or "",
            "total_games": _as_int(row.get("total_games")),
            "notes": row.get("notes"),
            "created_at": row.get("created_at"),
            "updated_at": row.get("updated_at"),
        }
        for stat in STAT_FIELDS:
            values[f"total_{stat}"] = _as_int(row.get(f"total_{stat}"))
            values[f"avg_{stat}"] = _as_float(row.get(f"avg_{stat}"))
        return cls(**values)

    def totals(self) -> dict[str, int]:
        return {stat: getattr(self, f"total_{stat}") for stat in STAT_FIELDS}

    def averages(self) -> dict[str, float]:
        return {stat: getattr(self, f"avg_{stat}") for stat in STAT_FIELDS}

    @property
    def kda(self) -> float:
        """(kills + assists) per game, treating zero games as one."""
        return (self.total_kills + self.total_assists) / max(self.total_games, 1)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        data = asdict(self)
        data["kda"] = round(self.kda, 2)
        return data


@dataclass
class PlayerHistory:
    """One recorded game for a player."""

    id: str
    player_id: str
    kills: int = 0
    assists: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    amount_healed: int = 0
    game_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict) -> "PlayerHistory":
        values = {
            "id": str(row["id"]),
            "player_id": str(row["player_id"]),
            "game_date": row.get("game_date"),
            "notes": row.get("notes"),
            "created_at": row.get("created_at"),
        }
        for stat in STAT_FIELDS:
            values[stat] = _as_int(row.get(stat))
        return cls(**values)

    def deltas(self) -> dict[str, int]:
        return {stat: getattr(self, stat) for stat in STAT_FIELDS}


@dataclass
class TeamStats:
    """Mean per-game averages across a team's players. Never persisted."""

    team: str
    avg_kills: float
    avg_assists: float
    avg_damage_dealt: float
    avg_damage_taken: float
    avg_amount_healed: float
    total_players: int


@dataclass
class StatComparison:
    """One stat of a player measured against the team average."""

    label: str
    player_value: float
    team_value: float
    percent_diff: float
    band: PerformanceBand


@dataclass
class DashboardSummary:
    """Headline numbers for the dashboard view."""

    total_players: int
    total_teams: int
    avg_games_per_player: float
    teams: list[str] = field(default_factory=list)
