"""Running totals and per-game averages for a player.

Recording or removing a game changes the player's totals by that game's
stats and recomputes every average from the new totals. The history row
and the player row are written separately, so a failure between the two
writes leaves them out of step.
"""

from dataclasses import replace

from squad_stats.models.player import STAT_FIELDS, Player, PlayerHistory
from squad_stats.utils import utc_timestamp


def averages_for(totals: dict[str, int], games: int) -> dict[str, float]:
    """Per-game averages from totals; all zero when no games were played."""
    if games <= 0:
        return {stat: 0.0 for stat in totals}
    return {stat: total / games for stat, total in totals.items()}


def _player_update(totals: dict[str, int], games: int) -> dict:
    update: dict = {f"total_{stat}": totals[stat] for stat in STAT_FIELDS}
    update["total_games"] = games
    for stat, avg in averages_for(totals, games).items():
        update[f"avg_{stat}"] = avg
    update["updated_at"] = utc_timestamp()
    return update


def add_game(player: Player, record: PlayerHistory | dict) -> dict:
    """Column updates for a player after recording one more game.

    Args:
        player: Player as currently stored
        record: The game's stats (history row or plain stat dict)

    Returns:
        Dict of players-table columns to write
    """
    deltas = _deltas(record)
    totals = {stat: value + deltas[stat] for stat, value in player.totals().items()}
    return _player_update(totals, player.total_games + 1)


def remove_game(player: Player, record: PlayerHistory | dict) -> dict:
    """Column updates for a player after removing a recorded game.

    The game count never drops below zero.
    """
    deltas = _deltas(record)
    totals = {stat: value - deltas[stat] for stat, value in player.totals().items()}
    return _player_update(totals, max(player.total_games - 1, 0))


def apply_update(player: Player, update: dict) -> Player:
    """Copy of the player with an update dict applied."""
    return replace(player, **update)


def _deltas(record: PlayerHistory | dict) -> dict[str, int]:
    if isinstance(record, PlayerHistory):
        return record.deltas()
    return {stat: int(record.get(stat) or 0) for stat in STAT_FIELDS}
