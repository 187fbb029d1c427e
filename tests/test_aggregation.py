"""Tests for running totals and averages."""

import pytest

from squad_stats.models.player import Player, PlayerHistory
from squad_stats.services.aggregation import (
    add_game,
    apply_update,
    averages_for,
    remove_game,
)


@pytest.fixture
def player():
    """Player whose averages match totals / games."""
    return Player(
        id="p1",
        player_name="Vortex",
        team="Crimson Wolves",
        role="Duelist",
        total_kills=20,
        total_assists=10,
        total_damage_dealt=4000,
        total_damage_taken=3000,
        total_amount_healed=500,
        total_games=4,
        avg_kills=5.0,
        avg_assists=2.5,
        avg_damage_dealt=1000.0,
        avg_damage_taken=750.0,
        avg_amount_healed=125.0,
    )


@pytest.fixture
def game():
    return PlayerHistory(
        id="h1",
        player_id="p1",
        kills=7,
        assists=3,
        damage_dealt=1600,
        damage_taken=900,
        amount_healed=0,
    )


def test_add_game_updates_totals_and_averages(player, game):
    update = add_game(player, game)

    assert update["total_kills"] == 27
    assert update["total_assists"] == 13
    assert update["total_damage_dealt"] == 5600
    assert update["total_games"] == 5
    assert update["avg_kills"] == pytest.approx(5.4)
    assert update["avg_damage_dealt"] == pytest.approx(1120.0)
    assert update["avg_amount_healed"] == pytest.approx(100.0)
    assert update["updated_at"]


def test_add_game_accepts_plain_stat_dict(player):
    update = add_game(player, {"kills": 5})

    assert update["total_kills"] == 25
    assert update["total_assists"] == 10
    assert update["avg_kills"] == 5.0


def test_remove_game_inverts_add(player, game):
    update = remove_game(player, game)

    assert update["total_kills"] == 13
    assert update["total_games"] == 3
    assert update["avg_kills"] == pytest.approx(13 / 3)


def test_add_then_remove_restores_player(player, game):
    """Recording a game and removing it again leaves the player unchanged."""
    after_add = apply_update(player, add_game(player, game))
    restored = apply_update(after_add, remove_game(after_add, game))

    assert restored.totals() == player.totals()
    assert restored.averages() == player.averages()
    assert restored.total_games == player.total_games


def test_removing_last_game_zeroes_averages(game):
    single = Player(
        id="p2",
        player_name="Halo",
        team="Azure Tide",
        role="Support",
        total_kills=7,
        total_assists=3,
        total_damage_dealt=1600,
        total_damage_taken=900,
        total_games=1,
        avg_kills=7.0,
    )
    update = remove_game(single, game)

    assert update["total_games"] == 0
    assert update["total_kills"] == 0
    assert all(update[f"avg_{s}"] == 0.0 for s in ("kills", "assists", "damage_dealt"))


def test_game_count_floors_at_zero(game):
    empty = Player(id="p3", player_name="New", team="T", role="R")
    update = remove_game(empty, game)

    assert update["total_games"] == 0
    assert update["avg_kills"] == 0.0


def test_averages_for_zero_games():
    assert averages_for({"kills": 10, "assists": 4}, 0) == {"kills": 0.0, "assists": 0.0}


def test_averages_for_divides_by_games():
    assert averages_for({"kills": 10, "assists": 4}, 4) == {"kills": 2.5, "assists": 1.0}
