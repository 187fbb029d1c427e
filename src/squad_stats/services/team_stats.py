"""Team and league statistics derived from the current player list."""

from squad_stats.models.player import (
    DashboardSummary,
    PerformanceBand,
    Player,
    StatComparison,
    TeamStats,
)

ALL_TEAMS = "all"

# (label, stat) pairs shown in the player-vs-team comparison
COMPARISON_STATS = [
    ("Kills", "kills"),
    ("Assists", "assists"),
    ("Damage Dealt", "damage_dealt"),
    ("Damage Taken", "damage_taken"),
    ("Healing", "amount_healed"),
]


def calculate_team_stats(players: list[Player]) -> list[TeamStats]:
    """Mean of each player average per team, sorted by mean kills descending."""
    teams: dict[str, list[Player]] = {}
    for player in players:
        teams.setdefault(player.team, []).append(player)

    stats = []
    for team, members in teams.items():
        count = len(members)
        stats.append(
            TeamStats(
                team=team,
                avg_kills=sum(p.avg_kills for p in members) / count,
                avg_assists=sum(p.avg_assists for p in members) / count,
                avg_damage_dealt=sum(p.avg_damage_dealt for p in members) / count,
                avg_damage_taken=sum(p.avg_damage_taken for p in members) / count,
                avg_amount_healed=sum(p.avg_amount_healed for p in members) / count,
                total_players=count,
            )
        )

    return sorted(stats, key=lambda s: s.avg_kills, reverse=True)


def team_stats_by_name(stats: list[TeamStats]) -> dict[str, TeamStats]:
    return {s.team: s for s in stats}


def percent_diff(player_value: float, team_value: float) -> float:
    """Relative difference in percent; 0 when the team value is 0."""
    if team_value == 0:
        return 0.0
    return (player_value - team_value) / team_value * 100


def performance_band(diff: float) -> PerformanceBand:
    if diff > 20:
        return "well_above"
    if diff > 0:
        return "above"
    if diff > -20:
        return "below"
    return "well_below"


def compare_to_team(player: Player, team_stats: TeamStats) -> list[StatComparison]:
    """Each of the player's averages against the team's mean."""
    comparisons = []
    for label, stat in COMPARISON_STATS:
        player_value = getattr(player, f"avg_{stat}")
        team_value = getattr(team_stats, f"avg_{stat}")
        diff = percent_diff(player_value, team_value)
        comparisons.append(
            StatComparison(
                label=label,
                player_value=player_value,
                team_value=team_value,
                percent_diff=round(diff, 1),
                band=performance_band(diff),
            )
        )
    return comparisons


def filter_players(
    players: list[Player],
    search: str = "",
    team: str = ALL_TEAMS,
) -> list[Player]:
    """Players whose name or team contains `search` (case-insensitive).

    A team other than "all" (or empty) additionally requires an exact match.
    """
    query = (search or "").lower()
    return [
        p
        for p in players
        if (query in p.player_name.lower() or query in p.team.lower())
        and (not team or team == ALL_TEAMS or p.team == team)
    ]


def list_teams(players: list[Player]) -> list[str]:
    return sorted({p.team for p in players})


def summarize(players: list[Player]) -> DashboardSummary:
    teams = list_teams(players)
    avg_games = sum(p.total_games for p in players) / len(players) if players else 0.0
    return DashboardSummary(
        total_players=len(players),
        total_teams=len(teams),
        avg_games_per_player=round(avg_games, 1),
        teams=teams,
    )
