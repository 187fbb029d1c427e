"""REST endpoints for the player statistics dashboard."""

from dataclasses import asdict
from typing import Annotated, Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response
from pydantic import BaseModel

from squad_stats.models.player import Player, PlayerHistory
from squad_stats.repositories.base import StoreError
from squad_stats.services.player_service import PlayerNotFoundError, PlayerService
from squad_stats.services.team_stats import ALL_TEAMS

router = APIRouter(prefix="/api", tags=["players"])


class PlayerInfo(BaseModel):
    """Player with totals, averages and KDA."""

    id: str
    player_name: str
    team: str
    role: str
    total_kills: int
    total_assists: int
    total_damage_dealt: int
    total_damage_taken: int
    total_amount_healed: int
    total_games: int
    avg_kills: float
    avg_assists: float
    avg_damage_dealt: float
    avg_damage_taken: float
    avg_amount_healed: float
    kda: float
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class HistoryInfo(BaseModel):
    """One recorded game."""

    id: str
    player_id: str
    kills: int
    assists: int
    damage_dealt: int
    damage_taken: int
    amount_healed: int
    game_date: str | None = None
    notes: str | None = None
    created_at: str | None = None


class TeamStatsInfo(BaseModel):
    """Mean player averages for one team."""

    team: str
    avg_kills: float
    avg_assists: float
    avg_damage_dealt: float
    avg_damage_taken: float
    avg_amount_healed: float
    total_players: int


class StatComparisonInfo(BaseModel):
    label: str
    player_value: float
    team_value: float
    percent_diff: float
    band: str


class DashboardSummaryInfo(BaseModel):
    total_players: int
    total_teams: int
    avg_games_per_player: float
    teams: list[str]


class DashboardResponse(BaseModel):
    """Response for the dashboard view."""

    summary: DashboardSummaryInfo
    players: list[PlayerInfo]
    team_stats: list[TeamStatsInfo]
    histories: dict[str, list[HistoryInfo]] = {}


class PlayerListResponse(BaseModel):
    players: list[PlayerInfo]


class PlayerDetailResponse(BaseModel):
    """Response for the player detail view."""

    player: PlayerInfo
    history: list[HistoryInfo]
    team_stats: TeamStatsInfo | None
    comparison: list[StatComparisonInfo]
    league: list[TeamStatsInfo]


class HistoryListResponse(BaseModel):
    player_id: str
    history: list[HistoryInfo]


class HistoryChangeResponse(BaseModel):
    """Player totals after a game record was added or removed."""

    player: PlayerInfo
    record: HistoryInfo


class TeamListResponse(BaseModel):
    teams: list[TeamStatsInfo]


class ImportResponse(BaseModel):
    success: bool
    count: int


class UpdatePlayerRequest(BaseModel):
    """Request body for editing a player. Omitted fields stay unchanged."""

    team: Optional[str] = None
    role: Optional[str] = None
    notes: Optional[str] = None


class AddHistoryRequest(BaseModel):
    """Request body for recording a game."""

    kills: int = 0
    assists: int = 0
    damage_dealt: int = 0
    damage_taken: int = 0
    amount_healed: int = 0
    game_date: str | None = None
    notes: str = ""


SearchQuery = Annotated[str, Query(max_length=200)]
TeamQuery = Annotated[str, Query(max_length=200)]


def _service(request: Request) -> PlayerService:
    return request.app.state.service


def _player_info(player: Player) -> PlayerInfo:
    return PlayerInfo(**player.to_dict())


def _history_info(record: PlayerHistory) -> HistoryInfo:
    return HistoryInfo(**asdict(record))


def _store_failure(e: StoreError) -> HTTPException:
    return HTTPException(502, f"Database error: {e.message}")


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    request: Request,
    search: SearchQuery = "",
    team: TeamQuery = ALL_TEAMS,
    include_history: bool = False,
):
    """Summary, filtered players and team stats for the dashboard."""
    try:
        view = await _service(request).load_dashboard(search, team, include_history)
    except StoreError as e:
        raise _store_failure(e)

    return DashboardResponse(
        summary=DashboardSummaryInfo(**asdict(view.summary)),
        players=[_player_info(p) for p in view.filtered_players],
        team_stats=[TeamStatsInfo(**asdict(s)) for s in view.team_stats],
        histories={
            player_id: [_history_info(h) for h in history]
            for player_id, history in view.histories.items()
        },
    )


@router.get("/players", response_model=PlayerListResponse)
async def list_players(
    request: Request,
    search: SearchQuery = "",
    team: TeamQuery = ALL_TEAMS,
):
    """Players ordered by average kills, filtered by search text and team."""
    try:
        view = await _service(request).load_dashboard(search, team)
    except StoreError as e:
        raise _store_failure(e)
    return PlayerListResponse(players=[_player_info(p) for p in view.filtered_players])


@router.get("/players/{player_id}", response_model=PlayerDetailResponse)
async def get_player_detail(request: Request, player_id: str):
    """Player with history, comparison to team average and league table."""
    try:
        detail = await _service(request).player_detail(player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(404, str(e))
    except StoreError as e:
        raise _store_failure(e)

    return PlayerDetailResponse(
        player=_player_info(detail.player),
        history=[_history_info(h) for h in detail.history],
        team_stats=TeamStatsInfo(**asdict(detail.team_stats)) if detail.team_stats else None,
        comparison=[StatComparisonInfo(**asdict(c)) for c in detail.comparison],
        league=[TeamStatsInfo(**asdict(s)) for s in detail.league],
    )


@router.patch("/players/{player_id}", response_model=PlayerInfo)
async def update_player(request: Request, player_id: str, body: UpdatePlayerRequest):
    """Edit a player's team, role or notes."""
    try:
        player = await _service(request).update_details(
            player_id, team=body.team, role=body.role, notes=body.notes
        )
    except PlayerNotFoundError as e:
        raise HTTPException(404, str(e))
    except StoreError as e:
        raise _store_failure(e)
    return _player_info(player)


@router.delete("/players/{player_id}", status_code=204)
async def delete_player(request: Request, player_id: str):
    """Delete a player (history rows are not removed)."""
    try:
        await _service(request).delete_player(player_id)
    except PlayerNotFoundError as e:
        raise HTTPException(404, str(e))
    except StoreError as e:
        raise _store_failure(e)
    return Response(status_code=204)


@router.get("/players/{player_id}/history", response_model=HistoryListResponse)
async def get_player_history(request: Request, player_id: str):
    """A player's recorded games, most recent first."""
    try:
        history = await _service(request).list_history(player_id)
    except StoreError as e:
        raise _store_failure(e)
    return HistoryListResponse(
        player_id=player_id, history=[_history_info(h) for h in history]
    )


@router.post(
    "/players/{player_id}/history",
    response_model=HistoryChangeResponse,
    status_code=201,
)
async def add_player_history(request: Request, player_id: str, body: AddHistoryRequest):
    """Record a game and roll it into the player's totals and averages."""
    try:
        change = await _service(request).add_history(player_id, body.model_dump())
    except PlayerNotFoundError as e:
        raise HTTPException(404, str(e))
    except StoreError as e:
        raise _store_failure(e)
    return HistoryChangeResponse(
        player=_player_info(change.player), record=_history_info(change.record)
    )


@router.delete(
    "/players/{player_id}/history/{history_id}",
    response_model=HistoryChangeResponse,
)
async def delete_player_history(request: Request, player_id: str, history_id: str):
    """Remove a recorded game and take it back out of the totals."""
    try:
        change = await _service(request).delete_history(player_id, history_id)
    except PlayerNotFoundError as e:
        raise HTTPException(404, str(e))
    except StoreError as e:
        raise _store_failure(e)
    return HistoryChangeResponse(
        player=_player_info(change.player), record=_history_info(change.record)
    )


@router.get("/teams", response_model=TeamListResponse)
async def list_team_stats(request: Request):
    """League table: team averages sorted by average kills."""
    try:
        view = await _service(request).load_dashboard()
    except StoreError as e:
        raise _store_failure(e)
    return TeamListResponse(teams=[TeamStatsInfo(**asdict(s)) for s in view.team_stats])


@router.post("/import", response_model=ImportResponse)
async def import_default_csv(request: Request):
    """Import the configured CSV resource."""
    result = await _service(request).import_default_csv()
    if not result.success:
        raise HTTPException(502, f"Failed to import data: {result.error}")
    return ImportResponse(success=True, count=result.count)


@router.post("/import/csv", response_model=ImportResponse)
async def import_csv_body(request: Request):
    """Import CSV text sent as the request body."""
    try:
        text = (await request.body()).decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(400, "CSV body must be UTF-8 text")

    result = await _service(request).import_csv(text)
    if not result.success:
        raise HTTPException(502, f"Failed to import data: {result.error}")
    return ImportResponse(success=True, count=result.count)


@router.get("/export")
async def export_players(
    request: Request,
    search: SearchQuery = "",
    team: TeamQuery = ALL_TEAMS,
):
    """Filtered player list as a CSV download."""
    try:
        content, filename = await _service(request).export_csv(search, team)
    except StoreError as e:
        raise _store_failure(e)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
