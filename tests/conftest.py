"""Shared fixtures: a DuckDB-backed store under tmp_path and sample CSV data."""

import pytest

from squad_stats.repositories.duckdb_store import DuckDBTableStore
from squad_stats.services.player_service import PlayerService

SAMPLE_CSV = """Player Name,Team,Role,Total Kills,Total Assists,Total Damage Dealt,Total Damage Taken,Total Healed,Total Games,Avg Kills,Avg Assists,Avg Damage Dealt,Avg Damage Taken,Avg Healed
Vortex,Crimson Wolves,Duelist,180,90,400000,300000,12000,20,9,4.5,20000,15000,600
"Kane, Jr.",Crimson Wolves,Tank,80,200,220000,500000,0,20,4,10,11000,25000,0
Shade,Azure Tide,Duelist,200,80,450000,280000,4000,20,10,4,22500,14000,200
Halo,Azure Tide,Support,20,300,80000,160000,400000,20,1,15,4000,8000,20000
"""


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def store(tmp_path):
    """Empty local store backed by a temporary DuckDB file."""
    return DuckDBTableStore(tmp_path / "test.duckdb")


@pytest.fixture
def sample_csv():
    return SAMPLE_CSV


@pytest.fixture
def csv_file(tmp_path):
    path = tmp_path / "player-statistics.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


@pytest.fixture
def service(store, csv_file):
    return PlayerService(store, csv_file)
