"""Tests for CSV parsing and import."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from squad_stats.repositories.base import PLAYERS_TABLE, StoreError
from squad_stats.services.csv_import import (
    import_csv_file,
    import_csv_text,
    parse_float,
    parse_int,
    parse_player_csv,
    split_fields,
)

HEADER = "name,team,role,k,a,dd,dt,heal,games,ak,aa,add,adt,aheal"


class TestParsing:
    def test_parses_positional_columns(self, sample_csv):
        rows = parse_player_csv(sample_csv)

        assert len(rows) == 4
        vortex = rows[0]
        assert vortex["player_name"] == "Vortex"
        assert vortex["team"] == "Crimson Wolves"
        assert vortex["role"] == "Duelist"
        assert vortex["total_kills"] == 180
        assert vortex["total_damage_taken"] == 300000
        assert vortex["total_games"] == 20
        assert vortex["avg_assists"] == 4.5
        assert vortex["avg_amount_healed"] == 600.0

    def test_quoted_value_keeps_comma(self, sample_csv):
        rows = parse_player_csv(sample_csv)
        assert rows[1]["player_name"] == "Kane, Jr."
        assert rows[1]["team"] == "Crimson Wolves"

    def test_malformed_numbers_default_to_zero(self):
        text = f"{HEADER}\nVortex,Wolves,Duelist,abc,10,n/a,5,0,4,x,2.5,?,1,--\n"
        row = parse_player_csv(text)[0]

        assert row["total_kills"] == 0
        assert row["total_assists"] == 10
        assert row["total_damage_dealt"] == 0
        assert row["avg_kills"] == 0.0
        assert row["avg_assists"] == 2.5
        assert row["avg_damage_dealt"] == 0.0
        assert row["avg_amount_healed"] == 0.0

    def test_numbers_use_leading_digits(self):
        text = f"{HEADER}\nVortex,Wolves,Duelist,12.7,7kills,0,0,0,3,1.5e1,.5,0,0,0\n"
        row = parse_player_csv(text)[0]

        assert row["total_kills"] == 12
        assert row["total_assists"] == 7
        assert row["avg_kills"] == 15.0
        assert row["avg_assists"] == 0.5

    def test_skips_header_blank_and_short_lines(self):
        text = (
            f"{HEADER}\n"
            "\n"
            "   \n"
            "Too,Short,Row,1,2,3\n"
            "Vortex,Wolves,Duelist,1,2,3,4,5,1,1,2,3,4,5\n"
        )
        rows = parse_player_csv(text)
        assert [r["player_name"] for r in rows] == ["Vortex"]

    def test_missing_last_column_reads_as_zero(self):
        text = f"{HEADER}\nVortex,Wolves,Duelist,1,2,3,4,5,1,1,2,3,4\n"
        rows = parse_player_csv(text)

        assert len(rows) == 1
        assert rows[0]["avg_damage_taken"] == 4.0
        assert rows[0]["avg_amount_healed"] == 0.0

    def test_windows_line_endings(self):
        text = f"{HEADER}\r\nVortex,Wolves,Duelist,1,2,3,4,5,1,1,2,3,4,5\r\n"
        row = parse_player_csv(text)[0]
        assert row["avg_amount_healed"] == 5.0

    def test_header_only(self):
        assert parse_player_csv(HEADER) == []

    def test_split_fields_trims_whitespace(self):
        assert split_fields(' Vortex ,"Crimson Wolves",Duelist ') == [
            "Vortex",
            "Crimson Wolves",
            "Duelist",
        ]

    @pytest.mark.parametrize("value, expected", [("42", 42), ("-3", -3), ("", 0), (None, 0)])
    def test_parse_int(self, value, expected):
        assert parse_int(value) == expected

    @pytest.mark.parametrize("value, expected", [("4.25", 4.25), ("abc", 0.0), ("7", 7.0)])
    def test_parse_float(self, value, expected):
        assert parse_float(value) == expected


@pytest.mark.anyio
class TestImport:
    async def test_import_upserts_players(self, store, sample_csv):
        result = await import_csv_text(store, sample_csv)

        assert result.success is True
        assert result.count == 4
        rows = await store.select(PLAYERS_TABLE)
        assert {r["player_name"] for r in rows} == {"Vortex", "Kane, Jr.", "Shade", "Halo"}

    async def test_reimport_overwrites_by_name(self, store, sample_csv):
        await import_csv_text(store, sample_csv)
        first = await store.select(PLAYERS_TABLE, {"player_name": "Vortex"})

        changed = f"{HEADER}\nVortex,Azure Tide,Duelist,200,90,400000,300000,12000,21,9.5,4.3,1,1,1\n"
        result = await import_csv_text(store, changed)

        assert result.success is True
        rows = await store.select(PLAYERS_TABLE, {"player_name": "Vortex"})
        assert len(rows) == 1
        assert rows[0]["id"] == first[0]["id"]
        assert rows[0]["team"] == "Azure Tide"
        assert rows[0]["total_games"] == 21
        assert len(await store.select(PLAYERS_TABLE)) == 4

    async def test_import_file(self, store, csv_file):
        result = await import_csv_file(store, csv_file)
        assert result.success is True
        assert result.count == 4

    async def test_import_missing_file(self, store, tmp_path):
        result = await import_csv_file(store, tmp_path / "missing.csv")

        assert result.success is False
        assert "missing.csv" in result.error
        assert await store.select(PLAYERS_TABLE) == []

    async def test_import_file_not_utf8(self, store, tmp_path):
        path = tmp_path / "latin1.csv"
        path.write_bytes(
            f"{HEADER}\n".encode() + b"\xff\xfeVortex,W,D,1,2,3,4,5,1,1,2,3,4,5\n"
        )

        result = await import_csv_file(store, path)

        assert result.success is False
        assert "not UTF-8" in result.error
        assert await store.select(PLAYERS_TABLE) == []

    async def test_store_failure_is_reported(self, sample_csv):
        store = MagicMock()
        store.upsert = AsyncMock(side_effect=StoreError("permission denied", status_code=401))

        result = await import_csv_text(store, sample_csv)

        assert result.success is False
        assert result.error == "permission denied"
        store.upsert.assert_awaited_once()
        assert store.upsert.call_args.kwargs["on_conflict"] == "player_name"
