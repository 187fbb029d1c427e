"""Tests for settings and table store selection."""

from unittest.mock import patch

import pytest

from squad_stats.config import Settings
from squad_stats.repositories import DuckDBTableStore, SupabaseClient, create_table_store


def test_hosted_store_when_credentials_set():
    settings = Settings(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="anon-key",
        database_path="ignored.duckdb",
        _env_file=None,
    )

    store = create_table_store(settings)

    assert isinstance(store, SupabaseClient)
    assert store.base_url == "https://demo.supabase.co/rest/v1"


def test_local_store_without_credentials(tmp_path):
    settings = Settings(
        supabase_url="https://demo.supabase.co",
        supabase_anon_key="",
        database_path=str(tmp_path / "local.duckdb"),
        _env_file=None,
    )

    store = create_table_store(settings)

    assert isinstance(store, DuckDBTableStore)
    assert store.database_path == tmp_path / "local.duckdb"


def test_no_store_configured():
    settings = Settings(supabase_url="", supabase_anon_key="", database_path="", _env_file=None)

    with pytest.raises(ValueError, match="Missing Supabase environment variables"):
        create_table_store(settings)


def test_cors_origins_list():
    settings = Settings(cors_origins="http://a.test, http://b.test,,", _env_file=None)
    assert settings.cors_origins_list == ["http://a.test", "http://b.test"]


def test_run_serves_on_configured_host_and_port(monkeypatch):
    from squad_stats import main

    monkeypatch.setattr(main.settings, "host", "127.0.0.1")
    monkeypatch.setattr(main.settings, "port", 9123)
    with patch.object(main.uvicorn, "run") as run:
        main.run()

    run.assert_called_once()
    assert run.call_args.args == ("squad_stats.main:app",)
    assert run.call_args.kwargs["host"] == "127.0.0.1"
    assert run.call_args.kwargs["port"] == 9123
