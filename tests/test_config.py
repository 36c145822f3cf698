"""Tests for settings loading and engine construction."""

import logging

import pytest

from sieve_store.core.config import Settings, configure_logging, get_settings
from sieve_store.infrastructure.database.session import build_engine, engine_options


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = Settings()
        assert settings.database_url == "sqlite+aiosqlite:///./sieve.db"
        assert settings.database.sqlite_begin == "IMMEDIATE"
        assert settings.default_quota_limit is None

    def test_nested_environment_variables(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("DATABASE__URL", "sqlite+aiosqlite:///:memory:")
        monkeypatch.setenv("QUOTA__DEFAULT_LIMIT", "4096")
        monkeypatch.setenv("LOG__LEVEL", "warning")
        settings = get_settings()
        assert settings.database_url == "sqlite+aiosqlite:///:memory:"
        assert settings.default_quota_limit == 4096
        assert settings.log.level == "warning"

    def test_negative_default_quota_is_rejected(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("QUOTA__DEFAULT_LIMIT", "-5")
        with pytest.raises(ValueError):
            Settings()

    def test_configure_logging_uses_level(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
        configure_logging(Settings(debug=True))
        assert calls["level"] == "DEBUG"


class TestBuildEngine:

    async def test_sqlite_engine_runs_statements_in_a_transaction(self, tmp_path):
        engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
        try:
            async with engine.begin() as conn:
                result = await conn.exec_driver_sql("SELECT 1")
                assert result.scalar() == 1
                assert conn.in_transaction()
        finally:
            await engine.dispose()

    def test_postgresql_runs_serializable(self):
        options = engine_options("postgresql+asyncpg://sieve@localhost/sieve", pool_size=5)
        assert options["isolation_level"] == "SERIALIZABLE"
        assert options["pool_size"] == 5

    def test_sqlite_keeps_driver_isolation(self):
        options = engine_options("sqlite+aiosqlite:///./sieve.db", echo=True)
        assert options == {"echo": True}

    def test_greenlet_is_installed_for_async_engines(self):
        import greenlet

        assert greenlet.getcurrent() is not None
