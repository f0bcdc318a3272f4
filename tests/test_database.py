"""Tests for engine configuration per database URL."""
import pytest
from sqlalchemy.pool import StaticPool

from tenancy.core.database import engine_options


class TestEngineOptions:

    @pytest.mark.parametrize("url", [
        "sqlite+aiosqlite:///:memory:",
        "sqlite+aiosqlite://",
    ])
    def test_in_memory_sqlite_is_pinned_to_one_connection(self, url):
        options = engine_options(url)

        assert options["poolclass"] is StaticPool
        assert options["connect_args"] == {"check_same_thread": False}

    def test_file_sqlite_keeps_a_connection_pool(self):
        options = engine_options("sqlite+aiosqlite:///./tenancy.db")

        assert "poolclass" not in options
        assert "pool_size" not in options

    def test_postgres_uses_configured_pool(self):
        options = engine_options("postgresql+asyncpg://user:pw@db:5432/tenancy")

        assert options["pool_pre_ping"] is True
        assert "pool_size" in options
        assert "connect_args" not in options
