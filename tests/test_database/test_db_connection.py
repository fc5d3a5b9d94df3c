"""Tests for database connection module."""

import logging

from unittest.mock import AsyncMock
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest

from contenttrust_api.config.database import DatabaseSettings
from contenttrust_api.database.connection import Database


@pytest.fixture
def database_instance():
    """Create a Database instance for testing."""
    with patch(
        "contenttrust_api.database.connection.get_database_settings",
        return_value=DatabaseSettings(min_pool_size=1, max_pool_size=2),
    ):
        return Database()


@pytest.fixture
def mock_pool():
    """Mock asyncpg pool."""
    pool = MagicMock()
    pool.close = AsyncMock()
    pool.get_size.return_value = 2
    pool.get_min_size.return_value = 1
    pool.get_max_size.return_value = 2
    pool.get_idle_size.return_value = 1
    return pool


class TestDatabase:
    """Test Database connection manager class."""

    @pytest.mark.asyncio
    async def test_connect_passes_pool_settings(self, database_instance):
        with (
            patch(
                "contenttrust_api.database.connection.asyncpg.create_pool",
                new_callable=AsyncMock,
            ) as mock_create_pool,
            patch(
                "contenttrust_api.database.connection.get_database_url",
                return_value="postgresql://db/ct",
            ),
        ):
            await database_instance.connect()

        args, kwargs = mock_create_pool.call_args
        assert args == ("postgresql://db/ct",)
        assert kwargs["min_size"] == 1
        assert kwargs["max_size"] == 2
        assert kwargs["server_settings"]["timezone"] == "UTC"
        assert database_instance._pool is mock_create_pool.return_value

    @pytest.mark.asyncio
    async def test_connect_already_initialized(
        self, database_instance, mock_pool, caplog
    ):
        database_instance._pool = mock_pool

        with caplog.at_level(logging.WARNING):
            await database_instance.connect()

        assert "Database pool already initialized" in caplog.text

    @pytest.mark.asyncio
    async def test_connect_failure(self, database_instance):
        with patch(
            "contenttrust_api.database.connection.asyncpg.create_pool",
            new_callable=AsyncMock,
            side_effect=Exception("Connection failed"),
        ):
            with pytest.raises(Exception, match="Connection failed"):
                await database_instance.connect()

    @pytest.mark.asyncio
    async def test_disconnect(self, database_instance, mock_pool):
        database_instance._pool = mock_pool

        await database_instance.disconnect()

        mock_pool.close.assert_awaited_once()
        assert database_instance._pool is None

    @pytest.mark.asyncio
    async def test_get_connection_without_pool(self, database_instance):
        with pytest.raises(RuntimeError, match="Database pool not initialized"):
            async with database_instance.get_connection():
                pass

    @pytest.mark.asyncio
    async def test_health_check_without_pool(self, database_instance):
        assert await database_instance.health_check() is False

    @pytest.mark.asyncio
    async def test_pool_stats(self, database_instance, mock_pool):
        assert await database_instance.get_pool_stats() == {
            "status": "not_initialized"
        }

        database_instance._pool = mock_pool

        stats = await database_instance.get_pool_stats()

        assert stats["status"] == "initialized"
        assert stats["idle_size"] == 1
