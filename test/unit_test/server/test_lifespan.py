"""
Unit tests for FastAPI application lifespan management.

Tests verify that the application creates the schema on startup, survives a
failing database, and releases the cache on shutdown.
"""

from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import inspect

from productlobby.core.database import engine
from productlobby.server.main import app, lifespan

MAIN = "productlobby.server.main"


async def test_startup_and_shutdown_hooks():
    with (
        patch(f"{MAIN}.init_db", new_callable=AsyncMock) as mock_init_db,
        patch(f"{MAIN}.close_cache", new_callable=AsyncMock) as mock_close_cache,
    ):
        async with lifespan(app):
            mock_init_db.assert_awaited_once()
            mock_close_cache.assert_not_awaited()

        mock_close_cache.assert_awaited_once()


async def test_startup_survives_database_failure():
    with (
        patch(f"{MAIN}.init_db", new_callable=AsyncMock, side_effect=OSError("database unreachable")),
        patch(f"{MAIN}.close_cache", new_callable=AsyncMock) as mock_close_cache,
        patch(f"{MAIN}.logger") as mock_logger,
    ):
        async with lifespan(app):
            pass

    mock_logger.error.assert_called_once()
    assert "Database initialization failed" in mock_logger.error.call_args[0][0]
    mock_close_cache.assert_awaited_once()


async def test_startup_creates_tables(cache):
    try:
        async with lifespan(app):
            async with engine.connect() as conn:
                tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await engine.dispose()

    for table in ("users", "campaigns", "lobbies", "pledges", "contribution_events"):
        assert table in tables


@pytest.mark.parametrize("path", ["/api/v1/openapi.json", "/api/v1/docs"])
async def test_docs_are_served_under_api_prefix(client, path):
    response = await client.get(path)

    assert response.status_code == 200
