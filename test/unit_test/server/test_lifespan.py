"""
Unit tests for FastAPI application lifespan management.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI

from vira.server.core import constant
from vira.server.main import app, lifespan

pytestmark = pytest.mark.asyncio


async def test_startup_initializes_database():
    with patch("vira.server.main.init_db", new_callable=AsyncMock) as mock_init_db:
        async with lifespan(FastAPI()):
            mock_init_db.assert_awaited_once()


async def test_startup_survives_database_failure():
    with (
        patch("vira.server.main.init_db", new_callable=AsyncMock, side_effect=OSError("no database")),
        patch("vira.server.main.logger") as mock_logger,
    ):
        async with lifespan(FastAPI()):
            pass

    assert "Database initialization failed" in mock_logger.error.call_args[0][0]


async def test_routers_are_mounted():
    paths = {route.path for route in app.routes}
    for path in (
        "/health",
        f"{constant.API_V1_STR}/vendors",
        f"{constant.API_V1_STR}/match/semantic",
        f"{constant.API_V1_STR}/cron/send-reminders",
        f"{constant.API_V1_STR}/vendor-invites/validate",
    ):
        assert path in paths, path
