"""
Unit tests for the health and version endpoints.
"""

import pytest
from httpx import AsyncClient

from vira import __version__

pytestmark = pytest.mark.asyncio


async def test_health_check(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_version(client: AsyncClient):
    response = await client.get("/version")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == __version__
    assert data["schema_version"] == "v1"


async def test_health_needs_no_login(client: AsyncClient, login):
    login(None)
    response = await client.get("/health")
    assert response.status_code == 200


async def test_responses_carry_process_time_header(client: AsyncClient):
    response = await client.get("/health")
    assert "x-process-time" in response.headers
    assert float(response.headers["x-process-time"]) >= 0
