"""
Unit tests for the client endpoints.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/clients"


@pytest.fixture
async def staff(make_user, login):
    user = await make_user("team")
    login(user)
    return user


async def test_create_and_get_client(client: AsyncClient, staff):
    response = await client.post(BASE, json={"client_name": " Globex ", "industry": "Energy"})
    assert response.status_code == 201
    created = response.json()
    assert created["client_name"] == "Globex"

    detail = await client.get(f"{BASE}/{created['client_id']}")
    assert detail.status_code == 200
    assert detail.json()["total_projects"] == 0


async def test_duplicate_client_name(client: AsyncClient, staff, make_client):
    await make_client("Globex")
    response = await client.post(BASE, json={"client_name": "globex"})
    assert response.status_code == 409


async def test_list_clients_with_search(client: AsyncClient, staff, make_client):
    await make_client("Globex")
    await make_client("Initech")
    response = await client.get(BASE, params={"search": "init"})
    assert response.status_code == 200
    assert [c["client_name"] for c in response.json()] == ["Initech"]


async def test_update_client(client: AsyncClient, staff, make_client):
    globex = await make_client("Globex")
    response = await client.patch(f"{BASE}/{globex.client_id}", json={"time_zone": "UTC"})
    assert response.status_code == 200
    assert response.json()["time_zone"] == "UTC"


async def test_get_missing_client(client: AsyncClient, staff):
    response = await client.get(f"{BASE}/42")
    assert response.status_code == 404
    assert response.json()["detail"] == "Client not found"


class TestDeleteClient:
    async def test_admin_deletes_unused_client(self, client: AsyncClient, make_user, login, make_client):
        login(await make_user("admin"))
        globex = await make_client("Globex")
        response = await client.delete(f"{BASE}/{globex.client_id}")
        assert response.status_code == 204

    async def test_client_with_projects_cannot_be_deleted(
        self, client: AsyncClient, make_user, login, make_client, make_project
    ):
        login(await make_user("admin"))
        globex = await make_client("Globex")
        await make_project("Website", client_id=globex.client_id)
        response = await client.delete(f"{BASE}/{globex.client_id}")
        assert response.status_code == 409
        assert response.json()["details"] == {"project_count": 1}

    async def test_team_member_cannot_delete(self, client: AsyncClient, staff, make_client):
        globex = await make_client("Globex")
        response = await client.delete(f"{BASE}/{globex.client_id}")
        assert response.status_code == 403
