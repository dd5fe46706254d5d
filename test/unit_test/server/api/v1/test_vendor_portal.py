"""
Unit tests for the vendor portal endpoints.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/vendor-portal"


@pytest.fixture
async def vendor(make_vendor):
    return await make_vendor("Pixel Studio", vendor_code="VEN-001", skills="branding", status="active")


@pytest.fixture
async def vendor_user(make_user, login, link_vendor_user, vendor):
    user = await make_user("vendor", email="dana@pixel.test")
    await link_vendor_user(user, vendor)
    login(user)
    return user


async def test_profile_of_linked_vendor(client: AsyncClient, vendor_user, vendor):
    response = await client.get(f"{BASE}/profile")
    assert response.status_code == 200
    assert response.json()["vendor_id"] == vendor.vendor_id
    assert response.json()["vendor_name"] == "Pixel Studio"


async def test_unlinked_vendor_user(client: AsyncClient, make_user, login):
    login(await make_user("vendor"))
    response = await client.get(f"{BASE}/profile")
    assert response.status_code == 404
    assert response.json()["detail"] == "No vendor is linked to this account"


async def test_staff_cannot_use_portal(client: AsyncClient, make_user, login):
    login(await make_user("admin"))
    assert (await client.get(f"{BASE}/profile")).status_code == 403


async def test_update_only_allowed_fields(client: AsyncClient, vendor_user, vendor):
    response = await client.put(
        f"{BASE}/profile",
        json={"skills": "branding, motion", "availability_status": "Limited", "status": "inactive", "vendor_code": "X"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["skills"] == "branding, motion"
    assert data["availability_status"] == "Limited"
    assert data["status"] == "active"
    assert data["vendor_code"] == "VEN-001"


async def test_ratings_overview(client: AsyncClient, vendor_user, vendor, make_project, make_rating, make_vendor):
    first = await make_project("Brand refresh", vendor_id=vendor.vendor_id)
    second = await make_project("Landing page", vendor_id=vendor.vendor_id)
    await make_rating(first, overall=8, what_went_well="Fast turnaround")
    await make_rating(second, overall=6, quality_rating=9)

    other = await make_vendor("Other Co")
    await make_rating(await make_project("Elsewhere", vendor_id=other.vendor_id), overall=2)

    response = await client.get(f"{BASE}/ratings")
    assert response.status_code == 200
    data = response.json()
    assert data["total_projects"] == 2
    assert data["average_rating"] == 7.0
    assert data["category_averages"]["quality"] == 8.5
    assert data["category_averages"]["communication"] == 7.0
    titles = {f["project_title"] for f in data["recent_feedback"]}
    assert titles == {"Brand refresh", "Landing page"}


async def test_ratings_without_any(client: AsyncClient, vendor_user):
    data = (await client.get(f"{BASE}/ratings")).json()
    assert data["total_projects"] == 0
    assert data["average_rating"] is None
    assert data["recent_feedback"] == []
