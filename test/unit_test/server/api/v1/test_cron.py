"""
Unit tests for the scheduled reminder endpoint.
"""

from datetime import timedelta

import pytest
from httpx import AsyncClient
from pydantic import SecretStr

from vira.core.database import utc_now
from vira.core.database.entities.reviews import ReviewAssignment
from vira.server.core.config import settings

pytestmark = pytest.mark.asyncio

URL = "/api/v1/cron/send-reminders"


@pytest.fixture
def cron_secret(monkeypatch, test_config) -> str:
    secret = test_config.auth.cron_secret
    monkeypatch.setattr(settings, "CRON_SECRET", SecretStr(secret))
    return secret


async def test_rejects_missing_secret(client: AsyncClient, cron_secret):
    response = await client.post(URL)
    assert response.status_code == 401


async def test_rejects_wrong_secret(client: AsyncClient, cron_secret):
    response = await client.post(URL, headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


async def test_rejects_everything_when_unconfigured(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "CRON_SECRET", None)
    response = await client.post(URL, headers={"Authorization": "Bearer anything"})
    assert response.status_code == 401


async def test_sends_due_reminders(client: AsyncClient, cron_secret, make_user, make_project, repos, mailgun):
    reviewer = await make_user("team", email="reviewer@vira.test")
    project = await make_project("Brand refresh")
    await repos.assignments.create(
        ReviewAssignment(project_id=project.project_id, reviewer_id=reviewer.id, due_date=utc_now() + timedelta(hours=12))
    )

    response = await client.post(URL, headers={"Authorization": f"Bearer {cron_secret}"})
    assert response.status_code == 200
    data = response.json()
    assert data["final"] == 1
    assert data["processed"] == 1
    assert data["errors"] == 0
    assert mailgun.tags() == ["review_reminder"]

    again = await client.post(URL, headers={"Authorization": f"Bearer {cron_secret}"})
    assert again.json()["final"] == 0
    assert len(mailgun.requests) == 1
