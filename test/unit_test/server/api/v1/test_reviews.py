"""
Unit tests for the review assignment endpoints.
"""

from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient

from vira.core.database import utc_now
from vira.core.database.entities.reviews import ReviewAssignment

pytestmark = pytest.mark.asyncio

BASE = "/api/v1/reviews"


@pytest.fixture
async def admin(make_user, login):
    user = await make_user("admin")
    login(user)
    return user


@pytest.fixture
async def reviewer(make_user):
    return await make_user("team", email="reviewer@vira.test", full_name="Rae Viewer")


class TestCreateAssignment:
    async def test_assigns_notifies_and_emails(self, client: AsyncClient, admin, reviewer, make_project, repos, mailgun):
        project = await make_project("Brand refresh")
        response = await client.post(
            f"{BASE}/assignments",
            json={"project_id": project.project_id, "reviewer_id": reviewer.id, "notes": "Focus on delivery"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Reviewer assigned"
        assert data["email_sent"] is True
        assert data["assignment"]["status"] == "pending"
        assert data["assignment"]["assigned_by"] == admin.id

        notifications = await repos.notifications.list_for_user(reviewer.id)
        assert [n.type for n in notifications] == ["review_assigned"]
        assert notifications[0].data["project_id"] == project.project_id
        assert mailgun.recipients() == ["reviewer@vira.test"]
        assert mailgun.tags() == ["review_assignment"]

    async def test_default_due_date_is_a_week_out(self, client: AsyncClient, admin, reviewer, make_project):
        project = await make_project("Brand refresh")
        before = utc_now()
        response = await client.post(f"{BASE}/assignments", json={"project_id": project.project_id, "reviewer_id": reviewer.id})
        due = response.json()["assignment"]["due_date"]
        due_date = datetime.fromisoformat(due)
        assert before + timedelta(days=7) <= due_date <= utc_now() + timedelta(days=7)

    async def test_duplicate_assignment_returns_existing(self, client: AsyncClient, admin, reviewer, make_project, mailgun):
        project = await make_project("Brand refresh")
        payload = {"project_id": project.project_id, "reviewer_id": reviewer.id}
        first = await client.post(f"{BASE}/assignments", json=payload)
        second = await client.post(f"{BASE}/assignments", json=payload)

        assert second.status_code == 200
        assert second.json()["message"] == "Reviewer already assigned"
        assert second.json()["assignment"]["assignment_id"] == first.json()["assignment"]["assignment_id"]
        assert len(mailgun.requests) == 1

    async def test_email_failure_still_creates_assignment(self, client: AsyncClient, admin, reviewer, make_project, mailgun):
        mailgun.fail_with = 500
        project = await make_project("Brand refresh")
        response = await client.post(f"{BASE}/assignments", json={"project_id": project.project_id, "reviewer_id": reviewer.id})
        assert response.status_code == 201
        assert response.json()["email_sent"] is False

    async def test_unknown_reviewer(self, client: AsyncClient, admin, make_project):
        project = await make_project("Brand refresh")
        response = await client.post(f"{BASE}/assignments", json={"project_id": project.project_id, "reviewer_id": 999})
        assert response.status_code == 404
        assert response.json()["detail"] == "Reviewer not found"

    async def test_unknown_project(self, client: AsyncClient, admin, reviewer):
        response = await client.post(f"{BASE}/assignments", json={"project_id": 999, "reviewer_id": reviewer.id})
        assert response.status_code == 404

    async def test_team_members_cannot_assign(self, client: AsyncClient, reviewer, login, make_project):
        login(reviewer)
        project = await make_project("Brand refresh")
        response = await client.post(f"{BASE}/assignments", json={"project_id": project.project_id, "reviewer_id": reviewer.id})
        assert response.status_code == 403


async def test_list_and_delete_assignments(client: AsyncClient, admin, reviewer, make_project, repos):
    project = await make_project("Brand refresh")
    assignment = await repos.assignments.create(
        ReviewAssignment(project_id=project.project_id, reviewer_id=reviewer.id, due_date=utc_now())
    )
    listed = await client.get(f"{BASE}/assignments", params={"project_id": project.project_id})
    assert [a["assignment_id"] for a in listed.json()] == [assignment.assignment_id]

    assert (await client.delete(f"{BASE}/assignments/{assignment.assignment_id}")).status_code == 204
    assert (await client.delete(f"{BASE}/assignments/{assignment.assignment_id}")).status_code == 404


async def test_stats(client: AsyncClient, admin, reviewer, make_project, repos):
    now = utc_now()
    project = await make_project("Brand refresh")
    await repos.assignments.create(
        ReviewAssignment(project_id=project.project_id, reviewer_id=reviewer.id, due_date=now - timedelta(days=1, hours=12))
    )
    await repos.assignments.create(
        ReviewAssignment(
            project_id=project.project_id,
            reviewer_id=admin.id,
            due_date=now + timedelta(days=2),
            status="completed",
            created_at=now - timedelta(days=4),
            completed_at=now - timedelta(days=1),
        )
    )

    response = await client.get(f"{BASE}/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["completed"] == 1
    assert data["pending"] == 1
    assert data["overdue"] == 1
    assert data["completion_rate"] == 50.0
    assert data["average_completion_days"] == 3.0
    assert data["overdue_assignments"][0]["days_overdue"] == 2
