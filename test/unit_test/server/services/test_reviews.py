"""
Unit tests for reminder scheduling and the reminder sweep.
"""

from datetime import datetime, timedelta, timezone

import pytest

from vira.core.database.entities.reviews import ReminderType, ReviewAssignment
from vira.server.services.reviews import ReminderSweep, days_until, reminder_type_for, to_naive_utc

NOW = datetime(2026, 3, 10, 12, 0, 0)


class TestDaysUntil:
    def test_rounds_up_partial_days(self):
        assert days_until(NOW + timedelta(hours=1), NOW) == 1
        assert days_until(NOW + timedelta(days=2, hours=1), NOW) == 3

    def test_past_due_is_not_positive(self):
        assert days_until(NOW - timedelta(hours=1), NOW) == 0
        assert days_until(NOW - timedelta(days=2), NOW) == -2

    def test_aware_due_dates_are_converted(self):
        aware = datetime(2026, 3, 11, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_naive_utc(aware) == datetime(2026, 3, 11, 12, 0)
        assert days_until(aware, NOW) == 1


@pytest.mark.parametrize(
    "days,has_prior,expected",
    [
        (-3, True, ReminderType.final),
        (1, False, ReminderType.final),
        (2, False, ReminderType.second),
        (3, True, ReminderType.second),
        (5, False, ReminderType.first),
        (7, False, ReminderType.initial),
        (6, True, None),
        (8, False, None),
    ],
)
def test_reminder_type_for(days, has_prior, expected):
    assert reminder_type_for(days, has_prior) == expected


@pytest.mark.asyncio
class TestReminderSweep:
    @pytest.fixture
    async def assignment(self, repos, make_user, make_project):
        reviewer = await make_user("team", email="reviewer@vira.test", full_name="Riley")
        project = await make_project("Brand refresh")
        return await repos.assignments.create(
            ReviewAssignment(project_id=project.project_id, reviewer_id=reviewer.id, due_date=NOW + timedelta(days=4))
        )

    async def test_each_type_is_sent_once(self, repos, email_service, mailgun, assignment):
        sweep = ReminderSweep(repos, email_service, app_url="http://app.test")

        first = await sweep.run(now=NOW)
        assert (first.first, first.errors) == (1, 0)
        again = await sweep.run(now=NOW + timedelta(hours=1))
        assert again.first == 0

        later = await sweep.run(now=NOW + timedelta(days=2))
        assert later.second == 1
        assert await repos.reminders.sent_types(assignment.assignment_id) == {"first", "second"}
        assert mailgun.recipients() == ["reviewer@vira.test"] * 2

        notifications = await repos.notifications.list_for_user(assignment.reviewer_id)
        assert {n.type for n in notifications} == {"review_reminder"}

    async def test_failed_email_is_an_error_and_not_recorded(self, repos, email_service, mailgun, assignment):
        mailgun.fail_with = 500
        result = await ReminderSweep(repos, email_service, app_url="http://app.test").run(now=NOW)
        assert (result.first, result.errors, result.processed) == (0, 1, 1)
        assert await repos.reminders.sent_types(assignment.assignment_id) == set()

    async def test_completed_assignments_are_ignored(self, repos, email_service, assignment):
        assignment.status = "completed"
        await repos.assignments.update(assignment)
        result = await ReminderSweep(repos, email_service, app_url="http://app.test").run(now=NOW)
        assert result.processed == 0
