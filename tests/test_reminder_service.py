from datetime import date

import pytest

from models.recurrence_rule import RecurrenceRule
from services.reminder_service import ReminderService


@pytest.fixture
def reminder_service(expander, reconciler):
    return ReminderService(expander, reconciler)


class TestUpcoming:
    def test_inside_reminder_window_is_warning(self, reminder_service, household_rules):
        reminders = reminder_service.get_reminders(household_rules, date(2025, 2, 25))
        assert len(reminders) == 1
        r = reminders[0]
        assert r.type == "upcoming_bill"
        assert r.severity == "warning"
        assert r.due_date == date(2025, 3, 1)
        assert r.title == "Rent due in 4 days"
        assert "$3,750.00" in r.detail
        assert r.key == "bill:3:2025-03-01"

    def test_before_reminder_window_is_info(self, reminder_service, household_rules):
        reminders = reminder_service.get_reminders(household_rules, date(2025, 2, 10))
        assert [(r.severity, r.due_date) for r in reminders] == [("info", date(2025, 3, 1))]

    def test_disabled_and_income_rules_ignored(self, reminder_service):
        rules = [
            RecurrenceRule(kind="monthly", amount=429, type="expense", day_of_month=1, name="Phone"),
            RecurrenceRule(
                kind="monthly", amount=4739, type="income", day_of_month=1,
                name="Salary", reminder_enabled=True,
            ),
        ]
        assert reminder_service.get_reminders(rules, date(2025, 2, 25)) == []

    def test_due_date_beyond_horizon(self, reminder_service):
        rule = RecurrenceRule(
            kind="once", amount=99, type="expense", anchor_date=date(2025, 3, 20),
            name="Insurance", reminder_enabled=True, reminder_days=2,
        )
        assert reminder_service.get_reminders([rule], date(2025, 2, 10), horizon_days=30) == []
        reminders = reminder_service.get_reminders([rule], date(2025, 2, 10), horizon_days=40)
        assert [r.severity for r in reminders] == ["info"]


class TestOverdue:
    def test_unposted_bill_is_error(self, reminder_service, household_rules, rent_posted):
        reminders = reminder_service.get_reminders(
            household_rules, date(2025, 2, 10), transactions=rent_posted
        )
        assert [r.type for r in reminders] == ["overdue_bill", "upcoming_bill"]
        overdue = reminders[0]
        assert overdue.severity == "error"
        assert overdue.title == "Phone not posted"
        assert overdue.due_date == date(2025, 2, 1)

    def test_no_transactions_means_no_overdue_check(self, reminder_service, household_rules):
        reminders = reminder_service.get_reminders(household_rules, date(2025, 2, 10))
        assert all(r.type != "overdue_bill" for r in reminders)

    def test_zero_horizon(self, reminder_service, household_rules):
        assert reminder_service.get_reminders(household_rules, date(2025, 2, 25), horizon_days=0) == []
