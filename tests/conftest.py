from datetime import date

import pytest

from models.recurrence_rule import RecurrenceRule
from models.transaction import Transaction
from services.classifier_service import OccurrenceClassifier
from services.reconciliation_service import TransactionReconciler
from services.recurrence_service import RecurrenceExpander
from services.report_service import ReportService


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config file at a temp location so tests never read ~/.budget."""
    path = tmp_path / "config" / "config.json"
    monkeypatch.setenv("BUDGET_PROJECTIONS_CONFIG", str(path))
    return path


@pytest.fixture
def expander():
    return RecurrenceExpander()


@pytest.fixture
def classifier():
    return OccurrenceClassifier()


@pytest.fixture
def reconciler():
    return TransactionReconciler()


@pytest.fixture
def report_service(expander, classifier, reconciler):
    return ReportService(expander, classifier, reconciler)


@pytest.fixture
def household_rules():
    """Two salaries, rent and a phone bill."""
    return [
        RecurrenceRule(
            kind="twice-monthly", amount=4739, type="income",
            first_day_of_month=1, second_day_of_month=15,
            id=1, name="Salary", category_id=5,
        ),
        RecurrenceRule(
            kind="biweekly", amount=2168, type="income",
            anchor_date=date(2025, 1, 10),
            id=2, name="Second Salary", category_id=5,
        ),
        RecurrenceRule(
            kind="monthly", amount=3750, type="expense", day_of_month=1,
            id=3, name="Rent", category_id=1,
            reminder_enabled=True, reminder_days=7,
        ),
        RecurrenceRule(
            kind="monthly", amount=429, type="expense", day_of_month=1,
            id=4, name="Phone", category_id=2,
        ),
    ]


@pytest.fixture
def rent_posted():
    return [
        Transaction(id=100, date=date(2025, 2, 1), type="expense", amount=3750,
                    category_id=1, description="Monthly Rent"),
    ]


@pytest.fixture
def sample_data():
    """Contents of a JSON data file as the CLI reads it."""
    return {
        "rules": [
            {"id": 1, "name": "Salary", "kind": "twice-monthly", "type": "income",
             "amount": 4739, "first_day_of_month": 1, "second_day_of_month": 15},
            {"id": 3, "name": "Rent", "kind": "monthly", "type": "expense", "amount": "3750",
             "day_of_month": 1, "category_id": 1, "reminder_enabled": True, "reminder_days": 3},
            {"name": "Second Salary", "kind": "biweekly", "type": "income", "amount": 2168,
             "anchor_date": "2025-01-10"},
        ],
        "transactions": [
            {"id": 100, "date": "2025-02-01", "type": "expense", "amount": 3750,
             "category_id": 1, "description": "Monthly Rent"},
        ],
    }
