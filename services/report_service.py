from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional

from models.occurrence import Occurrence
from models.recurrence_rule import RecurrenceRule
from models.transaction import Transaction
from services.classifier_service import Classification, OccurrenceClassifier
from services.reconciliation_service import TransactionReconciler
from services.recurrence_service import RecurrenceExpander
from utils.constants import EXPORT_HEADER, TYPE_EXPENSE, TYPE_INCOME
from utils.currency import round_money
from utils.date_helpers import format_date, format_month, month_bounds


@dataclass
class Report:
    start: date
    end: date
    reference_date: date
    occurrences: list[Occurrence]
    classification: Classification

    def by_category(self) -> dict:
        """{category_id: {'income': float, 'expense': float}}"""
        result: dict = {}
        for occ in self.occurrences:
            bucket = result.setdefault(occ.category_id, {TYPE_INCOME: 0.0, TYPE_EXPENSE: 0.0})
            bucket[occ.type] = round_money(bucket[occ.type] + occ.amount)
        return result

    def posted_total(self, type_: str) -> float:
        return round_money(sum(
            o.amount for o in self.occurrences if o.type == type_ and o.is_posted
        ))

    def unposted_total(self, type_: str) -> float:
        return round_money(sum(
            o.amount for o in self.occurrences if o.type == type_ and not o.is_posted
        ))


@dataclass
class DaySummary:
    date: date
    incomes: list[Occurrence] = field(default_factory=list)
    expenses: list[Occurrence] = field(default_factory=list)
    total_income: float = 0.0
    total_expense: float = 0.0
    balance: float = 0.0     # running net from the start of the report


class ReportService:
    def __init__(
        self,
        expander: RecurrenceExpander,
        classifier: OccurrenceClassifier,
        reconciler: TransactionReconciler,
    ):
        self._expander = expander
        self._classifier = classifier
        self._reconciler = reconciler

    def date_range_report(
        self,
        rules: Iterable[RecurrenceRule],
        start: date,
        end: date,
        reference_date: date,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> Report:
        occurrences = self._expander.expand_all(rules, start, end)
        occurrences = self._reconciler.reconcile(occurrences, transactions)
        return Report(
            start=start,
            end=end,
            reference_date=reference_date,
            occurrences=occurrences,
            classification=self._classifier.classify(occurrences, reference_date),
        )

    def monthly_report(
        self,
        rules: Iterable[RecurrenceRule],
        year: int,
        month: int,
        reference_date: date,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> Report:
        start, end = month_bounds(year, month)
        return self.date_range_report(rules, start, end, reference_date, transactions)

    def month_to_date_report(
        self,
        rules: Iterable[RecurrenceRule],
        reference_date: date,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> Report:
        start = reference_date.replace(day=1)
        return self.date_range_report(rules, start, reference_date, reference_date, transactions)

    def annual_summary(
        self,
        rules: Iterable[RecurrenceRule],
        year: int,
        reference_date: date,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> list[dict]:
        """[{month:'YYYY-MM', income, expense, net, occurred_net, pending_net}] for Jan..Dec."""
        rules = list(rules)
        transactions = list(transactions) if transactions else None
        rows = []
        for month in range(1, 13):
            report = self.monthly_report(rules, year, month, reference_date, transactions)
            totals = report.classification.totals
            rows.append({
                "month": format_month(report.start),
                "income": totals.total_income,
                "expense": totals.total_expense,
                "net": totals.net,
                "occurred_net": totals.net_occurred,
                "pending_net": totals.net_pending,
            })
        return rows

    def daily_summary(self, report: Report) -> list[DaySummary]:
        """One entry per day that has occurrences, with a running balance."""
        days: dict[date, DaySummary] = {}
        for occ in report.occurrences:
            day = days.setdefault(occ.date, DaySummary(date=occ.date))
            if occ.type == TYPE_INCOME:
                day.incomes.append(occ)
                day.total_income = round_money(day.total_income + occ.amount)
            else:
                day.expenses.append(occ)
                day.total_expense = round_money(day.total_expense + occ.amount)

        balance = 0.0
        result = []
        for d in sorted(days):
            day = days[d]
            balance = round_money(balance + day.total_income - day.total_expense)
            day.balance = balance
            result.append(day)
        return result

    def export_rows(self, report: Report) -> list[list[str]]:
        """Return rows suitable for CSV export."""
        rows = [list(EXPORT_HEADER)]
        for occ in report.occurrences:
            rows.append([
                format_date(occ.date),
                occ.type,
                occ.label,
                "" if occ.category_id is None else str(occ.category_id),
                f"{occ.amount:.2f}",
                "occurred" if occ.is_occurred(report.reference_date) else "pending",
                "Yes" if occ.is_posted else "No",
            ])
        return rows
