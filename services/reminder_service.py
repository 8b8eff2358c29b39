from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from models.recurrence_rule import RecurrenceRule
from models.transaction import Transaction
from services.reconciliation_service import TransactionReconciler
from services.recurrence_service import RecurrenceExpander
from utils.constants import REMINDER_HORIZON_DAYS, SEVERITY_ORDER, TYPE_EXPENSE
from utils.currency import format_currency


@dataclass
class Reminder:
    type: str       # 'upcoming_bill' | 'overdue_bill'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    due_date: date
    key: str = ""   # e.g. "bill:5:2025-02-01"


class ReminderService:
    def __init__(self, expander: RecurrenceExpander, reconciler: TransactionReconciler):
        self._expander = expander
        self._reconciler = reconciler

    def get_reminders(
        self,
        rules: Iterable[RecurrenceRule],
        reference_date: date,
        transactions: Optional[Iterable[Transaction]] = None,
        horizon_days: int = REMINDER_HORIZON_DAYS,
        symbol: str = "$",
    ) -> list[Reminder]:
        rules = [r for r in rules if r.type == TYPE_EXPENSE]
        reminders: list[Reminder] = []
        reminders += self._check_upcoming(rules, reference_date, horizon_days, symbol)
        if transactions:
            reminders += self._check_overdue(rules, reference_date, transactions, symbol)
        reminders.sort(key=lambda r: (SEVERITY_ORDER[r.severity], r.due_date))
        return reminders

    def _check_upcoming(
        self, rules: list[RecurrenceRule], ref: date, horizon_days: int, symbol: str
    ) -> list[Reminder]:
        if horizon_days < 1:
            return []
        horizon_end = ref + timedelta(days=horizon_days)
        reminders = []
        for rule in rules:
            if not rule.reminder_enabled:
                continue
            for occ in self._expander.expand(rule, ref + timedelta(days=1), horizon_end):
                remind_on = occ.date - timedelta(days=rule.reminder_days)
                days_away = (occ.date - ref).days
                day_label = "tomorrow" if days_away == 1 else f"in {days_away} days"
                reminders.append(Reminder(
                    type="upcoming_bill",
                    severity="warning" if remind_on <= ref else "info",
                    title=f"{rule.name or 'Bill'} due {day_label}",
                    detail=(
                        f"Due on {occ.date.strftime('%b %d')} · "
                        f"{format_currency(occ.amount, symbol)} · "
                        f"Remind from {remind_on.strftime('%b %d')}"
                    ),
                    due_date=occ.date,
                    key=f"bill:{rule.id}:{occ.date.isoformat()}",
                ))
        return reminders

    def _check_overdue(
        self,
        rules: list[RecurrenceRule],
        ref: date,
        transactions: Iterable[Transaction],
        symbol: str,
    ) -> list[Reminder]:
        occurrences = self._expander.expand_all(rules, ref.replace(day=1), ref)
        occurrences = self._reconciler.reconcile(occurrences, transactions)
        reminders = []
        for occ in occurrences:
            if occ.is_posted:
                continue
            reminders.append(Reminder(
                type="overdue_bill",
                severity="error",
                title=f"{occ.label or 'Bill'} not posted",
                detail=(
                    f"Was due on {occ.date.strftime('%b %d')} · "
                    f"{format_currency(occ.amount, symbol)} · "
                    f"No matching transaction this month"
                ),
                due_date=occ.date,
                key=f"bill:{occ.rule_id}:{occ.date.isoformat()}",
            ))
        return reminders
