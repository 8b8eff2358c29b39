from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from models.occurrence import Occurrence
from utils.constants import TYPE_EXPENSE, TYPE_INCOME
from utils.currency import round_money


@dataclass(frozen=True)
class Totals:
    occurred_income: float = 0.0
    occurred_expense: float = 0.0
    pending_income: float = 0.0
    pending_expense: float = 0.0
    net_occurred: float = 0.0
    net_pending: float = 0.0

    @property
    def total_income(self) -> float:
        return round_money(self.occurred_income + self.pending_income)

    @property
    def total_expense(self) -> float:
        return round_money(self.occurred_expense + self.pending_expense)

    @property
    def net(self) -> float:
        return round_money(self.net_occurred + self.net_pending)


@dataclass(frozen=True)
class Classification:
    occurred: list[Occurrence] = field(default_factory=list)
    pending: list[Occurrence] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)


class OccurrenceClassifier:
    def classify(
        self, occurrences: Iterable[Occurrence], reference_date: date
    ) -> Classification:
        """
        Split occurrences into occurred (date <= reference_date) and pending,
        keeping input order within each list, and total both sides by type.
        """
        occurred: list[Occurrence] = []
        pending: list[Occurrence] = []
        for occ in occurrences:
            if occ.is_occurred(reference_date):
                occurred.append(occ)
            else:
                pending.append(occ)

        occurred_income = self._sum(occurred, TYPE_INCOME)
        occurred_expense = self._sum(occurred, TYPE_EXPENSE)
        pending_income = self._sum(pending, TYPE_INCOME)
        pending_expense = self._sum(pending, TYPE_EXPENSE)

        totals = Totals(
            occurred_income=occurred_income,
            occurred_expense=occurred_expense,
            pending_income=pending_income,
            pending_expense=pending_expense,
            net_occurred=occurred_income - occurred_expense,
            net_pending=pending_income - pending_expense,
        )
        return Classification(occurred=occurred, pending=pending, totals=totals)

    def _sum(self, occurrences: list[Occurrence], type_: str) -> float:
        return round_money(sum(o.amount for o in occurrences if o.type == type_))
