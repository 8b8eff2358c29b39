import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from models.errors import InvalidRuleError
from utils.constants import (
    DEFAULT_REMINDER_DAYS,
    KIND_BIWEEKLY,
    KIND_MONTHLY,
    KIND_ONCE,
    KIND_TWICE_MONTHLY,
    KIND_WEEKLY,
    KIND_YEARLY,
    RECURRENCE_KINDS,
    TRANSACTION_TYPES,
)

# Kinds whose phase comes from anchor_date alone.
_ANCHORED_KINDS = (KIND_ONCE, KIND_WEEKLY, KIND_BIWEEKLY, KIND_YEARLY)


@dataclass(frozen=True)
class RecurrenceRule:
    kind: str                                   # see RECURRENCE_KINDS
    amount: float
    type: str                                   # 'income' | 'expense'
    anchor_date: Optional[date] = None
    day_of_month: Optional[int] = None          # monthly, 1-31
    first_day_of_month: Optional[int] = None    # twice-monthly, 1-31
    second_day_of_month: Optional[int] = None   # twice-monthly, 1-31
    end_date: Optional[date] = None
    id: Optional[int] = None
    name: str = ""
    category_id: Optional[int] = None
    reminder_enabled: bool = False
    reminder_days: int = DEFAULT_REMINDER_DAYS

    def validate(self) -> None:
        if self.kind not in RECURRENCE_KINDS:
            raise InvalidRuleError(f"{self._ref()}: unknown kind {self.kind!r}.")
        if self.type not in TRANSACTION_TYPES:
            raise InvalidRuleError(f"{self._ref()}: type must be income or expense.")
        if self.amount is None or not math.isfinite(self.amount) or self.amount < 0:
            raise InvalidRuleError(
                f"{self._ref()}: amount must be a finite non-negative number, got {self.amount!r}."
            )
        if self.kind in _ANCHORED_KINDS and self.anchor_date is None:
            raise InvalidRuleError(f"{self._ref()}: {self.kind} rules need an anchor date.")

        if self.kind == KIND_MONTHLY:
            self._check_day("day_of_month", self.day_of_month)
        elif self.kind == KIND_TWICE_MONTHLY:
            self._check_day("first_day_of_month", self.first_day_of_month)
            self._check_day("second_day_of_month", self.second_day_of_month)
            if self.first_day_of_month == self.second_day_of_month:
                raise InvalidRuleError(
                    f"{self._ref()}: twice-monthly days must be distinct."
                )

        if self.reminder_days is None or self.reminder_days < 0:
            raise InvalidRuleError(f"{self._ref()}: reminder_days must be non-negative.")
        if (
            self.end_date is not None
            and self.anchor_date is not None
            and self.end_date < self.anchor_date
        ):
            raise InvalidRuleError(f"{self._ref()}: end date precedes anchor date.")

    def _check_day(self, field_name: str, value) -> None:
        if value is None:
            raise InvalidRuleError(f"{self._ref()}: {field_name} is required.")
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= 31:
            raise InvalidRuleError(
                f"{self._ref()}: {field_name} must be between 1 and 31, got {value!r}."
            )

    def _ref(self) -> str:
        if self.name:
            return f"Rule '{self.name}'"
        if self.id is not None:
            return f"Rule #{self.id}"
        return "Rule"
