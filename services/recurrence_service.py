import logging
from datetime import date, timedelta
from typing import Iterable

from models.errors import InvalidWindowError
from models.occurrence import Occurrence
from models.recurrence_rule import RecurrenceRule
from utils.constants import (
    KIND_MONTHLY,
    KIND_ONCE,
    KIND_TWICE_MONTHLY,
    SLOT_FIRST,
    SLOT_SECOND,
    WEEK_INTERVALS,
)
from utils.date_helpers import clamp_day_to_month, first_step_on_or_after, iter_months

logger = logging.getLogger(__name__)


class RecurrenceExpander:
    """Turns recurrence rules into dated occurrences over a window.

    Holds no state; every call is computed from its arguments alone.
    """

    def expand(
        self, rule: RecurrenceRule, window_start: date, window_end: date
    ) -> list[Occurrence]:
        """
        Return the occurrences of `rule` inside [window_start, window_end],
        ascending by date.  Raises InvalidRuleError / InvalidWindowError.
        """
        self._check_window(window_start, window_end)
        rule.validate()

        start = window_start
        end = window_end
        if rule.end_date is not None and rule.end_date < end:
            end = rule.end_date
        if start > end:
            return []

        if rule.kind == KIND_ONCE:
            dates = [(rule.anchor_date, "")] if start <= rule.anchor_date <= end else []
        elif rule.kind in WEEK_INTERVALS:
            dates = [(d, "") for d in self._stepped_dates(rule, start, end)]
        elif rule.kind == KIND_MONTHLY:
            dates = [(d, "") for d in self._monthly_dates(rule, rule.day_of_month, start, end)]
        elif rule.kind == KIND_TWICE_MONTHLY:
            dates = self._twice_monthly_dates(rule, start, end)
        else:  # KIND_YEARLY
            dates = [(d, "") for d in self._yearly_dates(rule, start, end)]

        occurrences = [self._make_occurrence(rule, d, slot) for d, slot in dates]
        logger.debug(
            "Expanded %s rule %s into %d occurrence(s) over %s..%s",
            rule.kind, rule.name or rule.id, len(occurrences), window_start, window_end,
        )
        return occurrences

    def expand_all(
        self, rules: Iterable[RecurrenceRule], window_start: date, window_end: date
    ) -> list[Occurrence]:
        """Expand every rule and merge the results by date (stable across rules)."""
        self._check_window(window_start, window_end)
        result: list[Occurrence] = []
        for rule in rules:
            result.extend(self.expand(rule, window_start, window_end))
        result.sort(key=lambda o: o.date)
        return result

    def next_due_date(self, rule: RecurrenceRule, after: date) -> date | None:
        """Return the first date the rule is due strictly after `after`, or None."""
        rule.validate()
        search_from = after + timedelta(days=1)
        if rule.anchor_date is not None and rule.anchor_date > search_from:
            search_from = rule.anchor_date
        if rule.end_date is not None and search_from > rule.end_date:
            return None

        if rule.kind == KIND_ONCE:
            return rule.anchor_date if rule.anchor_date >= search_from else None

        # A year (plus slack for clamped days) always contains the next
        # occurrence of every repeating kind.
        horizon = search_from + timedelta(days=366 + 31)
        occurrences = self.expand(rule, search_from, horizon)
        return occurrences[0].date if occurrences else None

    # ── Per-kind generators ───────────────────────────────────────────────────

    def _stepped_dates(self, rule: RecurrenceRule, start: date, end: date) -> list[date]:
        interval = WEEK_INTERVALS[rule.kind]
        result = []
        current = first_step_on_or_after(rule.anchor_date, interval, start)
        while current <= end:
            result.append(current)
            current += timedelta(days=interval)
        return result

    def _monthly_dates(
        self, rule: RecurrenceRule, target_day: int, start: date, end: date
    ) -> list[date]:
        result = []
        for year, month in iter_months(start, end):
            d = date(year, month, clamp_day_to_month(year, month, target_day))
            if self._in_range(rule, d, start, end):
                result.append(d)
        return result

    def _twice_monthly_dates(
        self, rule: RecurrenceRule, start: date, end: date
    ) -> list[tuple[date, str]]:
        result = []
        for year, month in iter_months(start, end):
            pair = [
                (date(year, month, clamp_day_to_month(year, month, day)), slot)
                for day, slot in (
                    (rule.first_day_of_month, SLOT_FIRST),
                    (rule.second_day_of_month, SLOT_SECOND),
                )
            ]
            # Stable sort keeps 'first' ahead of 'second' when clamping makes
            # both land on the same day.
            pair.sort(key=lambda item: item[0])
            result.extend(item for item in pair if self._in_range(rule, item[0], start, end))
        return result

    def _yearly_dates(self, rule: RecurrenceRule, start: date, end: date) -> list[date]:
        anchor = rule.anchor_date
        result = []
        for year in range(max(start.year, anchor.year), end.year + 1):
            d = date(year, anchor.month, clamp_day_to_month(year, anchor.month, anchor.day))
            if self._in_range(rule, d, start, end):
                result.append(d)
        return result

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _in_range(self, rule: RecurrenceRule, d: date, start: date, end: date) -> bool:
        if not start <= d <= end:
            return False
        return rule.anchor_date is None or d >= rule.anchor_date

    def _make_occurrence(self, rule: RecurrenceRule, d: date, slot: str) -> Occurrence:
        return Occurrence(
            date=d,
            amount=rule.amount,
            type=rule.type,
            rule_id=rule.id,
            label=rule.name,
            category_id=rule.category_id,
            slot=slot,
        )

    def _check_window(self, window_start: date, window_end: date) -> None:
        if window_start > window_end:
            raise InvalidWindowError(
                f"Window start {window_start} is after window end {window_end}."
            )
