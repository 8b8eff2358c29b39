from datetime import date, timedelta
from typing import Iterable

from models.recurrence_rule import RecurrenceRule
from services.recurrence_service import RecurrenceExpander
from utils.constants import FORECAST_MONTHS, TYPE_EXPENSE, TYPE_INCOME
from utils.currency import round_money
from utils.date_helpers import add_months, format_month, month_bounds


class ForecastService:
    def __init__(self, expander: RecurrenceExpander):
        self._expander = expander

    def _monthly_periods(self, reference_date: date, months: int) -> list[tuple[int, int]]:
        """(year, month) tuples from the reference month onwards."""
        first = reference_date.replace(day=1)
        periods = []
        for i in range(months):
            d = add_months(first, i)
            periods.append((d.year, d.month))
        return periods

    def monthly_forecast(
        self,
        rules: Iterable[RecurrenceRule],
        reference_date: date,
        months: int = FORECAST_MONTHS,
        opening_balance: float = 0.0,
    ) -> list[dict]:
        """
        [{month:'YYYY-MM', income:float, expense:float, net:float, balance:float}]
        from the reference month forward.  The reference month only counts
        what is still pending after reference_date.
        """
        if months < 1:
            raise ValueError("Forecast needs at least one month.")
        rules = list(rules)
        balance = opening_balance
        result = []
        for year, month in self._monthly_periods(reference_date, months):
            month_start, month_end = month_bounds(year, month)
            if (year, month) == (reference_date.year, reference_date.month):
                month_start = reference_date + timedelta(days=1)

            if month_start > month_end:
                projected = []
            else:
                projected = self._expander.expand_all(rules, month_start, month_end)
            income = round_money(sum(p.amount for p in projected if p.type == TYPE_INCOME))
            expense = round_money(sum(p.amount for p in projected if p.type == TYPE_EXPENSE))
            net = round_money(income - expense)
            balance = round_money(balance + net)

            result.append({
                "month": format_month(month_end),
                "income": income,
                "expense": expense,
                "net": net,
                "balance": balance,
            })

        return result
