APP_NAME = "Budget Projections"
DATE_FORMAT = "%Y-%m-%d"
MONTH_FORMAT = "%Y-%m"

KIND_ONCE = "once"
KIND_WEEKLY = "weekly"
KIND_BIWEEKLY = "biweekly"
KIND_MONTHLY = "monthly"
KIND_TWICE_MONTHLY = "twice-monthly"
KIND_YEARLY = "yearly"
RECURRENCE_KINDS = [
    KIND_ONCE, KIND_WEEKLY, KIND_BIWEEKLY, KIND_MONTHLY, KIND_TWICE_MONTHLY, KIND_YEARLY,
]
WEEK_INTERVALS = {
    KIND_WEEKLY: 7,
    KIND_BIWEEKLY: 14,
}

TYPE_INCOME = "income"
TYPE_EXPENSE = "expense"
TRANSACTION_TYPES = [TYPE_INCOME, TYPE_EXPENSE]

SLOT_FIRST = "first"
SLOT_SECOND = "second"

DEFAULT_REMINDER_DAYS = 7
REMINDER_HORIZON_DAYS = 30
FORECAST_MONTHS = 12

SEVERITY_ORDER = {"error": 0, "warning": 1, "info": 2}

EXPORT_HEADER = ["Date", "Type", "Label", "Category", "Amount", "Status", "Posted"]

INCOME_COLOR = "#4CAF50"
EXPENSE_COLOR = "#F44336"

DEFAULT_SETTINGS = {
    "currency_symbol": "$",
    "reminder_horizon_days": REMINDER_HORIZON_DAYS,
    "forecast_months": FORECAST_MONTHS,
    "log_level": "WARNING",
}
