import argparse
import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from services.classifier_service import OccurrenceClassifier
from services.data_service import DataService
from services.forecast_service import ForecastService
from services.reconciliation_service import TransactionReconciler
from services.recurrence_service import RecurrenceExpander
from services.reminder_service import ReminderService
from services.report_service import ReportService
from utils.app_config import get_setting, load_config
from utils.constants import APP_NAME, TYPE_EXPENSE
from utils.currency import format_currency
from utils.date_helpers import format_date, parse_date, parse_month, today


def _date_arg(value: str):
    d = parse_date(value)
    if d is None:
        raise argparse.ArgumentTypeError(f"invalid date {value!r} (expected YYYY-MM-DD)")
    return d


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid whole number {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def _month_arg(value: str):
    d = parse_month(value)
    if d is None:
        raise argparse.ArgumentTypeError(f"invalid month {value!r} (expected YYYY-MM)")
    return d


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="budget-projections",
        description=f"{APP_NAME}: expand recurring income and bills into dated reports.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_common(p):
        p.add_argument("data", help="JSON file with 'rules' and 'transactions'")
        p.add_argument("--as-of", type=_date_arg, default=None,
                       help="reference date (default: today)")

    p = sub.add_parser("report", help="occurred vs pending totals for a period")
    add_common(p)
    period = p.add_mutually_exclusive_group(required=True)
    period.add_argument("--month", type=_month_arg)
    period.add_argument("--from", dest="start", type=_date_arg)
    p.add_argument("--to", dest="end", type=_date_arg)
    p.add_argument("--daily", action="store_true", help="show per-day breakdown")

    p = sub.add_parser("forecast", help="month-by-month projection")
    add_common(p)
    p.add_argument("--months", type=_positive_int, default=None)
    p.add_argument("--opening-balance", type=float, default=0.0)

    p = sub.add_parser("reminders", help="upcoming and unposted bills")
    add_common(p)
    p.add_argument("--days", type=_positive_int, default=None, help="look-ahead horizon in days")

    p = sub.add_parser("export", help="write a month's occurrences to CSV")
    add_common(p)
    p.add_argument("output", help="CSV file to write")
    p.add_argument("--month", type=_month_arg, required=True)

    p = sub.add_parser("chart", help="save an income/expense bar chart")
    add_common(p)
    p.add_argument("output", help="image file to write (e.g. chart.png)")
    span = p.add_mutually_exclusive_group()
    span.add_argument("--year", type=int)
    span.add_argument("--months", type=_positive_int)

    return parser


def _print_report(report, symbol: str, daily: bool, report_svc: ReportService):
    totals = report.classification.totals
    print(f"Period {format_date(report.start)} .. {format_date(report.end)} "
          f"(as of {format_date(report.reference_date)})")
    print(f"  Received income : {format_currency(totals.occurred_income, symbol)}")
    print(f"  Expected income : {format_currency(totals.pending_income, symbol)}")
    print(f"  Paid expenses   : {format_currency(totals.occurred_expense, symbol)}")
    print(f"  Due expenses    : {format_currency(totals.pending_expense, symbol)}")
    print(f"  Net so far      : {format_currency(totals.net_occurred, symbol)}")
    print(f"  Net pending     : {format_currency(totals.net_pending, symbol)}")
    print(f"  Posted bills    : {format_currency(report.posted_total(TYPE_EXPENSE), symbol)}")
    print(f"  Unposted bills  : {format_currency(report.unposted_total(TYPE_EXPENSE), symbol)}")
    if daily:
        for day in report_svc.daily_summary(report):
            print(f"  {format_date(day.date)}  +{format_currency(day.total_income, symbol)}"
                  f"  -{format_currency(day.total_expense, symbol)}"
                  f"  = {format_currency(day.balance, symbol)}")


def run(args, config: dict) -> int:
    # ── Services ─────────────────────────────────────────────────────────────
    expander = RecurrenceExpander()
    classifier = OccurrenceClassifier()
    reconciler = TransactionReconciler()
    report_svc = ReportService(expander, classifier, reconciler)
    forecast_svc = ForecastService(expander)
    reminder_svc = ReminderService(expander, reconciler)
    data_svc = DataService()

    symbol = get_setting("currency_symbol", config)
    ref = args.as_of or today()
    rules, transactions = data_svc.load(args.data)

    if args.command == "report":
        if args.month:
            report = report_svc.monthly_report(
                rules, args.month.year, args.month.month, ref, transactions
            )
        else:
            end = args.end or ref
            report = report_svc.date_range_report(rules, args.start, end, ref, transactions)
        _print_report(report, symbol, args.daily, report_svc)

    elif args.command == "forecast":
        months = args.months
        if months is None:
            months = get_setting("forecast_months", config)
        for row in forecast_svc.monthly_forecast(rules, ref, months, args.opening_balance):
            print(f"{row['month']}  income {format_currency(row['income'], symbol):>12}"
                  f"  expense {format_currency(row['expense'], symbol):>12}"
                  f"  net {format_currency(row['net'], symbol):>12}"
                  f"  balance {format_currency(row['balance'], symbol):>12}")

    elif args.command == "reminders":
        horizon = args.days
        if horizon is None:
            horizon = get_setting("reminder_horizon_days", config)
        reminders = reminder_svc.get_reminders(rules, ref, transactions, horizon, symbol)
        if not reminders:
            print("No reminders.")
        for r in reminders:
            print(f"[{r.severity}] {r.title} - {r.detail}")

    elif args.command == "export":
        report = report_svc.monthly_report(
            rules, args.month.year, args.month.month, ref, transactions
        )
        data_svc.write_csv(report_svc.export_rows(report), args.output)
        print(f"Wrote {len(report.occurrences)} occurrence(s) to {args.output}")

    elif args.command == "chart":
        # matplotlib is only needed here
        from ui.charts import save_bar_chart

        if args.months is not None:
            rows = forecast_svc.monthly_forecast(rules, ref, args.months)
            title = f"Forecast from {format_date(ref)}"
        else:
            year = args.year or ref.year
            rows = report_svc.annual_summary(rules, year, ref, transactions)
            title = f"{year} income vs expenses"
        save_bar_chart(rows, args.output, title)
        print(f"Saved chart to {args.output}")

    return 0


def main(argv=None) -> int:
    config = load_config()
    args = build_parser().parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(
        logging, str(get_setting("log_level", config)).upper(), logging.WARNING
    )
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return run(args, config)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
