"""Read recurrence rules and posted transactions from a JSON data file, and
write report rows out as CSV.

Data file layout:
    {"rules": [{...RecurrenceRule fields...}], "transactions": [{...}]}
Dates are YYYY-MM-DD strings.
"""
import csv
import json
import logging
import os

from models.errors import DataFileError
from models.recurrence_rule import RecurrenceRule
from models.transaction import Transaction
from utils.constants import DEFAULT_REMINDER_DAYS
from utils.date_helpers import parse_date

logger = logging.getLogger(__name__)


class DataService:
    def load(self, path: str) -> tuple[list[RecurrenceRule], list[Transaction]]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise DataFileError(f"Cannot read {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise DataFileError(f"{path} is not valid JSON: {e}") from e

        rules, transactions = self.parse(data)
        logger.info(
            "Loaded %d rule(s) and %d transaction(s) from %s",
            len(rules), len(transactions), path,
        )
        return rules, transactions

    def parse(self, data: dict) -> tuple[list[RecurrenceRule], list[Transaction]]:
        if not isinstance(data, dict):
            raise DataFileError("Data file must contain a JSON object.")
        raw_rules = self._records(data, "rules")
        raw_transactions = self._records(data, "transactions")
        rules = [self._rule_from_dict(i, r) for i, r in enumerate(raw_rules)]
        transactions = [
            self._transaction_from_dict(i, t) for i, t in enumerate(raw_transactions)
        ]
        return rules, transactions

    def write_csv(self, rows: list[list[str]], path: str) -> None:
        """Write rows (header first); atomic via .tmp + os.replace()."""
        tmp = path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8", newline="") as f:
                csv.writer(f).writerows(rows)
            os.replace(tmp, path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise
        logger.info("Wrote %d row(s) to %s", max(len(rows) - 1, 0), path)

    # ── Record conversion ─────────────────────────────────────────────────────

    def _records(self, data: dict, key: str) -> list:
        records = data.get(key, [])
        if not isinstance(records, list):
            raise DataFileError(f"'{key}' must be a list, got {type(records).__name__}.")
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise DataFileError(f"{key}[{i}]: expected an object, got {type(record).__name__}.")
        return records

    def _rule_from_dict(self, index: int, r: dict) -> RecurrenceRule:
        where = f"rules[{index}]"
        try:
            return RecurrenceRule(
                kind=str(r["kind"]),
                amount=float(r["amount"]),
                type=str(r["type"]),
                anchor_date=self._date(r.get("anchor_date"), where, "anchor_date"),
                day_of_month=self._int(r.get("day_of_month")),
                first_day_of_month=self._int(r.get("first_day_of_month")),
                second_day_of_month=self._int(r.get("second_day_of_month")),
                end_date=self._date(r.get("end_date"), where, "end_date"),
                id=self._int(r.get("id")),
                name=str(r.get("name", "")),
                category_id=self._int(r.get("category_id")),
                reminder_enabled=bool(r.get("reminder_enabled", False)),
                reminder_days=self._int(r.get("reminder_days", DEFAULT_REMINDER_DAYS)),
            )
        except KeyError as e:
            raise DataFileError(f"{where}: missing field {e.args[0]!r}.") from e
        except DataFileError:
            raise
        except (TypeError, ValueError) as e:
            raise DataFileError(f"{where}: {e}") from e

    def _transaction_from_dict(self, index: int, t: dict) -> Transaction:
        where = f"transactions[{index}]"
        try:
            tx_date = self._date(t["date"], where, "date")
            if tx_date is None:
                raise DataFileError(f"{where}: date is required.")
            return Transaction(
                id=int(t["id"]),
                date=tx_date,
                type=str(t["type"]),
                amount=float(t["amount"]),
                category_id=self._int(t.get("category_id")),
                description=str(t.get("description", "")),
            )
        except KeyError as e:
            raise DataFileError(f"{where}: missing field {e.args[0]!r}.") from e
        except DataFileError:
            raise
        except (TypeError, ValueError) as e:
            raise DataFileError(f"{where}: {e}") from e

    def _date(self, raw, where: str, field_name: str):
        if raw in (None, ""):
            return None
        d = parse_date(str(raw))
        if d is None:
            raise DataFileError(f"{where}: invalid {field_name} {raw!r}.")
        return d

    def _int(self, raw):
        if raw in (None, "", "None", "null"):
            return None
        if isinstance(raw, bool) or (isinstance(raw, float) and not raw.is_integer()):
            raise ValueError(f"expected a whole number, got {raw!r}")
        return int(raw)
