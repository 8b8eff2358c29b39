from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Occurrence:
    date: date
    amount: float
    type: str                   # 'income' | 'expense'
    rule_id: Optional[int] = None
    label: str = ""
    category_id: Optional[int] = None
    slot: str = ""              # 'first' | 'second' for twice-monthly rules
    matched_transaction_id: Optional[int] = None

    def is_occurred(self, reference_date: date) -> bool:
        """True once the occurrence date has been reached (inclusive)."""
        return self.date <= reference_date

    @property
    def is_posted(self) -> bool:
        return self.matched_transaction_id is not None
