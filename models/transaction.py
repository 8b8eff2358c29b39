from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Transaction:
    id: int
    date: date
    type: str               # 'income' | 'expense'
    amount: float
    category_id: Optional[int] = None
    description: str = ""
