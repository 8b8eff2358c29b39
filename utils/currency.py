from decimal import Decimal, ROUND_HALF_UP


def to_cents(amount: float) -> int:
    """Convert an amount to integer cents, rounding half away from zero."""
    return int(Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP) * 100)


def round_money(amount: float) -> float:
    return to_cents(amount) / 100


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56' or '-$12.00'."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
