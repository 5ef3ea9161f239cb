from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

from core.config import settings


def format_currency(amount: Union[int, float, Decimal, None], currency: Optional[str] = None) -> str:
    """Format an amount as whole currency units, e.g. ``TZS 1,500``."""
    code = currency or settings.currency
    value = Decimal(str(amount or 0)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if value == 0:  # drop the sign quantize() keeps on -0.4
        value = Decimal("0")
    if value < 0:
        return f"-{code} {-value:,}"
    return f"{code} {value:,}"


def format_date(value: Union[str, datetime, None]) -> str:
    """Day, short month and 24h time in en-GB order (``5 Mar, 14:07``)."""
    if not value:
        return "-"
    if isinstance(value, datetime):
        dt = value
    else:
        raw = value.strip()
        # fromisoformat() rejects the UTC designator before 3.11
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        dt = datetime.fromisoformat(raw)
    return f"{dt.day} {dt:%b}, {dt:%H:%M}"
