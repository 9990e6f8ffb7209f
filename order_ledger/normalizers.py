import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Union


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_float(amount: Union[str, int, float]) -> float:
    """Parse an amount and round it to 2 decimal places, halves rounding up.

    Unparsable or non-finite input yields NaN so callers can reject it with
    ``is_positive_number``.
    """
    if isinstance(amount, bool):
        return math.nan
    try:
        value = float(str(amount).strip())
    except (TypeError, ValueError):
        return math.nan
    if not math.isfinite(value):
        return math.nan
    # Quantize the binary value itself: 1.005 is stored below the tie and stays 1.00
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
