# services/money.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

TWO_PLACES = Decimal("0.01")

Amount = Union[Decimal, int, float, str]


def to_money(value: Amount) -> Decimal:
     """Convert to a Decimal rounded half-up to currency precision (2 places)."""
     if not isinstance(value, Decimal):
          value = Decimal(str(value))
     return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
