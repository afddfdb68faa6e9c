# complaint_desk/utils/decimal_utils.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

TWOPLACES = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return Decimal("0.00")
    if isinstance(value, Decimal):
        return value.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def to_cost(value) -> Decimal:
    """
    Parse a cost as typed into a form.

    Non-numeric input, negatives, NaN and infinity become 0. A real number too
    large to round is returned as is, so the draft's digit limit rejects it
    the same way it rejects any other out-of-range amount.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0.00")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return Decimal("0.00")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0.00")
    if not amount.is_finite() or amount < 0:
        return Decimal("0.00")
    try:
        return amount.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return amount
