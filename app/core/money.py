from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_amount(value) -> Decimal:
    """Currency value rounded half-up to 2 decimal places."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
