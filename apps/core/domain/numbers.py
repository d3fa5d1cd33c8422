# apps/core/domain/numbers.py
from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float) -> int:
    """
    Rounds .5 away from zero (12.5 -> 13), unlike Python's banker's round().
    Percentages shown to the user are always rounded this way.
    """
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))
