# -*- coding: utf-8 -*-
"""
This module contains the money helpers shared by the loan engine.

Every amount is a Decimal with two places, rounded half-up. Rounding happens
here and nowhere else.
"""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
ZERO = Decimal('0.00')


def to_money(amount):
    """Convert an int, float, str or Decimal to a quantized Decimal amount."""
    if isinstance(amount, bool):
        raise TypeError("Money amounts cannot be of type boolean.")
    if isinstance(amount, float):
        amount = str(amount)
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(amounts):
    total = ZERO
    for amount in amounts:
        total += amount
    return to_money(total)
