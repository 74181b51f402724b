# -*- coding: utf-8 -*-
"""
This module contains the payment allocator.

A payment retires outstanding balances oldest first. A balance the payment
cannot cover is reduced, with the payment split between base and penalty in
proportion to what the balance owes on each.
"""
from dataclasses import replace

from ._logging import get_logger
from ._models import AllocationResult
from ._money import ZERO, to_money
from ._validators import validate_positive

logger = get_logger(__name__)


def allocate_payment(loan, amount_paid):
    """
    Applies a payment amount against a loan's outstanding balances.

    Overpayment is reported as a non-zero remainder; what to do with it is up
    to the caller.

    :param loan: The Loan whose balances are paid.
    :param amount_paid: The amount received.
    :return: An AllocationResult object.
    """
    validate_positive(amount_paid, "AMOUNT_PAID")
    remaining = to_money(amount_paid)

    balances = sorted(loan.outstanding_balances, key=lambda balance: balance.due_date)
    updated_balances = []
    penalty_paid_total = ZERO

    for balance in balances:
        if remaining <= 0:
            updated_balances.append(balance)
            continue

        total_due = balance.total_due
        if remaining >= total_due:
            remaining -= total_due
            penalty_paid_total += balance.penalty_amount
            logger.debug("Retired balance due %s of loan %s", balance.due_date, loan.id)
            continue

        # base takes whatever the rounded penalty share leaves, so the split conserves the payment
        penalty_portion = to_money(remaining * balance.penalty_amount / total_due)
        base_portion = remaining - penalty_portion
        updated_balances.append(replace(
            balance,
            base_amount=balance.base_amount - base_portion,
            penalty_amount=balance.penalty_amount - penalty_portion,
        ))
        penalty_paid_total += penalty_portion
        logger.debug(
            "Partially paid balance due %s of loan %s: base %s, penalty %s",
            balance.due_date, loan.id, base_portion, penalty_portion,
        )
        remaining = ZERO

    return AllocationResult(
        updated_balances=updated_balances,
        penalty_paid_total=to_money(penalty_paid_total),
        remainder=to_money(remaining),
    )
