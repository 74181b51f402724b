# -*- coding: utf-8 -*-
"""
This module wires the calculator, the status engine and the payment allocator
into the two operations a lending admin performs: opening a loan and recording
a payment against it.

Nothing here touches storage. Callers load a fresh loan, call these functions
and save what comes back, serializing writes per loan.
"""
from decimal import Decimal

from ._allocation import allocate_payment
from ._amortization import calculate_monthly_due
from ._config import DEFAULT_POLICY
from ._enums import LoanStatus, PaymentMethod, PaymentStatus
from ._exceptions import InvalidInputError, OverpaymentError
from ._logging import get_logger
from ._models import Loan, Payment, PaymentOutcome
from ._money import ZERO, to_money
from ._status import refresh_loan_status
from ._validators import validate_loan_terms, to_date, to_optional_date

logger = get_logger(__name__)


def create_loan(total_price, downpayment, terms, monthly_interest_pct, loan_created_date=None,
                first_due_date=None, borrower_id=None, borrower_name='', item_name='', notes='', id=None):
    """
    Creates a new loan. The monthly installment is computed once here and
    stays fixed for the life of the loan.

    :param total_price: The price of the financed purchase.
    :param downpayment: The amount paid upfront.
    :param terms: The number of monthly periods.
    :param monthly_interest_pct: The interest rate per period, in percent.
    :param loan_created_date: The date the loan was opened.
    :param first_due_date: The due date of the first period; later periods fall one month apart.
    :return: An active Loan with no outstanding balances.
    """
    validate_loan_terms(total_price, downpayment, terms, monthly_interest_pct)
    loan_created_date = to_optional_date(loan_created_date, "LOAN_CREATED_DATE")
    first_due_date = to_optional_date(first_due_date, "FIRST_DUE_DATE")
    if loan_created_date and first_due_date and first_due_date < loan_created_date:
        raise InvalidInputError('FIRST_DUE_DATE cannot be before LOAN_CREATED_DATE')

    loan = Loan(
        total_price=to_money(total_price),
        downpayment=to_money(downpayment),
        terms=terms,
        monthly_interest_pct=Decimal(str(monthly_interest_pct)),
        monthly_due=calculate_monthly_due(total_price, downpayment, terms, monthly_interest_pct),
        loan_created_date=loan_created_date,
        first_due_date=first_due_date,
        total_paid=ZERO,
        outstanding_balances=[],
        penalty=ZERO,
        status=LoanStatus.ACTIVE.value,
        id=id,
        borrower_id=borrower_id,
        borrower_name=borrower_name,
        item_name=item_name,
        notes=notes,
    )
    logger.info("Created loan %s: %s over %d terms, monthly due %s", id, loan.financed_amount, terms, loan.monthly_due)
    return loan


def apply_payment(loan, amount_paid, payment_date, payment_method=PaymentMethod.CASH, notes='',
                  policy=None, allow_overpayment=False):
    """
    Records a payment against a loan.

    The loan is first brought up to date at the payment date, the payment is
    allocated oldest balance first, the principal part is added to total_paid
    and the loan is refreshed again so its status reflects the payment.

    :param loan: The Loan being paid.
    :param amount_paid: The amount received.
    :param payment_date: The date the payment was made.
    :param payment_method: A PaymentMethod or its label.
    :param notes: Free text kept on the payment record.
    :param policy: The PenaltyPolicy to apply; defaults to DEFAULT_POLICY.
    :param allow_overpayment: Keep any amount beyond what is due as credit against later periods instead of
        rejecting the payment.
    :return: A PaymentOutcome with the updated loan, the payment record and the allocation.
    """
    policy = policy or DEFAULT_POLICY
    payment_date = to_date(payment_date, "PAYMENT_DATE")
    try:
        payment_method = PaymentMethod(payment_method)
    except ValueError:
        valid_methods = [item.value for item in PaymentMethod]
        raise InvalidInputError(f"PAYMENT_METHOD must be one of the following: {', '.join(valid_methods)}.")

    current = refresh_loan_status(loan, payment_date, policy)
    allocation = allocate_payment(current, amount_paid)
    amount_paid = to_money(amount_paid)

    if allocation.remainder > 0 and not allow_overpayment:
        logger.info("Rejected payment of %s on loan %s: %s more than is due", amount_paid, loan.id, allocation.remainder)
        raise OverpaymentError(
            f"Payment of {amount_paid} exceeds the {amount_paid - allocation.remainder} currently due.",
            remainder=allocation.remainder,
        )

    # an allowed overpayment counts as paid now and is offset against the periods billed next
    principal_paid = amount_paid - allocation.penalty_paid_total
    credit = current.credit
    if allow_overpayment:
        credit += allocation.remainder
    else:
        principal_paid -= allocation.remainder
    total_paid = min(current.total_price, current.total_paid + principal_paid)

    paid = current.evolve(
        outstanding_balances=allocation.updated_balances,
        total_paid=total_paid,
        credit=credit,
        last_payment_date=payment_date,
    )
    updated = refresh_loan_status(paid, payment_date, policy)

    payment = Payment(
        loan_id=loan.id,
        borrower_id=loan.borrower_id,
        amount_paid=amount_paid,
        penalty_paid=allocation.penalty_paid_total,
        payment_date=payment_date,
        payment_method=payment_method,
        payment_status=PaymentStatus.PARTIAL if allocation.updated_balances else PaymentStatus.FULL,
        notes=notes,
    )
    logger.info(
        "Applied payment of %s to loan %s (penalty %s); status %r",
        amount_paid, loan.id, allocation.penalty_paid_total, updated.status,
    )
    return PaymentOutcome(loan=updated, payment=payment, allocation=allocation)
