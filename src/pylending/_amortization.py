# -*- coding: utf-8 -*-
"""
This module contains the amortization calculator.

All functions are pure: they take the four scalar terms of a loan and
return quantized Decimal amounts.
"""
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from ._models import LoanSummary
from ._money import to_money
from ._validators import validate_loan_terms, validate_positive_integer, to_optional_date


def _financed_amount(total_price, downpayment):
    return Decimal(str(total_price)) - Decimal(str(downpayment))


def calculate_monthly_due(total_price, downpayment, terms, monthly_interest_pct):
    """
    Calculates the fixed installment that amortizes the financed amount.

    :param total_price: The price of the financed purchase.
    :param downpayment: The amount paid upfront.
    :param terms: The number of monthly periods.
    :param monthly_interest_pct: The interest rate per period, in percent.
    :return: The monthly installment as a Decimal.
    """
    validate_loan_terms(total_price, downpayment, terms, monthly_interest_pct)
    return to_money(_exact_monthly_due(total_price, downpayment, terms, monthly_interest_pct))


def _exact_monthly_due(total_price, downpayment, terms, monthly_interest_pct):
    financed_amount = _financed_amount(total_price, downpayment)
    periodic_interest_rate = Decimal(str(monthly_interest_pct)) / 100

    if periodic_interest_rate == 0:
        return financed_amount / terms

    # Standard formula for annuity payment
    factor = (1 + periodic_interest_rate) ** terms
    return financed_amount * (periodic_interest_rate * factor) / (factor - 1)


def _schedule_total(total_price, downpayment, terms, monthly_interest_pct):
    return to_money(_exact_monthly_due(total_price, downpayment, terms, monthly_interest_pct) * terms)


def calculate_final_installment(total_price, downpayment, terms, monthly_interest_pct):
    """
    Calculates the last installment of the schedule. It differs from the
    monthly due by the cents lost rounding every earlier installment, so the
    installments add up to the unrounded schedule total.

    :return: The final installment as a Decimal.
    """
    monthly_due = calculate_monthly_due(total_price, downpayment, terms, monthly_interest_pct)
    schedule_total = _schedule_total(total_price, downpayment, terms, monthly_interest_pct)
    return to_money(schedule_total - monthly_due * (terms - 1))


def calculate_total_interest(total_price, downpayment, terms, monthly_interest_pct):
    validate_loan_terms(total_price, downpayment, terms, monthly_interest_pct)
    schedule_total = _schedule_total(total_price, downpayment, terms, monthly_interest_pct)
    return to_money(schedule_total - _financed_amount(total_price, downpayment))


def calculate_total_amount_payable(total_price, downpayment, terms, monthly_interest_pct):
    validate_loan_terms(total_price, downpayment, terms, monthly_interest_pct)
    schedule_total = _schedule_total(total_price, downpayment, terms, monthly_interest_pct)
    return to_money(schedule_total + Decimal(str(downpayment)))


def period_due_date(first_due_date, index):
    """
    Returns the due date of the period at a zero-based index.

    Dates are always offset from the first due date, so a schedule starting on
    the 31st lands on the 31st again after passing through a short month.
    """
    return first_due_date + relativedelta(months=index)


def calculate_end_date(first_due_date, terms):
    """The due date of the last period of the loan."""
    validate_positive_integer(terms, "TERMS")
    first_due_date = to_optional_date(first_due_date, "FIRST_DUE_DATE")
    if first_due_date is None:
        return None
    return period_due_date(first_due_date, terms - 1)


def calculate_loan_summary(total_price, downpayment, terms, monthly_interest_pct, first_due_date=None):
    """
    Calculates the quote shown to a borrower before a loan is created.

    :return: A LoanSummary object.
    """
    monthly_due = calculate_monthly_due(total_price, downpayment, terms, monthly_interest_pct)
    financed_amount = to_money(_financed_amount(total_price, downpayment))
    schedule_total = _schedule_total(total_price, downpayment, terms, monthly_interest_pct)
    return LoanSummary(
        financed_amount=financed_amount,
        monthly_due=monthly_due,
        final_installment=to_money(schedule_total - monthly_due * (terms - 1)),
        total_interest=to_money(schedule_total - financed_amount),
        total_amount_payable=to_money(schedule_total + Decimal(str(downpayment))),
        end_date=calculate_end_date(first_due_date, terms),
    )
