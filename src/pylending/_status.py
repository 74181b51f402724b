# -*- coding: utf-8 -*-
"""
This module contains the status and penalty engine.

Given a loan and the current date, the engine bills every period that has
fallen due, recomputes the late penalty on each unpaid period and derives the
loan's status label. It never changes the unpaid base of a period; only the
payment allocator does that.
"""
from collections import Counter
from dataclasses import replace
from decimal import Decimal

from ._amortization import calculate_final_installment, calculate_monthly_due, period_due_date
from ._config import DEFAULT_POLICY
from ._enums import LoanStatus, PenaltyAccrual, format_status, parse_status
from ._logging import get_logger
from ._models import OutstandingBalance, PortfolioSummary, SweepResult, UpcomingPayment
from ._money import ZERO, money_sum, to_money
from ._validators import to_date, to_optional_date

logger = get_logger(__name__)

_DELAYED_STATES = (LoanStatus.DELAYED, LoanStatus.SEVERELY_DELAYED)


def days_late(due_date, now, policy=None):
    """Whole days past the grace period, never negative."""
    policy = policy or DEFAULT_POLICY
    elapsed = (to_date(now, "NOW") - to_date(due_date, "DUE_DATE")).days
    return max(0, elapsed - policy.grace_period_days)


def calculate_penalty(base_amount, late_days, policy=None):
    """
    Calculates the late fee on one unpaid period.

    :param base_amount: The unpaid base of the period.
    :param late_days: Days late, already net of the grace period.
    :param policy: The PenaltyPolicy to apply.
    :return: The penalty as a Decimal.
    """
    policy = policy or DEFAULT_POLICY
    if late_days <= 0:
        return ZERO

    if policy.accrual == PenaltyAccrual.STEPWISE:
        elapsed_periods = Decimal(late_days // policy.penalty_period_days)
    else:
        elapsed_periods = Decimal(late_days) / policy.penalty_period_days
    return to_money(Decimal(base_amount) * policy.penalty_rate * elapsed_periods)


def _billed_through(loan):
    if loan.last_billed_date is not None:
        return loan.last_billed_date
    if loan.outstanding_balances:
        return max(balance.due_date for balance in loan.outstanding_balances)
    return None


def _installment_amount(loan, index):
    """The base billed for a period; the last one absorbs the rounding residual of the monthly due."""
    if index < loan.terms - 1 or loan.total_price <= loan.downpayment:
        return loan.monthly_due
    loan_terms = (loan.total_price, loan.downpayment, loan.terms, loan.monthly_interest_pct)
    residual = calculate_final_installment(*loan_terms) - calculate_monthly_due(*loan_terms)
    return max(ZERO, loan.monthly_due + residual)


def _bill_elapsed_periods(loan, now):
    """
    Append a balance for every period due on or before now that was never billed.

    Credit left by earlier overpayments is drawn down first; a period it
    covers entirely is marked billed without adding a balance.
    """
    balances = sorted(loan.outstanding_balances, key=lambda balance: balance.due_date)
    existing = {balance.due_date for balance in balances}
    billed_through = _billed_through(loan)
    credit = loan.credit

    for index in range(loan.terms):
        due_date = period_due_date(loan.first_due_date, index)
        if due_date > now:
            break
        if billed_through is not None and due_date <= billed_through:
            continue
        if due_date in existing:
            continue

        base_amount = _installment_amount(loan, index)
        if credit > 0:
            applied = min(credit, base_amount)
            base_amount -= applied
            credit -= applied
            logger.debug("Applied credit %s to period %s of loan %s", applied, due_date, loan.id)
        billed_through = due_date
        if base_amount > 0:
            logger.debug("Billing period %s of loan %s for %s", due_date, loan.id, base_amount)
            balances.append(OutstandingBalance(due_date=due_date, base_amount=base_amount, penalty_amount=ZERO))

    balances.sort(key=lambda balance: balance.due_date)
    return balances, billed_through, credit


def _is_paid_off(loan):
    """True once total_paid covers the price or every installment of the schedule."""
    if loan.is_fully_paid:
        return True
    if loan.terms < 1 or loan.monthly_due <= 0:
        return False
    schedule_total = loan.monthly_due * (loan.terms - 1) + _installment_amount(loan, loan.terms - 1)
    return loan.total_paid >= schedule_total


def _derive_status(balances, now, policy):
    if not balances:
        return LoanStatus.ACTIVE.value

    oldest_days_late = days_late(balances[0].due_date, now, policy)
    if oldest_days_late > policy.severe_delay_days:
        return LoanStatus.SEVERELY_DELAYED.value
    if oldest_days_late > 0:
        return format_status(LoanStatus.DELAYED, oldest_days_late)
    return LoanStatus.ACTIVE.value


def refresh_loan_status(loan, now, policy=None):
    """
    Recomputes outstanding balances, penalty and status of a loan at a date.

    A loan is fully paid once total_paid reaches total_price or the sum of
    its installments, the last one including the rounding residual.

    The input loan is left untouched. Calling this again with the same date and
    no payment in between returns an equal loan.

    :param loan: The Loan to refresh.
    :param now: The current date (date, datetime or YYYY-MM-DD string).
    :param policy: The PenaltyPolicy to apply; defaults to DEFAULT_POLICY.
    :return: The refreshed Loan.
    """
    policy = policy or DEFAULT_POLICY
    now = to_date(now, "NOW")

    if _is_paid_off(loan):
        if loan.status != LoanStatus.FULLY_PAID.value:
            logger.info("Loan %s is paid off", loan.id)
        return loan.evolve(status=LoanStatus.FULLY_PAID.value, outstanding_balances=[], penalty=ZERO)

    if loan.first_due_date is None:
        return loan.evolve(status=LoanStatus.ACTIVE.value, outstanding_balances=[], penalty=ZERO)

    balances, billed_through, credit = _bill_elapsed_periods(loan, now)
    balances = [
        replace(balance, penalty_amount=calculate_penalty(balance.base_amount, days_late(balance.due_date, now, policy), policy))
        for balance in balances
    ]
    status = _derive_status(balances, now, policy)
    if status != loan.status:
        logger.debug("Loan %s status changed from %r to %r", loan.id, loan.status, status)

    return loan.evolve(
        outstanding_balances=balances,
        penalty=money_sum(balance.penalty_amount for balance in balances),
        status=status,
        last_billed_date=billed_through,
        credit=credit,
    )


def amount_due(loan):
    """Everything currently owed on a loan: unpaid bases plus their penalties."""
    return money_sum(balance.total_due for balance in loan.outstanding_balances)


def is_overdue(loan, now, policy=None):
    refreshed = refresh_loan_status(loan, now, policy)
    return parse_status(refreshed.status) in _DELAYED_STATES


def _is_settled(loan):
    return _is_paid_off(loan) or parse_status(loan.status) == LoanStatus.FULLY_PAID


def _billed_period_count(loan):
    billed_through = _billed_through(loan)
    if loan.first_due_date is None or billed_through is None:
        return 0

    billed = 0
    for index in range(loan.terms):
        if period_due_date(loan.first_due_date, index) > billed_through:
            break
        billed += 1
    return billed


def payment_progress(loan):
    """Label such as '3 of 12 payments made', counting billed periods that are no longer outstanding."""
    if _is_settled(loan):
        return f"{loan.terms} of {loan.terms} payments made"
    paid = max(0, _billed_period_count(loan) - len(loan.outstanding_balances))
    return f"{paid} of {loan.terms} payments made"


def next_due_date(loan):
    """
    Returns the due date of the next period that has not been billed yet.

    Pass a refreshed loan. Returns None for a settled loan, a loan without a
    schedule, or one whose last period has already been billed.
    """
    if _is_settled(loan) or loan.first_due_date is None:
        return None
    index = _billed_period_count(loan)
    if index >= loan.terms:
        return None
    return period_due_date(loan.first_due_date, index)


def upcoming_payments(loans, now=None):
    """
    Lists the next installment of every open loan, soonest first.

    :param loans: Refreshed loans.
    :param now: When given, installments due before this date are left out.
    :return: A list of UpcomingPayment objects.
    """
    now = to_optional_date(now, "NOW")
    upcoming = []
    for loan in loans:
        due_date = next_due_date(loan)
        if due_date is None or (now is not None and due_date < now):
            continue
        amount = _installment_amount(loan, _billed_period_count(loan))
        upcoming.append(UpcomingPayment(
            loan_id=loan.id,
            borrower_id=loan.borrower_id,
            borrower_name=loan.borrower_name,
            item_name=loan.item_name,
            due_date=due_date,
            amount=max(ZERO, amount - loan.credit),
            is_late=parse_status(loan.status) in _DELAYED_STATES,
        ))
    upcoming.sort(key=lambda item: item.due_date)
    return upcoming


def sweep_loans(loans, now, policy=None):
    """
    Refreshes a batch of loans, e.g. from a periodic job.

    Each SweepResult says whether the refreshed loan differs from the stored one
    (and so needs saving) and whether it has just entered a delayed state.
    """
    results = []
    for loan in loans:
        refreshed = refresh_loan_status(loan, now, policy)
        changed = (
            refreshed.status != loan.status
            or refreshed.penalty != loan.penalty
            or refreshed.outstanding_balances != loan.outstanding_balances
            or refreshed.last_billed_date != loan.last_billed_date
            or refreshed.credit != loan.credit
        )
        became_delayed = (
            parse_status(loan.status) not in _DELAYED_STATES
            and parse_status(refreshed.status) in _DELAYED_STATES
        )
        results.append(SweepResult(loan=refreshed, changed=changed, became_delayed=became_delayed))

    logger.info(
        "Swept %d loans: %d changed, %d newly delayed",
        len(results),
        sum(1 for result in results if result.changed),
        sum(1 for result in results if result.became_delayed),
    )
    return results


def summarize_portfolio(loans, now=None):
    """
    Aggregates a list of loans into dashboard totals.

    Outstanding principal counts open loans only. upcoming_due and late_loans
    count the entries upcoming_payments(loans, now) returns, and how many of
    those belong to delayed loans.

    :return: A PortfolioSummary object.
    """
    loans = list(loans)
    status_counts = Counter(parse_status(loan.status).value for loan in loans)
    open_loans = [loan for loan in loans if not _is_settled(loan)]
    upcoming = upcoming_payments(loans, now)
    return PortfolioSummary(
        loan_count=len(loans),
        status_counts=dict(status_counts),
        total_outstanding=money_sum(max(ZERO, loan.total_price - loan.total_paid) for loan in open_loans),
        total_penalty=money_sum(loan.penalty for loan in loans),
        total_collected=money_sum(loan.total_paid for loan in loans),
        upcoming_due=len(upcoming),
        late_loans=sum(1 for item in upcoming if item.is_late),
    )
