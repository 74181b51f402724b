# -*- coding: utf-8 -*-
import re
from enum import Enum


class LoanStatus(str, Enum):
    ACTIVE = 'Active'
    DELAYED = 'Delayed'
    SEVERELY_DELAYED = 'Severely Delayed'
    FULLY_PAID = 'Fully Paid'


class PaymentMethod(str, Enum):
    CASH = 'Cash'
    BANK_TRANSFER = 'Bank Transfer'
    CHECK = 'Check'


class PaymentStatus(str, Enum):
    FULL = 'Full'
    PARTIAL = 'Partial'


class PenaltyAccrual(str, Enum):
    LINEAR = 'linear'
    STEPWISE = 'stepwise'


_DELAYED_LABEL = re.compile(r'^Delayed \((\d+) days\)$')
_KNOWN_LABELS = frozenset(status.value for status in LoanStatus)


def format_status(status, days_late=None):
    """
    Builds the status label stored on a loan record.

    :param status: A LoanStatus member.
    :param days_late: Days past the grace period; only used for LoanStatus.DELAYED.
    :return: The label, e.g. 'Delayed (12 days)'.
    """
    status = LoanStatus(status)
    if status == LoanStatus.DELAYED:
        if days_late is None:
            raise ValueError("A delayed status label needs the number of days late.")
        return f"Delayed ({days_late} days)"
    return status.value


def parse_status(label):
    """
    Returns the LoanStatus a stored label belongs to.

    Labels written by other tools ('Late', 'Written Off', ...) read as
    LoanStatus.ACTIVE; the next refresh replaces them with a derived label.
    """
    if _DELAYED_LABEL.match(label or '') or label == LoanStatus.DELAYED.value:
        return LoanStatus.DELAYED
    if label in _KNOWN_LABELS:
        return LoanStatus(label)
    return LoanStatus.ACTIVE
