# -*- coding: utf-8 -*-
"""
This module contains dataclasses for loans, balances and payments.
"""
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import List, Optional

from ._enums import LoanStatus, PaymentMethod, PaymentStatus
from ._money import ZERO


@dataclass(frozen=True)
class OutstandingBalance:
    due_date: date
    base_amount: Decimal
    penalty_amount: Decimal = ZERO

    @property
    def total_due(self):
        return self.base_amount + self.penalty_amount


@dataclass
class Loan:
    """
    A financed purchase. Terms are fixed at creation; balances, penalty and
    status are derived by the status engine and the payment allocator.
    """
    total_price: Decimal
    downpayment: Decimal
    terms: int
    monthly_interest_pct: Decimal
    monthly_due: Decimal
    loan_created_date: Optional[date] = None
    first_due_date: Optional[date] = None
    total_paid: Decimal = ZERO
    outstanding_balances: List[OutstandingBalance] = field(default_factory=list)
    penalty: Decimal = ZERO
    status: str = LoanStatus.ACTIVE.value
    last_payment_date: Optional[date] = None
    last_billed_date: Optional[date] = None
    credit: Decimal = ZERO
    id: Optional[str] = None
    borrower_id: Optional[str] = None
    borrower_name: str = ''
    item_name: str = ''
    notes: str = ''

    @property
    def financed_amount(self):
        return self.total_price - self.downpayment

    @property
    def is_fully_paid(self):
        return self.total_paid >= self.total_price

    def evolve(self, **changes):
        """Return a copy of the loan with the given fields replaced."""
        if 'outstanding_balances' not in changes:
            changes['outstanding_balances'] = list(self.outstanding_balances)
        return replace(self, **changes)


@dataclass(frozen=True)
class Payment:
    loan_id: Optional[str]
    amount_paid: Decimal
    penalty_paid: Decimal
    payment_date: date
    payment_method: PaymentMethod = PaymentMethod.CASH
    payment_status: PaymentStatus = PaymentStatus.FULL
    notes: str = ''
    borrower_id: Optional[str] = None
    id: Optional[str] = None


@dataclass(frozen=True)
class AllocationResult:
    updated_balances: List[OutstandingBalance]
    penalty_paid_total: Decimal
    remainder: Decimal


@dataclass(frozen=True)
class PaymentOutcome:
    loan: Loan
    payment: Payment
    allocation: AllocationResult


@dataclass
class LoanSummary:
    financed_amount: Decimal
    monthly_due: Decimal
    final_installment: Decimal
    total_interest: Decimal
    total_amount_payable: Decimal
    end_date: Optional[date]


@dataclass
class PortfolioSummary:
    loan_count: int
    status_counts: dict
    total_outstanding: Decimal
    total_penalty: Decimal
    total_collected: Decimal
    upcoming_due: int = 0
    late_loans: int = 0


@dataclass(frozen=True)
class UpcomingPayment:
    loan_id: Optional[str]
    borrower_id: Optional[str]
    borrower_name: str
    item_name: str
    due_date: date
    amount: Decimal
    is_late: bool


@dataclass(frozen=True)
class SweepResult:
    loan: Loan
    changed: bool
    became_delayed: bool
