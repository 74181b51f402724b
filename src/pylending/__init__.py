# -*- coding: utf-8 -*-
from ._allocation import allocate_payment
from ._amortization import (
    calculate_end_date,
    calculate_final_installment,
    calculate_loan_summary,
    calculate_monthly_due,
    calculate_total_amount_payable,
    calculate_total_interest,
)
from ._config import DEFAULT_POLICY, PenaltyPolicy
from ._enums import LoanStatus, PaymentMethod, PaymentStatus, PenaltyAccrual, format_status, parse_status
from ._exceptions import ConfigurationError, InvalidInputError, LendingError, OverpaymentError
from ._logging import get_logger, setup_logging
from ._models import (
    AllocationResult,
    Loan,
    LoanSummary,
    OutstandingBalance,
    Payment,
    PaymentOutcome,
    PortfolioSummary,
    SweepResult,
    UpcomingPayment,
)
from ._records import loan_from_record, loan_to_record, payment_from_record, payment_to_record
from ._status import (
    amount_due,
    calculate_penalty,
    days_late,
    is_overdue,
    next_due_date,
    payment_progress,
    refresh_loan_status,
    summarize_portfolio,
    sweep_loans,
    upcoming_payments,
)
from .pylending import apply_payment, create_loan

__version__ = '0.1.0'
