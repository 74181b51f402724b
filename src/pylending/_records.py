# -*- coding: utf-8 -*-
"""
This module translates between stored loan and payment documents and the
package's dataclasses.

Stored documents use camelCase keys. Older loan documents named the anchors
``startDate`` and ``dueDate``; they are read as ``loanCreatedDate`` and
``firstDueDate`` so that the engine only ever sees one shape.
"""
from datetime import date
from decimal import Decimal

from ._amortization import calculate_monthly_due, period_due_date
from ._enums import LoanStatus, PaymentMethod, PaymentStatus
from ._models import Loan, OutstandingBalance, Payment
from ._money import ZERO, to_money
from ._validators import to_optional_date

_LEGACY_DATE_KEYS = {
    'loanCreatedDate': 'startDate',
    'firstDueDate': 'dueDate',
}


def _serialize_value(value):
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (PaymentMethod, PaymentStatus, LoanStatus)):
        return value.value
    if value is None:
        return None
    if isinstance(value, (int, str)):
        return value
    return str(value)


def _money_field(record, key):
    value = record.get(key)
    return to_money(value) if value else ZERO


def _date_field(record, key):
    value = record.get(key)
    if value is None and key in _LEGACY_DATE_KEYS:
        value = record.get(_LEGACY_DATE_KEYS[key])
    return to_optional_date(value, key)


def balance_from_record(record):
    return OutstandingBalance(
        due_date=to_optional_date(record.get('dueDate'), 'dueDate'),
        base_amount=_money_field(record, 'baseAmount'),
        penalty_amount=_money_field(record, 'penaltyAmount'),
    )


def balance_to_record(balance):
    return {
        'dueDate': _serialize_value(balance.due_date),
        'baseAmount': _serialize_value(balance.base_amount),
        'penaltyAmount': _serialize_value(balance.penalty_amount),
    }


def _infer_last_billed_date(first_due_date, terms, monthly_due, total_paid):
    """
    Documents written before lastBilledDate existed only record totalPaid;
    every whole installment it covers is taken as billed and paid.
    """
    if first_due_date is None or monthly_due <= 0:
        return None
    covered = min(terms, int(total_paid // monthly_due))
    if covered < 1:
        return None
    return period_due_date(first_due_date, covered - 1)


def loan_from_record(record, doc_id=None):
    """
    Builds a Loan from a stored document.

    :param record: The document as a mapping.
    :param doc_id: The document id, when the store keeps it outside the document.
    :return: A Loan object.
    """
    terms = int(record.get('terms') or 0)
    total_price = _money_field(record, 'totalPrice')
    downpayment = _money_field(record, 'downpayment')
    monthly_interest_pct = Decimal(str(record.get('monthlyInterestPct') or 0))

    monthly_due = _money_field(record, 'monthlyDue')
    if monthly_due == ZERO and terms > 0 and total_price > downpayment:
        monthly_due = calculate_monthly_due(total_price, downpayment, terms, monthly_interest_pct)

    balances = [balance_from_record(item) for item in record.get('outstandingBalances') or []]
    balances = [balance for balance in balances if balance.due_date is not None]

    first_due_date = _date_field(record, 'firstDueDate')
    total_paid = _money_field(record, 'totalPaid')
    last_billed_date = _date_field(record, 'lastBilledDate')
    if 'lastBilledDate' not in record and not balances:
        last_billed_date = _infer_last_billed_date(first_due_date, terms, monthly_due, total_paid)

    return Loan(
        id=doc_id if doc_id is not None else record.get('id'),
        borrower_id=record.get('borrowerId'),
        borrower_name=record.get('borrowerName') or '',
        item_name=record.get('itemName') or '',
        total_price=total_price,
        downpayment=downpayment,
        terms=terms,
        monthly_interest_pct=monthly_interest_pct,
        monthly_due=monthly_due,
        loan_created_date=_date_field(record, 'loanCreatedDate'),
        first_due_date=first_due_date,
        total_paid=total_paid,
        outstanding_balances=sorted(balances, key=lambda balance: balance.due_date),
        penalty=_money_field(record, 'penalty'),
        status=record.get('status') or LoanStatus.ACTIVE.value,
        last_payment_date=_date_field(record, 'lastPaymentDate'),
        last_billed_date=last_billed_date,
        credit=_money_field(record, 'credit'),
        notes=record.get('notes') or '',
    )


def loan_to_record(loan):
    """Serializes a Loan to a document; money is written as strings so it round-trips exactly."""
    record = {
        'borrowerId': loan.borrower_id,
        'borrowerName': loan.borrower_name,
        'itemName': loan.item_name,
        'totalPrice': loan.total_price,
        'downpayment': loan.downpayment,
        'terms': loan.terms,
        'monthlyInterestPct': loan.monthly_interest_pct,
        'monthlyDue': loan.monthly_due,
        'loanCreatedDate': loan.loan_created_date,
        'firstDueDate': loan.first_due_date,
        'totalPaid': loan.total_paid,
        'penalty': loan.penalty,
        'status': loan.status,
        'lastPaymentDate': loan.last_payment_date,
        'lastBilledDate': loan.last_billed_date,
        'credit': loan.credit,
        'notes': loan.notes,
    }
    record = {key: _serialize_value(value) for key, value in record.items()}
    record['outstandingBalances'] = [balance_to_record(balance) for balance in loan.outstanding_balances]
    if loan.id is not None:
        record['id'] = loan.id
    return record


def payment_from_record(record, doc_id=None):
    return Payment(
        id=doc_id if doc_id is not None else record.get('id'),
        loan_id=record.get('loanId'),
        borrower_id=record.get('borrowerId'),
        amount_paid=_money_field(record, 'amountPaid'),
        penalty_paid=_money_field(record, 'penaltyPaid'),
        payment_date=to_optional_date(record.get('paymentDate'), 'paymentDate'),
        payment_method=PaymentMethod(record.get('paymentMethod') or PaymentMethod.CASH.value),
        payment_status=PaymentStatus(record.get('paymentStatus') or PaymentStatus.FULL.value),
        notes=record.get('notes') or '',
    )


def payment_to_record(payment):
    record = {
        'loanId': payment.loan_id,
        'borrowerId': payment.borrower_id,
        'amountPaid': payment.amount_paid,
        'penaltyPaid': payment.penalty_paid,
        'paymentDate': payment.payment_date,
        'paymentMethod': payment.payment_method,
        'paymentStatus': payment.payment_status,
        'notes': payment.notes,
    }
    record = {key: _serialize_value(value) for key, value in record.items()}
    if payment.id is not None:
        record['id'] = payment.id
    return record
