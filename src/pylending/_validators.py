# -*- coding: utf-8 -*-
"""
This module contains validator functions for loan terms, payments and dates.
"""
import datetime as dt
from decimal import Decimal, InvalidOperation

from ._exceptions import InvalidInputError


def validate_numeric(value, name):
    """Validate that a value is a number usable as a money amount."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal, str)):
        raise TypeError(f"Variable {name} can only be of type integer, float, Decimal or numeric string.")
    try:
        Decimal(str(value))
    except InvalidOperation:
        raise InvalidInputError(f"Variable {name} must be a number, got {value!r}.")


def validate_non_negative(value, name):
    """Validate that a value is a non-negative number."""
    validate_numeric(value, name)
    if Decimal(str(value)) < 0:
        raise InvalidInputError(f"Variable {name} can only be non-negative.")


def validate_positive(value, name):
    """Validate that a value is a strictly positive number."""
    validate_numeric(value, name)
    if Decimal(str(value)) <= 0:
        raise InvalidInputError(f"Variable {name} must be greater than 0.")


def validate_positive_integer(value, name):
    """Validate that a value is a positive integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Variable {name} can only be of type integer.")
    if value < 1:
        raise InvalidInputError(f"Variable {name} can only be integers greater or equal to 1.")


def validate_loan_terms(total_price, downpayment, terms, monthly_interest_pct):
    """Validate the four scalar terms of a loan."""
    validate_positive(total_price, "TOTAL_PRICE")
    validate_non_negative(downpayment, "DOWNPAYMENT")
    validate_positive_integer(terms, "TERMS")
    validate_non_negative(monthly_interest_pct, "MONTHLY_INTEREST_PCT")
    if Decimal(str(downpayment)) >= Decimal(str(total_price)):
        raise InvalidInputError("DOWNPAYMENT must be less than TOTAL_PRICE.")


def to_date(value, name):
    """
    Normalize a date, a datetime or a YYYY-MM-DD string to a date.

    Datetimes are truncated to their day so that day counts never depend on
    the time of day.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str):
        try:
            return dt.datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            raise InvalidInputError(f"Variable {name} must be a valid date in YYYY-MM-DD format.")
    raise TypeError(f"Variable {name} must be a date, a datetime or a string with format YYYY-MM-DD")


def to_optional_date(value, name):
    if value is None:
        return None
    return to_date(value, name)
