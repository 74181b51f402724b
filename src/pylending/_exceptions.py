# -*- coding: utf-8 -*-
"""
This module contains the exception hierarchy of the pylending package.
"""


class LendingError(Exception):
    """Base exception for all pylending errors."""


class InvalidInputError(LendingError, ValueError):
    """Raised when an argument is outside the domain an operation accepts."""


class OverpaymentError(InvalidInputError):
    """Raised when a payment exceeds everything currently due and no credit is allowed."""

    def __init__(self, message, remainder):
        super().__init__(message)
        self.remainder = remainder


class ConfigurationError(LendingError):
    """Raised when a penalty policy is invalid."""
