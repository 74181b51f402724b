# -*- coding: utf-8 -*-
"""
This module contains the penalty policy used by the status engine.
"""
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from ._enums import PenaltyAccrual
from ._exceptions import ConfigurationError


@dataclass(frozen=True)
class PenaltyPolicy:
    """
    Late-fee rules applied to every outstanding balance.

    :param grace_period_days: Days after a due date during which no penalty accrues.
    :param penalty_rate: Fraction of the unpaid base charged per penalty period.
    :param penalty_period_days: Length of one penalty period in days.
    :param severe_delay_days: Days late above which a loan is severely delayed.
    :param accrual: 'linear' interpolates within a penalty period, 'stepwise' only counts whole periods.
    """

    grace_period_days: int = 5
    penalty_rate: Decimal = Decimal('0.03')
    penalty_period_days: int = 30
    severe_delay_days: int = 30
    accrual: PenaltyAccrual = PenaltyAccrual.LINEAR

    def __post_init__(self):
        if not isinstance(self.grace_period_days, int) or self.grace_period_days < 0:
            raise ConfigurationError("grace_period_days must be a non-negative integer.")
        if not isinstance(self.penalty_period_days, int) or self.penalty_period_days < 1:
            raise ConfigurationError("penalty_period_days must be a positive integer.")
        if not isinstance(self.severe_delay_days, int) or self.severe_delay_days < 0:
            raise ConfigurationError("severe_delay_days must be a non-negative integer.")
        try:
            rate = Decimal(str(self.penalty_rate))
        except InvalidOperation:
            raise ConfigurationError(f"penalty_rate must be a number, got {self.penalty_rate!r}.")
        if rate < 0:
            raise ConfigurationError("penalty_rate must be non-negative.")
        try:
            accrual = PenaltyAccrual(self.accrual)
        except ValueError:
            valid = ', '.join(item.value for item in PenaltyAccrual)
            raise ConfigurationError(f"accrual must be one of: {valid}.")
        # frozen dataclass: normalize through object.__setattr__
        object.__setattr__(self, 'penalty_rate', rate)
        object.__setattr__(self, 'accrual', accrual)

    @classmethod
    def from_env(cls):
        """Create a policy from PYLENDING_* environment variables, falling back to the defaults."""
        defaults = cls()
        try:
            return cls(
                grace_period_days=int(os.getenv('PYLENDING_GRACE_PERIOD_DAYS', defaults.grace_period_days)),
                penalty_rate=Decimal(os.getenv('PYLENDING_PENALTY_RATE', str(defaults.penalty_rate))),
                penalty_period_days=int(os.getenv('PYLENDING_PENALTY_PERIOD_DAYS', defaults.penalty_period_days)),
                severe_delay_days=int(os.getenv('PYLENDING_SEVERE_DELAY_DAYS', defaults.severe_delay_days)),
                accrual=os.getenv('PYLENDING_PENALTY_ACCRUAL', defaults.accrual.value),
            )
        except (ValueError, InvalidOperation) as exc:
            raise ConfigurationError(f"Invalid penalty policy in environment: {exc}")


DEFAULT_POLICY = PenaltyPolicy()
