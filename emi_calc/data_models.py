"""Data models for the EMI calculator.

This module defines dataclasses for the values flowing in and out of the
amortization engine: loan inputs, the computed result, individual schedule
rows and the balloon-loan variants. All of them are transient value objects
built for one calculation and then discarded.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

Number = Union[int, float, str, Decimal, None]


@dataclass(frozen=True)
class LoanInputs:
    """User inputs for a standard amortizing loan.

    Attributes
    ----------
    principal:
        The loan amount.
    annual_rate_percent:
        Nominal annual interest rate in percent (``8.5`` means 8.5 %).
    term_years:
        Loan duration in years. Fractional years are allowed.
    extra_payment:
        Additional amount applied to principal every month.

    The fields are stored as given; ``engine.sanitize_inputs`` coerces them
    into non-negative ``Decimal`` values before any arithmetic happens.
    """

    principal: Number
    annual_rate_percent: Number
    term_years: Number
    extra_payment: Number = 0


@dataclass(frozen=True)
class LoanResult:
    """Derived figures for a loan.

    ``monthly_payment`` is the standard installment and ignores the extra
    payment. ``total_payment`` and ``payoff_time`` reflect the payments that
    are actually made, so they shrink when an extra payment is set.
    """

    monthly_payment: Decimal
    total_payment: Decimal
    total_interest: Decimal
    payoff_time: int  # periods (months)
    interest_saved: Decimal


@dataclass(frozen=True)
class ScheduleEntry:
    """One month of the payoff schedule."""

    period: int
    starting_balance: Decimal
    payment: Decimal  # standard installment portion
    extra_payment: Decimal
    principal_payment: Decimal
    interest_payment: Decimal
    ending_balance: Decimal

    @property
    def total_paid(self) -> Decimal:
        return self.payment + self.extra_payment


@dataclass(frozen=True)
class BalloonInputs:
    """Inputs for a balloon loan.

    The monthly payment is sized as if the loan ran for ``amortization_years``
    but the loan matures after ``balloon_years``; whatever is still owed at
    that point is due as a single balloon payment.
    """

    principal: Number
    annual_rate_percent: Number
    amortization_years: Number
    balloon_years: Number


@dataclass(frozen=True)
class BalloonResult:
    monthly_payment: Decimal
    balloon_payment: Decimal
    total_payment: Decimal
    total_interest: Decimal
    term_months: int
    amortization_months: Optional[int] = None
