"""Core calculation engine for the EMI calculator.

This module implements the financial logic behind the loan pages: the equated
monthly installment (EMI) for a fully amortizing loan, the aggregate totals,
and the accelerated payoff schedule produced by an extra monthly payment. It
also sizes balloon loans, where the installment is based on a long
amortization period but the loan matures early and the remaining balance is
due in one payment.

Every function here is pure. Inputs are coerced and validated on the way in
and anything that would produce NaN or Infinity is rejected with
``InvalidInput`` instead.
"""

from __future__ import annotations

import functools
import logging
from decimal import ROUND_HALF_UP, Decimal, DivisionByZero, InvalidOperation, Overflow, getcontext
from typing import List, Tuple

from . import config
from .data_models import BalloonInputs, BalloonResult, LoanInputs, LoanResult, ScheduleEntry
from .utils import to_decimal

getcontext().prec = config.DECIMAL_PRECISION  # increase precision for financial calculations

logger = logging.getLogger(__name__)

PERIODS_PER_YEAR = config.PERIODS_PER_YEAR
_ZERO = Decimal("0")
_TOLERANCE = Decimal(config.RESIDUAL_TOLERANCE)
MAX_TERM_YEARS = Decimal(config.MAX_TERM_YEARS)


class InvalidInput(ValueError):
    """Raised when loan parameters cannot produce a meaningful result."""


def _finite_result(func):
    """Report decimal arithmetic failures from ``func`` as ``InvalidInput``."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (DivisionByZero, InvalidOperation, Overflow) as exc:
            logger.warning("Arithmetic failure in %s: %r", func.__name__, exc)
            raise InvalidInput(
                "Interest rate and term are too large to compute a finite result"
            ) from exc

    return wrapper


def _coerce(value, name: str) -> Decimal:
    try:
        return to_decimal(value).copy_abs()
    except ValueError as exc:
        raise InvalidInput(f"{name} must be a finite number") from exc


def _periods(years: Decimal) -> int:
    """Return the number of whole monthly periods in ``years``."""
    if years > MAX_TERM_YEARS:
        logger.warning("Rejected loan term: %s years", years)
        raise InvalidInput(f"Loan term cannot exceed {config.MAX_TERM_YEARS} years")
    return int((years * PERIODS_PER_YEAR).to_integral_value(rounding=ROUND_HALF_UP))


def _periodic_rate(annual_rate_percent: Decimal) -> Decimal:
    return annual_rate_percent / Decimal(100) / Decimal(PERIODS_PER_YEAR)


def sanitize_inputs(inputs: LoanInputs) -> LoanInputs:
    """Return a copy of ``inputs`` with every field coerced to a usable value.

    Negative numbers are replaced by their absolute value, missing values
    become zero and the term is floored to one year. The engine applies
    this itself, so callers that already sanitize lose nothing.
    """
    return LoanInputs(
        principal=_coerce(inputs.principal, "Principal"),
        annual_rate_percent=_coerce(inputs.annual_rate_percent, "Interest rate"),
        term_years=max(_coerce(inputs.term_years, "Loan term"), Decimal(1)),
        extra_payment=_coerce(inputs.extra_payment, "Extra payment"),
    )


def _prepare(inputs: LoanInputs) -> Tuple[Decimal, Decimal, int, Decimal]:
    clean = sanitize_inputs(inputs)
    principal = clean.principal
    n = _periods(clean.term_years)
    if principal <= 0:
        logger.warning("Rejected loan inputs: principal=%s", inputs.principal)
        raise InvalidInput("Loan amount must be greater than zero")
    if n <= 0:
        logger.warning("Rejected loan inputs: term_years=%s", inputs.term_years)
        raise InvalidInput("Loan term must be at least one month")
    return principal, _periodic_rate(clean.annual_rate_percent), n, clean.extra_payment


def _calculate_annuity_payment(principal: Decimal, rate_per_month: Decimal, term: int) -> Decimal:
    """Return the annuity (equal installment) monthly payment for a loan.

    The formula is:

        payment = P * (i * (1 + i)^n) / ((1 + i)^n - 1)

    where ``P`` is the principal, ``i`` is the monthly interest rate and
    ``n`` is the number of payments. When the interest rate is zero, the
    payment simplifies to ``P / n``.
    """
    if term <= 0:
        raise InvalidInput("Term must be positive")
    if rate_per_month == 0:
        return principal / Decimal(term)
    factor = (1 + rate_per_month) ** term
    # rates below the working precision leave factor at exactly 1
    if factor == 1:
        return principal / Decimal(term)
    return principal * (rate_per_month * factor) / (factor - 1)


def _simulate(
    principal: Decimal,
    rate_per_month: Decimal,
    monthly_payment: Decimal,
    extra_payment: Decimal,
    term: int,
) -> List[ScheduleEntry]:
    """Walk the loan month by month until the balance is cleared.

    Interest accrues on the opening balance and is paid first; the rest of
    the installment plus the extra payment reduces principal. The final
    payment is cut down to exactly what is owed. The schedule never runs
    past ``term`` periods: any rounding residual left at that point is
    folded into the last payment.
    """
    schedule: List[ScheduleEntry] = []
    balance = principal
    period = 1
    while balance > 0 and period <= term:
        interest_payment = balance * rate_per_month
        total_due = balance + interest_payment
        scheduled = monthly_payment
        extra = extra_payment
        if scheduled + extra >= total_due or period == term:
            extra = min(extra, max(total_due - scheduled, _ZERO))
            scheduled = total_due - extra
        principal_payment = scheduled + extra - interest_payment
        ending_balance = balance - principal_payment

        # Round very small residuals down to zero so they do not create
        # phantom extra periods.
        if ending_balance.copy_abs() < _TOLERANCE:
            ending_balance = _ZERO

        schedule.append(
            ScheduleEntry(
                period=period,
                starting_balance=balance,
                payment=scheduled,
                extra_payment=extra,
                principal_payment=principal_payment,
                interest_payment=interest_payment,
                ending_balance=ending_balance,
            )
        )
        balance = ending_balance
        period += 1
    return schedule


@_finite_result
def amortization_schedule(inputs: LoanInputs) -> List[ScheduleEntry]:
    """Compute the month-by-month payoff schedule for a loan.

    The schedule honours ``inputs.extra_payment``; without one it is the
    standard schedule of ``term_years * 12`` equal installments. The last
    entry always has an ending balance of zero.
    """
    principal, rate_per_month, term, extra = _prepare(inputs)
    monthly_payment = _calculate_annuity_payment(principal, rate_per_month, term)
    return _simulate(principal, rate_per_month, monthly_payment, extra, term)


@_finite_result
def calculate_loan(inputs: LoanInputs) -> LoanResult:
    """Compute the EMI, totals and extra-payment savings for a loan.

    Parameters
    ----------
    inputs: LoanInputs
        Principal, annual rate in percent, term in years and an optional
        extra monthly payment. Values are sanitized before use.

    Returns
    -------
    LoanResult
        ``monthly_payment`` is the standard installment. With no extra
        payment the totals are the closed-form ``monthly_payment * n``;
        otherwise they come from simulating the accelerated schedule.

    Raises
    ------
    InvalidInput
        If the principal is zero after coercion, or a value is not a finite
        number.
    """
    principal, rate_per_month, term, extra = _prepare(inputs)
    monthly_payment = _calculate_annuity_payment(principal, rate_per_month, term)
    baseline_total = monthly_payment * term
    baseline_interest = baseline_total - principal

    if extra == 0:
        result = LoanResult(
            monthly_payment=monthly_payment,
            total_payment=baseline_total,
            total_interest=baseline_interest,
            payoff_time=term,
            interest_saved=_ZERO,
        )
    else:
        schedule = _simulate(principal, rate_per_month, monthly_payment, extra, term)
        total_payment = sum((entry.total_paid for entry in schedule), _ZERO)
        total_interest = total_payment - principal
        result = LoanResult(
            monthly_payment=monthly_payment,
            total_payment=total_payment,
            total_interest=total_interest,
            payoff_time=len(schedule),
            interest_saved=baseline_interest - total_interest,
        )

    logger.debug(
        "Loan calculation: principal=%s, monthly_rate=%s, term=%s, extra=%s -> emi=%s, payoff=%s",
        principal, rate_per_month, term, extra, result.monthly_payment, result.payoff_time,
    )
    return result


@_finite_result
def remaining_balance(
    principal: Decimal,
    annual_rate_percent: Decimal,
    amortization_months: int,
    payments_made: int,
) -> Decimal:
    """Return the balance still owed after ``payments_made`` standard installments.

    Uses the closed form

        B_k = P * (1 + i)^k - M * ((1 + i)^k - 1) / i

    (``P - M * k`` when the rate is zero or too small to move ``(1 + i)^k``).
    Once every installment has been made the balance is zero; sub-cent
    residuals are reported as zero too.
    """
    principal = _coerce(principal, "Principal")
    rate_per_month = _periodic_rate(_coerce(annual_rate_percent, "Interest rate"))
    if payments_made >= amortization_months:
        return _ZERO
    if payments_made <= 0:
        return principal
    payment = _calculate_annuity_payment(principal, rate_per_month, amortization_months)
    growth = (1 + rate_per_month) ** payments_made
    if growth == 1:
        balance = principal - payment * payments_made
    else:
        balance = principal * growth - payment * (growth - 1) / rate_per_month
    if balance < _TOLERANCE:
        return _ZERO
    return balance


@_finite_result
def calculate_balloon_loan(inputs: BalloonInputs) -> BalloonResult:
    """Size the installment and the final balloon payment of a balloon loan.

    The monthly payment fully amortizes the principal over
    ``amortization_years``. The loan matures after ``balloon_years``, at which
    point the outstanding balance falls due as the balloon payment.
    """
    principal = _coerce(inputs.principal, "Principal")
    annual_rate = _coerce(inputs.annual_rate_percent, "Interest rate")
    amortization_years = max(_coerce(inputs.amortization_years, "Amortization period"), Decimal(1))
    balloon_years = max(_coerce(inputs.balloon_years, "Balloon term"), Decimal(1))
    if principal <= 0:
        logger.warning("Rejected balloon inputs: principal=%s", inputs.principal)
        raise InvalidInput("Loan amount must be greater than zero")
    if balloon_years > amortization_years:
        logger.warning(
            "Rejected balloon inputs: balloon_years=%s > amortization_years=%s",
            inputs.balloon_years, inputs.amortization_years,
        )
        raise InvalidInput("Balloon term cannot be longer than the amortization period")

    amortization_months = _periods(amortization_years)
    term_months = _periods(balloon_years)
    monthly_payment = _calculate_annuity_payment(
        principal, _periodic_rate(annual_rate), amortization_months
    )
    balloon_payment = remaining_balance(principal, annual_rate, amortization_months, term_months)
    total_payment = monthly_payment * term_months + balloon_payment

    logger.debug(
        "Balloon calculation: principal=%s, rate=%s, amortization=%s, term=%s -> balloon=%s",
        principal, annual_rate, amortization_months, term_months, balloon_payment,
    )
    return BalloonResult(
        monthly_payment=monthly_payment,
        balloon_payment=balloon_payment,
        total_payment=total_payment,
        total_interest=total_payment - principal,
        term_months=term_months,
        amortization_months=amortization_months,
    )
