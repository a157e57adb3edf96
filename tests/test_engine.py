"""
Tests for the amortization engine.
"""
import logging
from decimal import Decimal

import pytest

from emi_calc.data_models import LoanInputs
from emi_calc.engine import (
    InvalidInput,
    amortization_schedule,
    calculate_loan,
    sanitize_inputs,
)


def _float_emi(principal, annual_rate, years):
    r = annual_rate / 100 / 12
    n = years * 12
    factor = (1 + r) ** n
    return principal * r * factor / (factor - 1)


class TestCalculateLoan:
    """Test standard EMI and totals without extra payments."""

    def setup_method(self):
        self.home_loan = LoanInputs(principal=3_000_000, annual_rate_percent=8.5, term_years=20)

    def test_home_loan_emi(self):
        """Test the EMI of a 30 lakh loan at 8.5 % over 20 years."""
        result = calculate_loan(self.home_loan)

        assert float(result.monthly_payment) == pytest.approx(26_035.77, rel=1e-4)
        assert float(result.monthly_payment) == pytest.approx(_float_emi(3_000_000, 8.5, 20), rel=1e-9)

    def test_totals_without_extra_payment(self):
        """Test total payment is the EMI times the number of months."""
        result = calculate_loan(self.home_loan)

        assert result.total_payment == result.monthly_payment * 240
        assert result.total_interest == result.total_payment - Decimal(3_000_000)
        assert result.payoff_time == 240
        assert result.interest_saved == 0

    @pytest.mark.parametrize(
        "principal,rate,years",
        [(100_000, 5, 1), (250_000, 6.75, 15), (1_500_000, 12, 30), (50_000, 0.5, 3)],
    )
    def test_total_payment_matches_emi_times_periods(self, principal, rate, years):
        result = calculate_loan(LoanInputs(principal, rate, years))

        assert float(result.total_payment) == pytest.approx(float(result.monthly_payment) * years * 12)
        assert result.total_interest == result.total_payment - Decimal(principal)

    def test_zero_rate(self):
        """Test a zero interest rate divides the principal evenly."""
        result = calculate_loan(LoanInputs(principal=100_000, annual_rate_percent=0, term_years=10))

        assert result.monthly_payment == Decimal(100_000) / Decimal(120)
        assert float(result.monthly_payment) == pytest.approx(833.3333333)
        assert float(result.total_interest) == pytest.approx(0, abs=1e-9)
        assert result.payoff_time == 120

    def test_idempotent(self):
        """Test repeated calls give identical results."""
        inputs = LoanInputs(3_000_000, 8.5, 20, extra_payment=5_000)

        assert calculate_loan(inputs) == calculate_loan(inputs)

    def test_fractional_years_round_to_whole_months(self):
        result = calculate_loan(LoanInputs(120_000, 0, 1.5))

        assert result.payoff_time == 18
        assert result.monthly_payment == Decimal(120_000) / Decimal(18)

    def test_accepts_decimal_and_string_values(self):
        from_numbers = calculate_loan(LoanInputs(500_000, 7.25, 15))
        from_strings = calculate_loan(LoanInputs("5,00,000", "7.25", "15"))
        from_decimals = calculate_loan(LoanInputs(Decimal("500000"), Decimal("7.25"), Decimal("15")))

        assert from_numbers == from_strings == from_decimals


class TestExtraPayments:
    """Test accelerated payoff with an extra monthly payment."""

    def test_extra_payment_shortens_loan(self):
        """Test an extra 5,000 a month on the home loan."""
        result = calculate_loan(LoanInputs(3_000_000, 8.5, 20, extra_payment=5_000))

        assert result.payoff_time < 240
        assert result.interest_saved > 0
        assert result.total_interest == result.total_payment - Decimal(3_000_000)

    def test_interest_saved_is_difference_from_baseline(self):
        baseline = calculate_loan(LoanInputs(3_000_000, 8.5, 20))
        accelerated = calculate_loan(LoanInputs(3_000_000, 8.5, 20, extra_payment=5_000))

        assert accelerated.monthly_payment == baseline.monthly_payment
        assert accelerated.interest_saved == baseline.total_interest - accelerated.total_interest

    def test_monotonic_in_extra_payment(self):
        """Test larger extra payments never lengthen the loan or add interest."""
        results = [
            calculate_loan(LoanInputs(3_000_000, 8.5, 20, extra_payment=extra))
            for extra in (0, 500, 1_000, 5_000, 20_000, 100_000)
        ]

        for shorter, longer in zip(results[1:], results[:-1]):
            assert shorter.payoff_time <= longer.payoff_time
            assert shorter.total_interest <= longer.total_interest

    def test_extra_payment_covering_whole_loan(self):
        """Test an extra payment larger than the balance pays off in one month."""
        result = calculate_loan(LoanInputs(10_000, 12, 1, extra_payment=50_000))

        assert result.payoff_time == 1
        # one month of interest at 1 %
        assert float(result.total_payment) == pytest.approx(10_100)
        assert float(result.total_interest) == pytest.approx(100)

    def test_zero_rate_with_extra_payment(self):
        result = calculate_loan(LoanInputs(12_000, 0, 1, extra_payment=1_000))

        assert result.payoff_time == 6
        assert float(result.total_payment) == pytest.approx(12_000)
        assert float(result.total_interest) == pytest.approx(0, abs=1e-9)


class TestInputCoercion:
    """Test sanitizing and rejecting loan inputs."""

    def test_negative_values_use_absolute_value(self):
        negative = calculate_loan(LoanInputs(-200_000, -9, 10, extra_payment=-1_000))
        positive = calculate_loan(LoanInputs(200_000, 9, 10, extra_payment=1_000))

        assert negative == positive

    def test_term_floored_to_one_year(self):
        clean = sanitize_inputs(LoanInputs(100_000, 10, 0))

        assert clean.term_years == 1
        assert calculate_loan(LoanInputs(100_000, 10, 0)).payoff_time == 12
        assert calculate_loan(LoanInputs(100_000, 10, 0.25)).payoff_time == 12

    def test_missing_values_coerced(self):
        clean = sanitize_inputs(LoanInputs(100_000, None, None, None))

        assert clean.annual_rate_percent == 0
        assert clean.term_years == 1
        assert clean.extra_payment == 0

    def test_zero_principal_rejected(self):
        with pytest.raises(InvalidInput, match="greater than zero"):
            calculate_loan(LoanInputs(0, 8.5, 20))

    def test_missing_principal_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_loan(LoanInputs(None, 8.5, 20))

    @pytest.mark.parametrize("bad", ["abc", float("nan"), float("inf"), True, [1]])
    def test_non_numeric_rejected(self, bad):
        with pytest.raises(InvalidInput):
            calculate_loan(LoanInputs(bad, 8.5, 20))

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            calculate_loan(LoanInputs(0, 8.5, 20))

    def test_rejection_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="emi_calc.engine"):
            with pytest.raises(InvalidInput):
                calculate_loan(LoanInputs(0, 8.5, 20))

        assert "Rejected loan inputs" in caplog.text


class TestNumericLimits:
    """Test rates and terms at the edge of Decimal precision."""

    def test_rate_below_precision_uses_even_split(self):
        """Test a rate too small to change (1 + i)^n behaves like zero."""
        result = calculate_loan(LoanInputs(100_000, Decimal("1e-30"), 10))

        assert result.monthly_payment == Decimal(100_000) / Decimal(120)
        assert result.payoff_time == 120
        assert float(result.total_interest) == pytest.approx(0, abs=1e-9)

    def test_schedule_with_rate_below_precision(self):
        schedule = amortization_schedule(LoanInputs(100_000, Decimal("1e-30"), 10))

        assert len(schedule) == 120
        assert schedule[-1].ending_balance == 0

    def test_overflowing_rate_rejected(self, caplog):
        """Test (1 + i)^n beyond the Decimal exponent range is invalid input."""
        inputs = LoanInputs(100_000, Decimal("1e1000"), 100)

        with caplog.at_level(logging.WARNING, logger="emi_calc.engine"):
            with pytest.raises(InvalidInput, match="too large"):
                calculate_loan(inputs)
        with pytest.raises(InvalidInput, match="too large"):
            amortization_schedule(inputs)

        assert "Arithmetic failure" in caplog.text

    def test_term_longer_than_limit_rejected(self):
        with pytest.raises(InvalidInput, match="cannot exceed 100 years"):
            calculate_loan(LoanInputs(100_000, 1000, 400_000))
        with pytest.raises(InvalidInput, match="cannot exceed 100 years"):
            amortization_schedule(LoanInputs(100_000, 5, 1e8, extra_payment=0.01))

    def test_term_at_limit_accepted(self):
        result = calculate_loan(LoanInputs(100_000, 8, 100))

        assert result.payoff_time == 1200


class TestAmortizationSchedule:
    """Test the month-by-month payoff schedule."""

    def test_standard_schedule(self):
        inputs = LoanInputs(3_000_000, 8.5, 20)
        schedule = amortization_schedule(inputs)
        result = calculate_loan(inputs)

        assert len(schedule) == 240
        assert schedule[0].starting_balance == Decimal(3_000_000)
        assert schedule[-1].ending_balance == 0
        assert all(entry.extra_payment == 0 for entry in schedule)
        total = sum(float(entry.total_paid) for entry in schedule)
        assert total == pytest.approx(float(result.total_payment), abs=0.01)

    def test_schedule_matches_accelerated_result(self):
        inputs = LoanInputs(3_000_000, 8.5, 20, extra_payment=5_000)
        schedule = amortization_schedule(inputs)
        result = calculate_loan(inputs)

        assert len(schedule) == result.payoff_time
        assert sum(entry.total_paid for entry in schedule) == result.total_payment
        assert schedule[-1].ending_balance == 0

    def test_interest_paid_first(self):
        """Test each payment covers the month's interest before principal."""
        schedule = amortization_schedule(LoanInputs(500_000, 9, 10, extra_payment=2_000))
        rate = Decimal(9) / Decimal(100) / Decimal(12)

        for entry in schedule:
            assert entry.interest_payment == entry.starting_balance * rate
            assert entry.principal_payment == entry.total_paid - entry.interest_payment
        for previous, current in zip(schedule, schedule[1:]):
            assert current.starting_balance == previous.ending_balance
            assert current.period == previous.period + 1

    def test_final_payment_clamped(self):
        """Test the last payment is reduced to exactly what is owed."""
        schedule = amortization_schedule(LoanInputs(500_000, 9, 10, extra_payment=2_000))
        last = schedule[-1]

        assert last.total_paid == last.starting_balance + last.interest_payment
        assert last.total_paid <= schedule[0].total_paid
        assert last.extra_payment <= Decimal(2_000)

    def test_invalid_schedule_inputs(self):
        with pytest.raises(InvalidInput):
            amortization_schedule(LoanInputs(0, 5, 5))
