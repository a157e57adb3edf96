"""EMI and balloon loan calculations."""

from .data_models import BalloonInputs, BalloonResult, LoanInputs, LoanResult, ScheduleEntry
from .engine import (
    InvalidInput,
    amortization_schedule,
    calculate_balloon_loan,
    calculate_loan,
    remaining_balance,
)

__version__ = "0.1.0"
