"""
Settings for the EMI calculator.

Values are module-level constants. The currency, schedule row limit and log
level may be overridden through environment variables; values that cannot
be used fall back to the defaults.
"""

import os

# ── Amortization ─────────────────────────────────────────────────────
PERIODS_PER_YEAR = 12
DECIMAL_PRECISION = 28
RESIDUAL_TOLERANCE = "0.005"   # balances below half a cent count as paid off
MAX_TERM_YEARS = 100           # longer terms are rejected as invalid input

# ── Display ──────────────────────────────────────────────────────────
CURRENCY_OPTIONS = {
    'INR': {'label': 'Indian rupee', 'prefix': '₹', 'suffix': ''},
    'USD': {'label': 'US dollar', 'prefix': '$', 'suffix': ''},
    'EUR': {'label': 'Euro', 'prefix': '€', 'suffix': ''},
    'GBP': {'label': 'British pound', 'prefix': '£', 'suffix': ''},
    'PLN': {'label': 'Polish złoty', 'prefix': '', 'suffix': ' zł'},
}
DEFAULT_CURRENCY = os.environ.get("EMI_CALC_CURRENCY", "INR").upper()
if DEFAULT_CURRENCY not in CURRENCY_OPTIONS:
    DEFAULT_CURRENCY = "INR"

try:
    MAX_SCHEDULE_ROWS = int(os.environ.get("EMI_CALC_MAX_ROWS", "120"))
except ValueError:
    MAX_SCHEDULE_ROWS = 120
if MAX_SCHEDULE_ROWS < 1:
    MAX_SCHEDULE_ROWS = 120

# ── Logging ──────────────────────────────────────────────────────────
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LOG_LEVEL = os.environ.get("EMI_CALC_LOG_LEVEL", "INFO").upper()
if LOG_LEVEL not in LOG_LEVELS:
    LOG_LEVEL = "INFO"
