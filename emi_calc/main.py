"""Command‑line interface for the EMI calculator.

This module uses the ``click`` library to implement a multi‑command
interface. Users can compute a loan summary, print or export the payoff
schedule, size a balloon loan or compare several extra-payment amounts side
by side. Results can be printed to the terminal or exported to JSON/CSV
files.
"""

from __future__ import annotations

import csv
import json
import logging
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click

from . import config
from .data_models import BalloonInputs, LoanInputs, LoanResult, ScheduleEntry
from .engine import InvalidInput, amortization_schedule, calculate_balloon_loan, calculate_loan
from .formatter import print_balloon, print_comparison, print_schedule, print_summary, result_rows
from .utils import parse_amount

logger = logging.getLogger(__name__)

_console_handler: Optional[logging.Handler] = None


def setup_logging(log_level: str = config.LOG_LEVEL) -> None:
    """
    Configure logging for the command-line tool.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    global _console_handler
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level))

    # Replace our handler on repeated calls; it is bound to the current stderr
    if _console_handler is not None:
        root_logger.removeHandler(_console_handler)
    _console_handler = logging.StreamHandler(sys.stderr)
    _console_handler.setFormatter(logging.Formatter("%(name)s - %(levelname)s - %(message)s"))
    root_logger.addHandler(_console_handler)
    logger.debug("Logging configured at %s", log_level)


class AmountType(click.ParamType):
    """Click parameter accepting amounts such as ``500000``, ``30,00,000`` or ``3m``."""

    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            return parse_amount(str(value))
        except ValueError:
            self.fail(f"Invalid amount: {value}", param, ctx)


AMOUNT = AmountType()


def _run(func, *args):
    """Call an engine function, turning ``InvalidInput`` into a click error."""
    try:
        return func(*args)
    except InvalidInput as exc:
        raise click.ClickException(f"Calculation failed: {exc}") from exc


def result_to_dict(result: LoanResult) -> Dict[str, Any]:
    return {
        "monthly_payment": float(result.monthly_payment),
        "total_payment": float(result.total_payment),
        "total_interest": float(result.total_interest),
        "payoff_time": result.payoff_time,
        "interest_saved": float(result.interest_saved),
    }


def serialize_schedule(schedule: List[ScheduleEntry]) -> List[Dict[str, Any]]:
    return [
        {
            "period": e.period,
            "starting_balance": float(e.starting_balance),
            "payment": float(e.payment),
            "extra_payment": float(e.extra_payment),
            "principal": float(e.principal_payment),
            "interest": float(e.interest_payment),
            "ending_balance": float(e.ending_balance),
        }
        for e in schedule
    ]


def export_to_json(path: Path, schedule: List[ScheduleEntry], result: LoanResult) -> None:
    """Export schedule and summary to a JSON file."""
    data = {"summary": result_to_dict(result), "schedule": serialize_schedule(schedule)}
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def export_to_csv(path: Path, schedule: List[ScheduleEntry]) -> None:
    """Export schedule to a CSV file."""
    header = [
        "Period",
        "Starting_Balance",
        "Payment",
        "Extra_Payment",
        "Principal",
        "Interest",
        "Ending_Balance",
    ]
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(header)
        for e in schedule:
            writer.writerow(
                [
                    e.period,
                    f"{e.starting_balance:.2f}",
                    f"{e.payment:.2f}",
                    f"{e.extra_payment:.2f}",
                    f"{e.principal_payment:.2f}",
                    f"{e.interest_payment:.2f}",
                    f"{e.ending_balance:.2f}",
                ]
            )


def loan_options(func):
    """Attach the options shared by every single-loan command."""
    options = [
        click.option("--principal", "-p", "principal", required=True, type=AMOUNT, help="Loan amount"),
        click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)"),
        click.option("--years", "-y", "years", required=True, type=float, help="Loan tenure in years"),
        click.option("--extra", "-e", "extra", type=AMOUNT, default="0", show_default=True,
                     help="Extra amount paid towards principal every month"),
        click.option("--currency", "-c", "currency", default=config.DEFAULT_CURRENCY, show_default=True,
                     type=click.Choice(sorted(config.CURRENCY_OPTIONS), case_sensitive=False),
                     help="Currency used when printing amounts"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
@click.option("--log-level", "log_level", default=config.LOG_LEVEL, show_default=True,
              type=click.Choice(config.LOG_LEVELS, case_sensitive=False), help="Logging verbosity")
def cli(log_level: str) -> None:
    """A command‑line EMI and balloon loan calculator."""
    setup_logging(log_level.upper())


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json)")
def summary(
    principal: Decimal,
    rate: float,
    years: float,
    extra: Decimal,
    currency: str,
    output: Optional[str],
) -> None:
    """Compute and print the EMI, totals and extra-payment savings."""
    inputs = LoanInputs(principal, rate, years, extra)
    result = _run(calculate_loan, inputs)
    if output:
        path = Path(output)
        if path.suffix.lower() != ".json":
            raise click.BadParameter("Summary export must use .json extension")
        with path.open("w", encoding="utf-8") as f:
            json.dump({"summary": result_to_dict(result)}, f, indent=2)
        click.echo(f"Summary exported to {path}")
    else:
        print_summary(result_rows(inputs, result), currency)


@cli.command()
@loan_options
@click.option("--output", "output", type=str, help="Output file path (.json or .csv)")
@click.option("--max-rows", "max_rows", type=int, default=config.MAX_SCHEDULE_ROWS, show_default=True,
              help="Rows printed to the terminal")
def schedule(
    principal: Decimal,
    rate: float,
    years: float,
    extra: Decimal,
    currency: str,
    output: Optional[str],
    max_rows: int,
) -> None:
    """Compute and print the month-by-month payoff schedule."""
    inputs = LoanInputs(principal, rate, years, extra)
    result = _run(calculate_loan, inputs)
    schedule_entries = _run(amortization_schedule, inputs)
    if output:
        path = Path(output)
        if path.suffix.lower() == ".json":
            export_to_json(path, schedule_entries, result)
        elif path.suffix.lower() == ".csv":
            export_to_csv(path, schedule_entries)
        else:
            raise click.BadParameter("Unsupported output format; use .json or .csv")
        click.echo(f"Schedule exported to {path}")
        return
    print_summary(result_rows(inputs, result), currency)
    # Limit schedule length printed to avoid flooding the terminal
    if len(schedule_entries) > max_rows:
        click.echo(f"Schedule has {len(schedule_entries)} rows; showing first {max_rows} rows.")
        print_schedule(schedule_entries[:max_rows])
    else:
        print_schedule(schedule_entries)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, type=AMOUNT, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--amortization-years", "amortization_years", required=True, type=float,
              help="Years the monthly payment is amortized over")
@click.option("--balloon-years", "balloon_years", required=True, type=float,
              help="Years until the balloon payment is due")
@click.option("--currency", "-c", "currency", default=config.DEFAULT_CURRENCY, show_default=True,
              type=click.Choice(sorted(config.CURRENCY_OPTIONS), case_sensitive=False),
              help="Currency used when printing amounts")
def balloon(
    principal: Decimal,
    rate: float,
    amortization_years: float,
    balloon_years: float,
    currency: str,
) -> None:
    """Compute the monthly payment and final balloon payment of a balloon loan."""
    inputs = BalloonInputs(principal, rate, amortization_years, balloon_years)
    print_balloon(_run(calculate_balloon_loan, inputs), currency)


@cli.command()
@click.option("--principal", "-p", "principal", required=True, type=AMOUNT, help="Loan amount")
@click.option("--rate", "-r", "rate", required=True, type=float, help="Annual interest rate (percent)")
@click.option("--years", "-y", "years", required=True, type=float, help="Loan tenure in years")
@click.option("--extra", "-e", "extras", type=AMOUNT, multiple=True, required=True,
              help="Extra monthly payment to compare; repeat for each scenario")
@click.option("--currency", "-c", "currency", default=config.DEFAULT_CURRENCY, show_default=True,
              type=click.Choice(sorted(config.CURRENCY_OPTIONS), case_sensitive=False),
              help="Currency used when printing amounts")
def compare(principal: Decimal, rate: float, years: float, extras: Tuple[Decimal, ...], currency: str) -> None:
    """Compare the same loan under several extra-payment amounts.

    Example:

        emi-calc compare -p 3m -r 8.5 -y 20 -e 0 -e 5000 -e 10k
    """
    results = [_run(calculate_loan, LoanInputs(principal, rate, years, extra)) for extra in extras]
    labels = [f"extra {extra:,.0f}" for extra in extras]
    print_comparison(labels, results, currency)


if __name__ == "__main__":
    cli()
