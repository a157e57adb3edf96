"""Output helpers for the EMI calculator.

This module turns engine results into what a calculator page or terminal
shows: labelled result rows (currency, percentage or count values), plus
plain-text summary and schedule tables. Nothing here feeds back into the
engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, List, Optional

import click

from . import config
from .data_models import BalloonResult, LoanInputs, LoanResult, ScheduleEntry
from .engine import PERIODS_PER_YEAR, sanitize_inputs


@dataclass(frozen=True)
class ResultRow:
    """A single labelled value on a calculator page."""

    label: str
    value: Decimal
    kind: str  # "currency", "percentage" or "number"
    tooltip: str = ""
    highlight: bool = False


def format_currency(value: Decimal, currency: Optional[str] = None) -> str:
    """Format ``value`` with two decimals and the currency's prefix/suffix."""
    code = (currency or config.DEFAULT_CURRENCY).upper()
    meta = config.CURRENCY_OPTIONS.get(code, config.CURRENCY_OPTIONS[config.DEFAULT_CURRENCY])
    return f"{meta['prefix']}{value:,.2f}{meta['suffix']}"


def format_value(row: ResultRow, currency: Optional[str] = None) -> str:
    if row.kind == "currency":
        return format_currency(row.value, currency)
    if row.kind == "percentage":
        return f"{row.value:.2f}%"
    return f"{row.value:,}"


def result_rows(inputs: LoanInputs, result: LoanResult) -> List[ResultRow]:
    """Build the result rows shown for a home-loan calculation.

    The extra-payment rows (interest saved and years cut from the tenure)
    only appear when an extra payment was entered.
    """
    clean = sanitize_inputs(inputs)
    rows = [
        ResultRow("Monthly EMI", result.monthly_payment, "currency",
                  "Monthly installment you need to pay", highlight=True),
        ResultRow("Total Payment", result.total_payment, "currency",
                  "Total amount you will pay over the loan tenure"),
        ResultRow("Total Interest", result.total_interest, "currency",
                  "Total interest paid over the loan tenure"),
        ResultRow("Interest as % of Principal", result.total_interest / clean.principal * 100,
                  "percentage", "Interest as percentage of loan amount"),
    ]
    if clean.extra_payment > 0:
        original_months = clean.term_years * PERIODS_PER_YEAR
        months_reduced = max(Decimal(0), original_months - result.payoff_time)
        years_reduced = (months_reduced / PERIODS_PER_YEAR).to_integral_value(rounding=ROUND_HALF_UP)
        rows.append(ResultRow("Interest Saved", result.interest_saved, "currency",
                              "Interest saved with extra payments"))
        rows.append(ResultRow("Time Reduced", years_reduced, "number",
                              "Years reduced from original tenure"))
    return rows


def print_summary(rows: Iterable[ResultRow], currency: Optional[str] = None) -> None:
    """Print result rows in a human‑readable format."""
    click.echo("Summary")
    click.echo("-" * 72)
    for row in rows:
        click.echo(f"{row.label:28s}: {format_value(row, currency)}")
    click.echo("-" * 72)


def print_balloon(result: BalloonResult, currency: Optional[str] = None) -> None:
    click.echo("Balloon loan")
    click.echo("-" * 72)
    click.echo(f"{'Monthly payment':28s}: {format_currency(result.monthly_payment, currency)}")
    click.echo(f"{'Balloon payment':28s}: {format_currency(result.balloon_payment, currency)}")
    click.echo(f"{'Due after':28s}: {result.term_months} months")
    click.echo(f"{'Total payment':28s}: {format_currency(result.total_payment, currency)}")
    click.echo(f"{'Total interest':28s}: {format_currency(result.total_interest, currency)}")
    click.echo("-" * 72)


def print_schedule(schedule: Iterable[ScheduleEntry]) -> None:
    """Print the payoff schedule as a simple tab-separated table."""
    headers = ["Period", "StartBal", "Payment", "Extra", "Principal", "Interest", "EndBal"]
    click.echo("\t".join(headers))
    for entry in schedule:
        row = [
            str(entry.period),
            f"{entry.starting_balance:.2f}",
            f"{entry.payment:.2f}",
            f"{entry.extra_payment:.2f}",
            f"{entry.principal_payment:.2f}",
            f"{entry.interest_payment:.2f}",
            f"{entry.ending_balance:.2f}",
        ]
        click.echo("\t".join(row))


def print_comparison(labels: List[str], results: List[LoanResult], currency: Optional[str] = None) -> None:
    """Print loan results side by side, one column per scenario."""
    click.echo("Comparison")
    click.echo("=" * 72)
    click.echo(f"{'Metric':20s}" + "".join(f"{label:>18s}" for label in labels))
    for title, attr in (
        ("Monthly EMI", "monthly_payment"),
        ("Total payment", "total_payment"),
        ("Total interest", "total_interest"),
        ("Interest saved", "interest_saved"),
    ):
        cells = "".join(f"{format_currency(getattr(r, attr), currency):>18s}" for r in results)
        click.echo(f"{title:20s}{cells}")
    click.echo(f"{'Payoff (months)':20s}" + "".join(f"{r.payoff_time:>18d}" for r in results))
    click.echo("=" * 72)
