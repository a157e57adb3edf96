"""Utility functions for the EMI calculator.

This module provides helpers for turning user input (numbers typed on a form
or passed on the command line) into ``Decimal`` values. Amounts may carry
thousands separators and ``k``/``m`` shorthand suffixes.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, getcontext

from . import config

getcontext().prec = config.DECIMAL_PRECISION


def decimal_from_str(value: str) -> Decimal:
    """Convert a numeric string into a ``Decimal``.

    The function strips any commas and underscores and handles both integer
    and float-like strings. It raises ``ValueError`` if conversion fails or
    the value is not finite.
    """
    try:
        cleaned = value.strip().replace(",", "").replace("_", "")
        result = Decimal(cleaned)
    except (InvalidOperation, AttributeError) as exc:
        raise ValueError(f"Invalid numeric value: {value}") from exc
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value}")
    return result


def to_decimal(value) -> Decimal:
    """Coerce ``value`` to a finite ``Decimal``.

    ``None`` and empty strings become zero, mirroring an untouched form
    field. Floats go through ``str`` so ``0.1`` stays ``Decimal("0.1")``.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(repr(value))
    elif isinstance(value, str):
        if not value.strip():
            return Decimal("0")
        return decimal_from_str(value)
    else:
        raise ValueError(f"Invalid numeric value: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return result


def parse_amount(value: str) -> Decimal:
    """Parse a numeric string with optional suffixes.

    Accepts plain numbers ("500000"), grouped numbers ("30,00,000") and
    shorthand with ``k``/``m`` suffixes (e.g., "500k" meaning 500_000).
    """
    cleaned = value.strip().lower()
    factor = Decimal(1)
    if cleaned.endswith("k"):
        factor = Decimal(1_000)
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal(1_000_000)
        cleaned = cleaned[:-1]
    return decimal_from_str(cleaned) * factor
