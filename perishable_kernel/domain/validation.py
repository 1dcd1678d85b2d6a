"""
Boundary validation helpers.

Pure checks with no I/O.  Used at the CLI / request boundary to turn raw
quantity and date values into typed ones, and inside the kernel to defend
against non-integer or negative quantities that slip past the boundary.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from perishable_kernel.exceptions import ValidationError

_DATE_FORMAT = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

# Largest value a BigInteger column holds
MAX_QUANTITY = 2**63 - 1


def parse_quantity(value: Any, name: str = "quantity") -> int:
    """Accept a non-negative integer (``bool`` excluded) or its decimal string."""
    if isinstance(value, str) and re.fullmatch(r"[+-]?[0-9]+", value.strip()):
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(name, value, "quantity provided is not an integer")
    if value < 0:
        raise ValidationError(name, value, "quantity should be positive")
    if value > MAX_QUANTITY:
        raise ValidationError(name, value, f"quantity exceeds the maximum of {MAX_QUANTITY}")
    return value


def require_positive_quantity(value: Any, name: str = "quantity") -> int:
    """Kernel-side guard: mutations need a strictly positive integer."""
    quantity = parse_quantity(value, name)
    if quantity == 0:
        raise ValidationError(name, value, "quantity should be positive")
    return quantity


def parse_date(value: Any, name: str = "date") -> date:
    """Accept a ``date`` or a ``YYYY-MM-DD`` string naming a real calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_FORMAT.fullmatch(value):
        raise ValidationError(name, value, "date provided is not in valid format YYYY-MM-DD")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(name, value, "date provided is not numerically valid") from None


def parse_transaction(quantity: Any, day: Any) -> tuple[int, date]:
    """Validate the body of a purchase or sell request."""
    return parse_quantity(quantity), parse_date(day)


def parse_analytics_range(start: Any, end: Any) -> tuple[date, date]:
    """Validate an analytics query; ``start`` may not fall after ``end``."""
    start_date = parse_date(start, "start_date")
    end_date = parse_date(end, "end_date")
    if start_date > end_date:
        raise ValidationError(
            "start_date", start, f"start_date is after end_date {end_date.isoformat()}"
        )
    return start_date, end_date
