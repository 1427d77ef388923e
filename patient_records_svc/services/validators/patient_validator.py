"""
Validation utilities for patient data.

This module contains the field rules shared by the add and edit operations.
"""
import re
from datetime import date, datetime, timezone
from typing import Optional, Tuple

from core.datetime_utils import add_years, format_date, start_of_day_utc, utc_now
from core.exceptions import InvalidBirthDateError

# Earliest accepted birth date (inclusive)
MIN_BIRTH_DATE = datetime(1880, 1, 1, tzinfo=timezone.utc)

# How far past the current moment a birth date may lie (exclusive)
MAX_BIRTH_DATE_YEARS_AHEAD = 1

_NON_DIGITS = re.compile(r"[^0-9]")


def normalize_pension_number(value: Optional[str]) -> str:
    """
    Strip every non-digit character from a pension number.

    Example:
        >>> normalize_pension_number("123-456-789 01")
        '12345678901'
    """
    if value is None:
        return ""
    return _NON_DIGITS.sub("", value)


def birth_date_bounds(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """
    Get the accepted birth date range as [lower, upper).

    Args:
        now: Current moment; defaults to utc_now().

    Returns:
        Tuple of (inclusive lower bound, exclusive upper bound), both UTC.
    """
    now = now or utc_now()
    return MIN_BIRTH_DATE, add_years(now, MAX_BIRTH_DATE_YEARS_AHEAD)


def is_valid_birth_date(value: Optional[date], now: Optional[datetime] = None) -> bool:
    """Check a birth date against the accepted range; None is never valid."""
    if value is None:
        return False
    lower, upper = birth_date_bounds(now)
    return lower <= start_of_day_utc(value) < upper


def validate_birth_date(value: Optional[date], now: Optional[datetime] = None) -> date:
    """
    Validate that a birth date lies in the accepted range.

    Args:
        value: Submitted birth date.
        now: Current moment; defaults to utc_now().

    Returns:
        date: The validated birth date.

    Raises:
        InvalidBirthDateError: If the date is missing or out of range.
    """
    if is_valid_birth_date(value, now):
        return value

    lower, upper = birth_date_bounds(now)
    raise InvalidBirthDateError(
        detail=(
            f"Birth date must be between {format_date(lower.date())} "
            f"and {format_date(upper.date())}"
        ),
        value=value.isoformat() if value else None,
    )
