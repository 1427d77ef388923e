"""
UTC-first date and datetime utilities for Patient Records Service.

Design Principles:
- Internal processing: timezone-aware datetimes in UTC
- Database storage: ISO 8601 strings (SQLite stores dates as TEXT)
- Calendar dates (birth dates) carry no time zone; they are compared
  as midnight UTC of that day

Usage:
    from core.datetime_utils import utc_now, add_years, start_of_day_utc

    upper_bound = add_years(utc_now(), 1)
"""
import logging
from datetime import date, datetime, time, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)


# =============================================================================
# CORE UTILITIES
# =============================================================================

def utc_now() -> datetime:
    """Get current datetime in UTC with timezone info."""
    return datetime.now(timezone.utc)


def to_utc(dt: datetime) -> datetime:
    """
    Convert a datetime to UTC.

    - If datetime is naive (no timezone), assumes it's already UTC
    - If datetime has timezone, converts to UTC
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def start_of_day_utc(value: date) -> datetime:
    """Midnight UTC at the start of the given calendar date."""
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def add_years(dt: datetime, years: int) -> datetime:
    """
    Shift a datetime by whole calendar years.

    February 29 maps to February 28 when the target year is not a leap year.

    Example:
        >>> add_years(datetime(2024, 2, 29, tzinfo=timezone.utc), 1)
        datetime.datetime(2025, 2, 28, 0, 0, tzinfo=datetime.timezone.utc)
    """
    try:
        return dt.replace(year=dt.year + years)
    except ValueError:
        return dt.replace(year=dt.year + years, day=28)


# =============================================================================
# DATABASE HELPERS
# =============================================================================

def to_db_date(value: Optional[date]) -> Optional[str]:
    """Convert a calendar date to its ISO string for SQLite storage."""
    return value.isoformat() if value is not None else None


def from_db_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO date string read from SQLite; None or invalid gives None."""
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError as e:
        logger.warning(f"Failed to parse date '{value}': {e}")
        return None


def from_db_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO datetime string read from SQLite into a UTC datetime."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError as e:
        logger.warning(f"Failed to parse datetime '{value}': {e}")
        return None


# =============================================================================
# FORMATTING
# =============================================================================

def format_date(value: Optional[date]) -> str:
    """Format a calendar date for display as DD.MM.YYYY; None gives ''."""
    return value.strftime("%d.%m.%Y") if value is not None else ""


def format_for_display(dt: Optional[datetime], include_time: bool = True) -> str:
    """Format a datetime for human-readable display in UTC."""
    if dt is None:
        return ""
    utc_dt = to_utc(dt)
    if include_time:
        return utc_dt.strftime("%d.%m.%Y %H:%M UTC")
    return utc_dt.strftime("%d.%m.%Y")
