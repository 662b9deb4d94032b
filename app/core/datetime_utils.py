"""
Datetime utilities for timezone handling and calendar-month arithmetic
"""

from calendar import monthrange
from datetime import date, datetime, time, timedelta
from typing import Dict, Any, Tuple

def convert_timezone_aware_datetimes(data: Dict[str, Any], datetime_fields: list = None) -> Dict[str, Any]:
    """
    Convert timezone-aware datetimes to naive UTC for database compatibility

    Args:
        data: Dictionary containing data with potential datetime fields
        datetime_fields: List of field names that contain datetimes. If None, checks common fields.

    Returns:
        Dictionary with converted datetime fields
    """
    if datetime_fields is None:
        # Common datetime field names
        datetime_fields = ['transaction_date', 'created_at', 'updated_at']

    for field in datetime_fields:
        value = data.get(field)
        if value and isinstance(value, datetime) and value.tzinfo:
            data[field] = (value - value.utcoffset()).replace(tzinfo=None)

    return data

def add_months(d: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the target month's length"""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, monthrange(year, month)[1])
    return date(year, month, day)

def month_bounds(d: date) -> Tuple[date, date]:
    """First and last day of the month containing ``d``"""
    return date(d.year, d.month, 1), date(d.year, d.month, monthrange(d.year, d.month)[1])

def day_range(start: date, end: date) -> Tuple[datetime, datetime]:
    """
    Half-open datetime range covering the inclusive date range [start, end]

    Returns (start 00:00, day after end 00:00) so that callers filter with
    ``>= lower`` and ``< upper``.
    """
    return datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)
