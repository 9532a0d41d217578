from datetime import date, datetime, timedelta
from typing import Optional, Union

def add_days(start: Union[date, datetime], days: float) -> date:
    """Add a (possibly fractional) number of days and return the date part.

    Args:
        start: Start date or datetime
        days: Days to add

    Returns:
        Resulting date
    """
    if isinstance(start, datetime):
        return (start + timedelta(days=days)).date()
    return start + timedelta(days=int(days))

def convert_to_date(value: Optional[Union[str, date, datetime]]) -> Optional[date]:
    """Convert an ISO string, date or datetime to a date.

    Args:
        value: Value to convert

    Returns:
        Date object or None
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f"Invalid date format: {value}. Expected YYYY-MM-DD")
