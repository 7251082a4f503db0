"""Date parsing utilities."""

from datetime import date, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

# Reporting periods accepted by get_date_range, in CLI flag order.
PERIODS = (
    "this-month",
    "this-quarter",
    "this-year",
    "last-month",
    "last-quarter",
    "last-year",
)


def _quarter_start(day: date) -> date:
    return day.replace(month=3 * ((day.month - 1) // 3) + 1, day=1)


def parse_date(date_str: str) -> date:
    """Parse a date string into a date object.

    Supports absolute dates ("2024-01-15", "January 15, 2024") and relative
    ones: "today", "yesterday", "tomorrow", and "last/this/next" followed by
    "month", "quarter" or "year", which resolve to the first day of that
    period.

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    for prefix, offset in (("last ", -1), ("this ", 0), ("next ", 1)):
        if not date_str.startswith(prefix):
            continue
        period = date_str[len(prefix):]
        if period == "month":
            return today.replace(day=1) + relativedelta(months=offset)
        if period == "quarter":
            return _quarter_start(today) + relativedelta(months=3 * offset)
        if period == "year":
            return today.replace(month=1, day=1) + relativedelta(years=offset)

    try:
        return date_parser.parse(date_str).date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def get_date_range(period: str) -> tuple[date, date]:
    """Get start and end dates for a reporting period.

    "this-*" periods end today; "last-*" periods cover the whole previous
    month, quarter or year.

    Args:
        period: One of PERIODS

    Returns:
        Tuple of (start_date, end_date)

    Raises:
        ValueError: If period string is not recognized
    """
    period = period.strip().lower()
    today = date.today()

    if period == "this-month":
        return today.replace(day=1), today
    if period == "this-quarter":
        return _quarter_start(today), today
    if period == "this-year":
        return today.replace(month=1, day=1), today

    if period == "last-month":
        end_date = today.replace(day=1) - timedelta(days=1)
        return end_date.replace(day=1), end_date
    if period == "last-quarter":
        end_date = _quarter_start(today) - timedelta(days=1)
        return _quarter_start(end_date), end_date
    if period == "last-year":
        end_date = today.replace(month=1, day=1) - timedelta(days=1)
        return end_date.replace(month=1, day=1), end_date

    raise ValueError(f"Unknown period: '{period}'. Supported periods: {', '.join(PERIODS)}")
