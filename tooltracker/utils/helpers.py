"""
Helper utilities
"""
import math
from datetime import datetime, timezone

from dateutil.parser import isoparse
from flask import current_app, request


def utcnow():
    """
    Current UTC time as a naive datetime

    Timestamps are stored naive in UTC so SQLite and PostgreSQL agree.

    Returns:
        datetime: Current UTC time without tzinfo
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def utc_today():
    """Current UTC calendar date"""
    return utcnow().date()


def parse_date(date_string):
    """
    Parse an ISO-8601 date or datetime string to a date object

    Args:
        date_string (str): e.g. '2024-01-15' or '2024-01-15T09:00:00Z'

    Returns:
        date: Date object or None if invalid
    """
    if not isinstance(date_string, str) or not date_string.strip():
        return None
    try:
        parsed = isoparse(date_string.strip())
    except (ValueError, OverflowError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def format_date(value):
    """Render a date as YYYY-MM-DD, passing None through"""
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def format_timestamp(value):
    """Render a naive UTC datetime as an ISO-8601 string with a Z suffix"""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat() + 'Z'


def whole_days_between(start, end):
    """
    Whole days elapsed from start to end, rounded down

    Args:
        start (datetime | date): Earlier point
        end (datetime | date): Later point

    Returns:
        int: Floor of the elapsed time in days
    """
    return (end - start).days


def parse_bool_arg(value):
    """
    Interpret a 'true'/'false' query argument

    Returns:
        bool: True/False, or None when the argument is absent or anything else
    """
    if value == 'true':
        return True
    if value == 'false':
        return False
    return None


def get_pagination_args():
    """
    Read page/limit query arguments, clamped to the configured bounds

    Returns:
        tuple: (page, limit)
    """
    default_limit = current_app.config['ITEMS_PER_PAGE']
    max_limit = current_app.config['MAX_ITEMS_PER_PAGE']

    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)

    page = max(1, page)
    limit = min(max_limit, max(1, limit))
    return page, limit


def paginate_query(query, page, limit):
    """
    Paginate a SQLAlchemy query

    Returns:
        tuple: (items, total)
    """
    paginated = query.paginate(page=page, per_page=limit, error_out=False)
    return paginated.items, paginated.total


def mean(values):
    """Arithmetic mean, 0 for an empty sequence"""
    values = list(values)
    if not values:
        return 0
    return sum(values) / len(values)


def round_half_up(value):
    """Round to the nearest integer, halves away from zero for non-negative values"""
    return int(math.floor(value + 0.5))
