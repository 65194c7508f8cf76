"""Utilities package"""
from .validators import (
    validate_uuid,
    validate_tin,
    validate_company_name,
    validate_tool_type,
    validate_date_string,
)
from .helpers import utcnow, utc_today, parse_date, format_date, format_timestamp
from .responses import success_response, error_response, paginated_response

__all__ = [
    'validate_uuid',
    'validate_tin',
    'validate_company_name',
    'validate_tool_type',
    'validate_date_string',
    'utcnow',
    'utc_today',
    'parse_date',
    'format_date',
    'format_timestamp',
    'success_response',
    'error_response',
    'paginated_response',
]
