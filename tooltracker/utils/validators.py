"""
Validation utilities
"""
import re

from .helpers import parse_date

UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$',
    re.IGNORECASE,
)

MAX_TEXT_LENGTH = 255


def validate_uuid(uuid_string):
    """
    Validate UUID format

    Only the canonical hyphenated textual form is accepted.

    Args:
        uuid_string (str): UUID string to validate

    Returns:
        bool: True if valid UUID, False otherwise
    """
    if not isinstance(uuid_string, str):
        return False
    return bool(UUID_PATTERN.match(uuid_string))


def validate_text(value, max_length=MAX_TEXT_LENGTH):
    """
    Validate a required free-text field

    Args:
        value: Candidate value
        max_length (int): Maximum length before trimming

    Returns:
        bool: True if a non-empty string once trimmed and within the limit
    """
    if not isinstance(value, str):
        return False
    return len(value.strip()) > 0 and len(value) <= max_length


def validate_tin(tin):
    """Validate a tool identification number (scanned barcode)"""
    return validate_text(tin)


def validate_company_name(company):
    """Validate a company name"""
    return validate_text(company)


def validate_tool_type(tool_type):
    """Validate a tool type"""
    return validate_text(tool_type)


def validate_date_string(date_string):
    """
    Validate an ISO-8601 date string

    Args:
        date_string (str): Date or datetime string

    Returns:
        bool: True if the string parses, False otherwise
    """
    return parse_date(date_string) is not None
