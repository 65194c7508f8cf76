"""
Request parsing shared by the blueprints
"""
import uuid

from flask import request

from tooltracker.errors import BadRequestError, INVALID_REQUEST_BODY, INVALID_UUID
from tooltracker.utils.helpers import parse_date
from tooltracker.utils.validators import validate_uuid


def get_json_body():
    """
    Parsed JSON object body of the current request

    Raises:
        BadRequestError: Body missing, malformed, or not a JSON object
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequestError(INVALID_REQUEST_BODY)
    return data


def parse_uuid(value, message=INVALID_UUID):
    """
    Convert a textual identifier to a UUID

    Raises:
        BadRequestError: Value is not a canonical UUID string
    """
    if not validate_uuid(value):
        raise BadRequestError(message)
    return uuid.UUID(value)


def parse_tool_id_list(data):
    """
    Extract {jobId, toolIds} from an assignment/return body

    Returns:
        tuple: (job UUID, list of distinct tool UUIDs in request order)
    """
    job_id = data.get('jobId')
    if not job_id or not validate_uuid(job_id):
        raise BadRequestError('Valid job ID is required')

    tool_ids = data.get('toolIds')
    if not tool_ids or not isinstance(tool_ids, list):
        raise BadRequestError('At least one tool ID is required')

    for tool_id in tool_ids:
        if not validate_uuid(tool_id):
            raise BadRequestError(f'Invalid tool ID format: {tool_id}')

    parsed = [uuid.UUID(tool_id) for tool_id in tool_ids]
    if len(set(parsed)) != len(parsed):
        raise BadRequestError('Duplicate tool IDs in request')

    return uuid.UUID(job_id), parsed


def parse_date_arg(name):
    """
    Optional ISO date query argument

    Raises:
        BadRequestError: Argument present but not a valid date
    """
    value = request.args.get(name)
    if not value:
        return None
    parsed = parse_date(value)
    if parsed is None:
        raise BadRequestError(f'Invalid date for {name}. Use ISO-8601 (YYYY-MM-DD)')
    return parsed
