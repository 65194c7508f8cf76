"""
JSON envelope builders

All endpoints answer with {"success", "data", "error", "message"}; list
endpoints add a "pagination" block.
"""
import math

from flask import jsonify


def success_response(data=None, message=None, status_code=200):
    """
    Build a success envelope

    Args:
        data: JSON-serializable payload
        message (str): Optional human-readable message
        status_code (int): HTTP status

    Returns:
        tuple: (Response, status)
    """
    body = {'success': True, 'data': data}
    if message:
        body['message'] = message
    return jsonify(body), status_code


def error_response(error, status_code):
    """Build an error envelope with a human-readable error string"""
    return jsonify({'success': False, 'error': error}), status_code


def paginated_response(items, page, limit, total, message=None):
    """
    Build a list envelope with pagination metadata

    Args:
        items (list): Serialized items for the current page
        page (int): 1-based page number
        limit (int): Page size
        total (int): Total matching rows

    Returns:
        tuple: (Response, status)
    """
    body = {
        'success': True,
        'data': items,
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit) if limit else 0,
        },
    }
    if message:
        body['message'] = message
    return jsonify(body), 200
