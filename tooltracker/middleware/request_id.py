"""
Request ID middleware for request tracing and logging
"""
import logging
import uuid

from flask import has_request_context, request


class RequestIdMiddleware:
    """
    WSGI middleware to add unique request ID to each request
    Honours an incoming X-Request-ID header so IDs can be traced across services
    """

    def __init__(self, app):
        self.app = app

    def __call__(self, environ, start_response):
        # Generate or extract request ID
        request_id = environ.get('HTTP_X_REQUEST_ID') or str(uuid.uuid4())

        # Store in environ
        environ['request_id'] = request_id

        # Add to response headers
        def custom_start_response(status, headers, exc_info=None):
            headers.append(('X-Request-ID', request_id))
            return start_response(status, headers, exc_info)

        return self.app(environ, custom_start_response)


def get_request_id():
    """
    Request ID of the request being handled

    Returns:
        str: Request ID or None outside a request
    """
    if not has_request_context():
        return None
    return request.environ.get('request_id')


class RequestIdFilter(logging.Filter):
    """Logging filter that stamps every record with the current request ID"""

    def filter(self, record):
        record.request_id = get_request_id() or '-'
        return True
