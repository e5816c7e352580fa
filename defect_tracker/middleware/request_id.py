"""
Request id propagation

Each request carries an id in ``environ['request_id']`` and in the
``X-Request-ID`` response header, and every log line written while handling
it is tagged with that id. A caller-supplied id is reused when it is a short
token; anything else is replaced so arbitrary header content never reaches
the logs.
"""
import logging
import re
import uuid

from flask import has_request_context, request

REQUEST_ID_HEADER = 'X-Request-ID'
REQUEST_ID_PATTERN = re.compile(r'^[A-Za-z0-9._-]{1,128}$')


def resolve_request_id(incoming):
    """Reuse a well-formed incoming id, otherwise mint a new one"""
    if incoming and REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return uuid.uuid4().hex


class RequestIdMiddleware:
    """WSGI wrapper that assigns the request id and echoes it back"""

    def __init__(self, wsgi_app):
        self.wsgi_app = wsgi_app

    def __call__(self, environ, start_response):
        request_id = resolve_request_id(environ.get('HTTP_X_REQUEST_ID'))
        environ['request_id'] = request_id

        def start_with_request_id(status, headers, exc_info=None):
            headers = [(name, value) for name, value in headers if name.lower() != REQUEST_ID_HEADER.lower()]
            headers.append((REQUEST_ID_HEADER, request_id))
            return start_response(status, headers, exc_info)

        return self.wsgi_app(environ, start_with_request_id)


class RequestIdFilter(logging.Filter):
    """Attach the current request id (or '-') to every log record"""

    def filter(self, record):
        if has_request_context():
            record.request_id = request.environ.get('request_id', '-')
        else:
            record.request_id = '-'
        return True
