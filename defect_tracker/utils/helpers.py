"""
Helper utilities
"""
import uuid
from datetime import datetime, timezone

from flask import jsonify


def generate_uuid():
    """Generate UUID string for primary keys"""
    return str(uuid.uuid4())


def utcnow():
    """
    Current server time as a naive UTC datetime

    All timestamps are stored naive-UTC so comparisons behave the same on
    SQLite and PostgreSQL.
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    """Serialize a datetime (or None) for JSON responses"""
    if value is None:
        return None
    return value.isoformat()


def success(data=None, message=None, status=200):
    """
    Build the standard success envelope

    Returns:
        tuple: (response, status)
    """
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    return jsonify(body), status
