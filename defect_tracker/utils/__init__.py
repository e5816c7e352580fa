"""Utilities package"""
from .helpers import generate_uuid, utcnow, isoformat, success
from .validators import get_json_body, require_fields, parse_delay_seconds
from .auth import (
    AuthSession,
    current_session,
    require_auth,
    require_role,
    hash_password,
    verify_password,
    generate_token,
    decode_token,
)

__all__ = [
    'generate_uuid',
    'utcnow',
    'isoformat',
    'success',
    'get_json_body',
    'require_fields',
    'parse_delay_seconds',
    'AuthSession',
    'current_session',
    'require_auth',
    'require_role',
    'hash_password',
    'verify_password',
    'generate_token',
    'decode_token',
]
