"""
Validation utilities
"""
from defect_tracker.errors import ValidationError


def get_json_body(request):
    """
    Return the JSON body of a request as a dict

    Raises:
        ValidationError: body missing or not a JSON object
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def require_fields(data, fields, message=None):
    """
    Ensure every field in ``fields`` is present and non-blank

    Raises:
        ValidationError: listing the missing fields
    """
    missing = [field for field in fields if is_blank(data.get(field))]
    if missing:
        raise ValidationError(message or f'Missing required fields: {", ".join(missing)}')


def parse_delay_seconds(value):
    """
    Coerce a requested reminder delay to an int

    Returns None when no delay was requested. Non-positive values are
    passed through; the scheduler treats them as "no reminder".

    Raises:
        ValidationError: value is not an integer
    """
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError('notification_delay_seconds must be an integer')
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError('notification_delay_seconds must be an integer')
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError('notification_delay_seconds must be an integer')
