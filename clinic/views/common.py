from collections.abc import Mapping

from clinic.exceptions import ValidationError


def request_body(request) -> Mapping:
    """The parsed body, which must be a JSON object (or form data)."""
    data = request.data
    if not isinstance(data, Mapping):
        raise ValidationError('Request body must be an object')
    return data


def query_flag(value):
    """``true``/``false`` query parameter as a bool, ``None`` when absent."""
    if value is None or value == '':
        return None
    lowered = value.strip().lower()
    if lowered in {'1', 'true', 'yes'}:
        return True
    if lowered in {'0', 'false', 'no'}:
        return False
    raise ValidationError(f'Invalid boolean value: {value}')
