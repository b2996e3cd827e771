from flask_login import current_user

from quizroom.errors import ValidationError


def caller():
    """The authenticated user behind the current request."""
    return current_user._get_current_object()


def int_field(data: dict, name: str, required: bool = True):
    value = data.get(name)
    if value is None:
        if required:
            raise ValidationError(f'{name} is required')
        return None
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError(f'{name} must be an integer')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be an integer')


def str_field(data: dict, name: str, required: bool = True):
    """A stripped string from the JSON body; blank counts as missing."""
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise ValidationError(f'{name} must be a string')
    value = (value or '').strip()
    if not value:
        if required:
            raise ValidationError(f'{name} is required')
        return None
    return value
