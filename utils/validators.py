"""
utils/validators.py — Input validation helpers.

Validates:
- Bed dimensions (positive whole numbers)
- Cell coordinates (whole numbers; bounds are checked by bed_analyzer)
- Planting windows (known window type, months 1-12, days 1-31)
- Plant enumerations (category, water needs, sun requirement)
- Companion relationship tags and task recurrences

Every helper raises errors.ValidationError (or InvalidInterval for months)
and returns the cleaned value.
"""

from errors import ValidationError
from models import CATEGORIES, RELATIONSHIPS, SUN_REQUIREMENTS, WATER_NEEDS, WINDOW_TYPES
from utils.cyclic import validate_month
from utils.dates import RECURRENCES


def require_int(value, field, minimum=None):
    """Coerce *value* to int, rejecting bools, floats with a fraction and junk."""
    if isinstance(value, bool) or value is None or value == '':
        raise ValidationError(f"{field} must be a whole number")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{field} must be a whole number")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number")
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be at least {minimum}")
    return number


def require_text(value, field):
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def optional_text(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def validate_choice(value, choices, field, allow_none=True):
    if value is None or value == '':
        if allow_none:
            return None
        raise ValidationError(f"{field} is required")
    if value not in choices:
        raise ValidationError(f"{field} must be one of: {', '.join(choices)}")
    return value


def validate_bed_dimensions(rows, cols):
    return require_int(rows, 'rows', minimum=1), require_int(cols, 'cols', minimum=1)


def validate_cell(row, col):
    return require_int(row, 'row'), require_int(col, 'col')


def validate_window(data: dict) -> dict:
    """
    Clean one planting window payload.

    Defaults: start_day 1, end_day 28.
    """
    window_type = validate_choice(data.get('window_type'), WINDOW_TYPES, 'window_type',
                                  allow_none=False)
    start_month = validate_month(require_int(data.get('start_month'), 'start_month'),
                                 'start_month')
    end_month = validate_month(require_int(data.get('end_month'), 'end_month'), 'end_month')

    start_day = data.get('start_day')
    end_day = data.get('end_day')
    start_day = 1 if start_day in (None, '') else require_int(start_day, 'start_day', minimum=1)
    end_day = 28 if end_day in (None, '') else require_int(end_day, 'end_day', minimum=1)
    if start_day > 31 or end_day > 31:
        raise ValidationError("Days must be between 1 and 31")

    return {
        'window_type': window_type,
        'start_month': start_month,
        'start_day': start_day,
        'end_month': end_month,
        'end_day': end_day,
    }


def validate_plant_fields(data: dict) -> dict:
    """Check the enumerated plant fields present in *data*; returns only those."""
    cleaned = {}
    if 'category' in data:
        cleaned['category'] = validate_choice(data['category'], CATEGORIES, 'category')
    if 'water_needs' in data:
        cleaned['water_needs'] = validate_choice(data['water_needs'], WATER_NEEDS, 'water_needs')
    if 'sun_requirement' in data:
        cleaned['sun_requirement'] = validate_choice(
            data['sun_requirement'], SUN_REQUIREMENTS, 'sun_requirement')
    for field in ('days_to_maturity', 'spacing_inches'):
        if data.get(field) is not None:
            cleaned[field] = require_int(data[field], field, minimum=0)
    return cleaned


def validate_relationship(value):
    return validate_choice(value, RELATIONSHIPS, 'relationship', allow_none=False)


def validate_recurrence(value):
    return validate_choice(value, RECURRENCES, 'recurring')
