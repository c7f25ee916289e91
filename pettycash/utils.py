"""Shared helpers for Petty Cash Manager"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from functools import wraps

from babel.numbers import format_decimal
from flask import current_app
from flask_login import current_user

from pettycash.exceptions import ValidationError

CENTS = Decimal('0.01')


def utcnow():
    """Naive UTC timestamp, matching the timezone-less DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_decimal(value, field='amount'):
    """Coerce a request value into a two-place Decimal, never through float."""
    if value is None or value == '':
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f'{field} must be a decimal number', field=field)
    if not amount.is_finite():
        raise ValidationError(f'{field} must be a decimal number', field=field)
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def parse_datetime(value, field='date', end_of_day=False):
    """Parse an ISO 8601 date or datetime into a naive UTC datetime.

    Accepts a trailing ``Z`` or a UTC offset. A bare date means midnight, or
    the last second of that day when ``end_of_day`` is set.
    """
    text = str(value).strip()
    if text[-1:] in ('Z', 'z'):
        text = text[:-1] + '+00:00'
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise ValidationError(f'{field} must be an ISO 8601 date', field=field)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    if end_of_day and len(text) == 10:
        parsed = parsed.replace(hour=23, minute=59, second=59)
    return parsed


def money_str(value):
    """Serialize a money amount as a base-10 string."""
    if value is None:
        return None
    return str(Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))


def iso(value):
    return value.isoformat() if value else None


def format_money(value, locale=None):
    """Human readable amount, e.g. 10,000.00"""
    if value is None:
        return ''
    locale = locale or current_app.config.get('NUMBER_LOCALE', 'en_US')
    return format_decimal(Decimal(value), format='#,##0.00', locale=locale)


def role_required(*roles):
    """Allow the view only for authenticated users holding one of ``roles``."""
    allowed = {getattr(role, 'value', role) for role in roles}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            if not current_user.is_authenticated:
                return current_app.login_manager.unauthorized()
            if current_user.role.value not in allowed:
                from flask import jsonify
                return jsonify({'message': 'Forbidden: Insufficient permissions',
                                'code': 'forbidden'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator
