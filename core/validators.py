from decimal import Decimal, InvalidOperation

from .exceptions import ValidationError


def require_text(value, label):
    """Return the trimmed string, raising ValidationError when it is missing or blank."""
    if value is None:
        raise ValidationError(f"{label} is required")
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    value = value.strip()
    if not value:
        raise ValidationError(f"{label} is required")
    return value


def optional_text(value, label):
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    return value.strip()


def to_decimal(value, label, minimum=None):
    """
    Parse a money value into a finite Decimal.

    Raises ValidationError when the value is missing, not a number, or
    below ``minimum``.
    """
    if value is None or value == "":
        raise ValidationError(f"{label} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{label} must be a number")
    if not amount.is_finite():
        raise ValidationError(f"{label} must be a number")
    if minimum is not None and amount < minimum:
        raise ValidationError(f"{label} must be at least {minimum}")
    return amount


def check_date_range(start, end):
    if start is not None and end is not None and end < start:
        raise ValidationError("End date cannot be before start date")
