"""Input validation helpers for MCP tool arguments.

Each validator returns the normalized value or raises ValidationError with a
"<field> must ..." message that is shown to the caller unchanged.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from twentyi_mcp.common.api_client.errors import ValidationError

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DOMAIN_PATTERN = re.compile(r"^([a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$")


def validate_string(value: Any, field_name: str) -> str:
    """Return ``value`` stripped; reject non-strings and blank strings."""
    if not isinstance(value, str) or value.strip() == "":
        raise ValidationError(f"{field_name} must be a non-empty string")
    return value.strip()


def validate_positive_number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a positive number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a positive number") from None
    if math.isnan(number) or number <= 0:
        raise ValidationError(f"{field_name} must be a positive number")
    return int(number) if number.is_integer() else number


def validate_positive_integer(value: Any, field_name: str) -> int:
    number = validate_positive_number(value, field_name)
    if not isinstance(number, int):
        raise ValidationError(f"{field_name} must be a whole number")
    return number


def validate_boolean(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
    raise ValidationError(f"{field_name} must be a boolean value")


def validate_email(value: Any, field_name: str) -> str:
    email = validate_string(value, field_name)
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"{field_name} must be a valid email address")
    return email


def validate_domain(value: Any, field_name: str) -> str:
    """Validate a domain name (subdomains allowed) and lower-case it."""
    domain = validate_string(value, field_name)
    if not DOMAIN_PATTERN.match(domain):
        raise ValidationError(f"{field_name} must be a valid domain name")
    return domain.lower()


def validate_enum(value: Any, options: Sequence[str], field_name: str) -> str:
    text = validate_string(value, field_name)
    if text not in options:
        raise ValidationError(f"{field_name} must be one of: {', '.join(options)}")
    return text


def validate_string_array(value: Any, field_name: str, min_length: int = 0) -> List[str]:
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{field_name} must be an array")
    if len(value) < min_length:
        raise ValidationError(f"{field_name} must contain at least {min_length} items")
    return [validate_string(item, f"{field_name}[{index}]") for index, item in enumerate(value)]


def validate_object(value: Any, field_name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValidationError(f"{field_name} must be an object")
    return value


def validate_optional(
    value: Any,
    validator: Callable[[Any, str], T],
    field_name: str,
) -> Optional[T]:
    """Run ``validator`` only when a value was supplied."""
    if value is None:
        return None
    return validator(value, field_name)


def validate_password(value: Any, field_name: str, min_length: int = 8) -> str:
    password = validate_string(value, field_name)
    if len(password) < min_length:
        raise ValidationError(f"{field_name} must be at least {min_length} characters long")
    return password


__all__ = [
    "validate_string",
    "validate_positive_number",
    "validate_positive_integer",
    "validate_boolean",
    "validate_email",
    "validate_domain",
    "validate_enum",
    "validate_string_array",
    "validate_object",
    "validate_optional",
    "validate_password",
]
