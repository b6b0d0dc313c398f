# backend/smeta/utils/validation.py
import enum
import re
from typing import Optional, Type, TypeVar

from ..errors import ValidationError

E = TypeVar("E", bound=enum.Enum)

MAX_DISPLAY_NAME_LENGTH = 255
# Path separators, characters reserved on Windows filesystems and ASCII control characters
INVALID_DISPLAY_NAME_CHARS = re.compile(r'[/\\<>:"|?*\x00-\x1f]')


def sanitize_display_name(value: Optional[str]) -> Optional[str]:
    """Trim a user supplied display name; empty means "no display name"."""
    if value is None:
        return None

    value = value.strip()
    if not value:
        return None
    if len(value) > MAX_DISPLAY_NAME_LENGTH:
        raise ValidationError(f"Display name must be {MAX_DISPLAY_NAME_LENGTH} characters or less")
    if INVALID_DISPLAY_NAME_CHARS.search(value):
        raise ValidationError('Display name contains invalid characters (/, \\, <, >, :, ", |, ?, *)')
    return value


def parse_enum(enum_cls: Type[E], value: Optional[str], label: str, required: bool = True) -> Optional[E]:
    """Map a raw form/path value onto an enum member, raising ValidationError otherwise"""
    if value is None or value == "":
        if required:
            raise ValidationError(f"{label.capitalize()} is required")
        return None

    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label}. Must be one of: {allowed}") from None


def require_text(value: Optional[str], label: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{label.capitalize()} is required")
    return value.strip()
