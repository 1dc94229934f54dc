# ============================================================================
# CORE UTILITIES
# ============================================================================
# STATUS: Core - Shared helpers for the workflow components
# PURPOSE: Input coercion for the closed vocabularies users pick from
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: coerce_enum
# DEPENDENCIES: exceptions, core.errors
# ============================================================================

"""
Core utility functions.
"""

from enum import Enum
from typing import Any, Optional, Type, TypeVar

from exceptions import InvalidAnnotationError
from .errors import ErrorCode

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_class: Type[E], value: Any, field: str,
                error_code: Optional[ErrorCode] = None) -> E:
    """
    Convert a user-supplied value to a member of enum_class.

    Accepts a member of the enum, its value, or (case-insensitive) its name.

    Args:
        enum_class: Target enum (e.g., RoomType)
        value: Enum member, value or name
        field: Field name used in the error message
        error_code: Code carried by the raised error (INVALID_VALUE when omitted)

    Returns:
        Enum member

    Raises:
        InvalidAnnotationError: Value is not part of the vocabulary

    Example:
        >>> coerce_enum(RoomType, "Küche", "room_type")
        <RoomType.KUECHE: 'Küche'>
    """
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except (ValueError, TypeError):
        pass
    if isinstance(value, str) and value.strip():
        member = enum_class.__members__.get(value.strip().upper())
        if member is not None:
            return member
    allowed = ", ".join(str(m.value) for m in enum_class)
    raise InvalidAnnotationError(
        f"Invalid {field} '{value}'. Allowed: {allowed}", error_code=error_code
    )
