"""Shared validation utilities"""

import re
from typing import Optional

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:([0-5]\d))?$")


def validate_time_string(value: Optional[str]) -> Optional[str]:
    """
    Validate a time-of-day string.

    Args:
        value: Time string in HH:MM or HH:MM:SS format

    Returns:
        The time string unchanged

    Raises:
        ValueError: If the time is not a valid 24-hour HH:MM[:SS] string
    """
    if not value:
        return value

    value = value.strip()
    if not TIME_PATTERN.match(value):
        raise ValueError("Time must be in HH:MM or HH:MM:SS format")

    return value


def validate_required_time_string(value: Optional[str]) -> str:
    """Like validate_time_string, but a blank time is an error"""
    if not value or not value.strip():
        raise ValueError("Time is required")

    return validate_time_string(value)
