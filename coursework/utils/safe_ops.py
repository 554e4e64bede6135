"""
Utility functions for handling None values in data processing.

This module provides functions to safely handle operations on potentially
None values, especially string and date operations that commonly cause errors.
"""

import json
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def safe_lower(value: Optional[str]) -> str:
    """
    Safely convert a string to lowercase, handling None values.

    Args:
        value: A string or None

    Returns:
        The lowercase string if value is a string, otherwise an empty string
    """
    if value is None:
        return ""
    return str(value).lower()


def safe_list(items: Optional[Iterable[T]]) -> List[T]:
    """
    Safely turn an iterable into a list, treating None as empty.

    Args:
        items: An iterable or None

    Returns:
        A new list with the items, or an empty list if input is None
    """
    if items is None:
        return []
    return list(items)


def safe_enum_from_string(
    enum_class: Any, value: Optional[str], default: Any = None
) -> Any:
    """
    Safely convert a string to an enum value, handling None and invalid values.

    Args:
        enum_class: The enum class
        value: The string value to convert
        default: The default value to return if conversion fails

    Returns:
        The enum value or the default
    """
    if value is None:
        return default

    value_str = str(value).lower()

    for member in enum_class:
        if safe_lower(member.value) == value_str:
            return member

    return default


def ensure_aware(value: datetime) -> datetime:
    """
    Attach UTC to a naive datetime; aware datetimes are returned unchanged.

    Args:
        value: A datetime

    Returns:
        A timezone-aware datetime
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def safe_parse_datetime(date_input: Any) -> Optional[datetime]:
    """
    Parse a timestamp from the formats found in exported coursework data.

    Args:
        date_input: The date to parse, can be one of:
            - None (returned as None)
            - datetime (made timezone-aware)
            - integer (epoch time in milliseconds)
            - dict with $date key containing ISO format date string
            - string in ISO format, "Z" suffix accepted

    Returns:
        A timezone-aware datetime, or None for None input

    Raises:
        ValueError: If the date_input is not in a recognized format
    """
    if date_input is None:
        return None

    if isinstance(date_input, datetime):
        return ensure_aware(date_input)

    # Epoch time in milliseconds
    if isinstance(date_input, (int, float)) or (
        isinstance(date_input, str) and date_input.isdigit()
    ):
        try:
            return datetime.fromtimestamp(int(date_input) / 1000.0, tz=timezone.utc)
        except (ValueError, OverflowError) as e:
            raise ValueError(f"Invalid epoch timestamp: {e}")

    # Object with $date key
    if isinstance(date_input, dict) and "$date" in date_input:
        return safe_parse_datetime(date_input["$date"])

    if isinstance(date_input, str):
        try:
            return ensure_aware(
                datetime.fromisoformat(date_input.replace("Z", "+00:00"))
            )
        except ValueError:
            pass

        # JSON string that contains a date object
        try:
            parsed_json = json.loads(date_input)
        except (json.JSONDecodeError, TypeError):
            parsed_json = None
        if isinstance(parsed_json, dict) and "$date" in parsed_json:
            return safe_parse_datetime(parsed_json)

    raise ValueError(f"Unrecognized date format: {date_input}")
