"""
Normalizers for environment-driven settings.

Both helpers run in `mode="before"` field validators, so they receive the raw
value. Non-string input is returned untouched and left for pydantic to reject.
"""
from typing import Any


def to_uppercase(value: Any) -> Any:
    """Strip and upper-case a string value (e.g. LOG_LEVEL=" debug" -> "DEBUG")."""
    if isinstance(value, str):
        return value.strip().upper()
    return value


def to_lowercase(value: Any) -> Any:
    """Strip and lower-case a string value (e.g. LOG_FORMAT="JSON" -> "json")."""
    if isinstance(value, str):
        return value.strip().lower()
    return value
