"""
Utility functions for cryptonorm.
"""
import math
import time
from datetime import datetime, timezone
from typing import Any, Optional


# ============================================================================
# Time Utilities
# ============================================================================

def now_ms() -> int:
    """Get current time in milliseconds since epoch."""
    return int(time.time() * 1000)


def ms_to_datetime(timestamp_ms: int) -> datetime:
    """Convert millisecond timestamp to datetime (UTC)."""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


def datetime_to_ms(dt: datetime) -> int:
    """Convert datetime to millisecond timestamp."""
    return int(round(dt.timestamp() * 1000))


def iso_to_ms(iso_string: str) -> int:
    """Convert ISO format string (``2021-03-01T12:00:00.123Z``) to millisecond timestamp."""
    dt = datetime.fromisoformat(iso_string.replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return datetime_to_ms(dt)


def ms_to_iso(timestamp_ms: int) -> str:
    """Convert millisecond timestamp to ISO format string."""
    return ms_to_datetime(timestamp_ms).isoformat()


# ============================================================================
# Numbers
# ============================================================================

def parse_float(value: Any, name: str = "value") -> float:
    """
    Parse a numeric field that exchanges send either as number or string.

    Raises ValueError for missing, non-numeric and non-finite values.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"{name} is missing or not numeric: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} is not finite: {value!r}")
    return number


def parse_optional_float(value: Any, name: str = "value") -> Optional[float]:
    """Like parse_float but passes None through."""
    if value is None:
        return None
    return parse_float(value, name)


def round_quantity(value: float, precision: int) -> float:
    """
    Round a quantity to ``precision`` decimal places.

    Used only at serialization time; calculations keep full precision.
    """
    if value == 0 or not math.isfinite(value):
        return value
    return round(value, precision)
