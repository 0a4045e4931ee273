"""
Utility functions and helpers.
"""
from .logging import (
    setup_logging,
    get_logger,
    log_fields,
    NanosecondFormatter,
    JsonFormatter,
)
from .helpers import (
    # Time utilities
    now_ms,
    ms_to_datetime,
    datetime_to_ms,
    iso_to_ms,
    ms_to_iso,
    # Numbers
    parse_float,
    parse_optional_float,
    round_quantity,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "log_fields",
    "NanosecondFormatter",
    "JsonFormatter",
    # Time
    "now_ms",
    "ms_to_datetime",
    "datetime_to_ms",
    "iso_to_ms",
    "ms_to_iso",
    # Numbers
    "parse_float",
    "parse_optional_float",
    "round_quantity",
]
