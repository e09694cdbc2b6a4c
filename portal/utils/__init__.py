"""Utility modules."""
from portal.utils.time_utils import format_duration, format_timestamp, parse_iso_timestamp
from portal.utils.validation import require_fields, validate_id

__all__ = [
    "format_duration",
    "format_timestamp",
    "parse_iso_timestamp",
    "require_fields",
    "validate_id",
]
