"""
Utility modules for the device sync backend.
"""

from devicesync.utils.validation import (
    is_number,
    parse_client_date,
    as_utc,
)

__all__ = [
    "is_number",
    "parse_client_date",
    "as_utc",
]
