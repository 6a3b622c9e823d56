"""
Input Validation Utilities
===========================

Common validation functions for device payloads and user inputs.
"""

import math
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

# Plain decimal numbers only; "nan", "inf" and hex are not dates
_DECIMAL = re.compile(r"\d+(\.\d*)?([eE][+-]?\d+)?")


def is_number(value: Any) -> bool:
    """
    Check that a value arrived as a JSON number.

    Booleans are ints in Python but never count as coordinates, numeric
    strings like "12.5" are rejected too, and so are NaN and Infinity
    (Python's json module lets those through).

    Args:
        value: Raw value from the request body

    Returns:
        True if value is a finite int or float, False otherwise
    """
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def parse_client_date(value: Any) -> Optional[datetime]:
    """
    Interpret a client-supplied call/SMS date as a UTC point in time.

    Accepted forms:
        - JSON numbers or decimal strings ("1697450400000", "1.6974504e12"):
          epoch milliseconds
          (what Android's CallLog/Telephony providers hand out)
        - ISO 8601 strings, with or without offset ("Z" allowed);
          naive values are taken as UTC
        - RFC 2822 strings ("Mon, 16 Oct 2023 10:00:00 GMT")

    The result is truncated to milliseconds, the precision the store keeps,
    so a date read back from the store compares equal to the same date
    parsed again from a resubmitted batch.

    Args:
        value: Raw ``date`` value from the request

    Returns:
        Timezone-aware datetime, or None if the value can't be parsed
    """
    if value is None or isinstance(value, bool):
        return None

    parsed = None
    if isinstance(value, (int, float)):
        parsed = _from_epoch_millis(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.isdigit():
            parsed = _from_epoch_millis(int(text))
        elif _DECIMAL.fullmatch(text):
            parsed = _from_epoch_millis(float(text))
        else:
            parsed = _from_iso(text) or _from_rfc2822(text)

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    parsed = parsed.astimezone(timezone.utc)
    return parsed.replace(microsecond=(parsed.microsecond // 1000) * 1000)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes coming back from the store."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _from_epoch_millis(millis) -> Optional[datetime]:
    try:
        return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _from_iso(text: str) -> Optional[datetime]:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _from_rfc2822(text: str) -> Optional[datetime]:
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        return None
