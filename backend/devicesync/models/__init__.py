"""
Models Package
==============

This is where all our data models live.
Import from here instead of the individual files.

Example:
    from devicesync.models import RecordKind, LocationRecord
"""

from .telemetry import (
    # Which collection
    RecordKind,

    # What we store and return
    StoredRecord,
    LocationRecord,
    CallLogRecord,
    SmsRecord,
    RECORD_MODELS,

    # What devices send us
    CallLogEntry,
    SmsEntry,
    PushLocationRequest,
    PostDataRequest,

    # What we answer
    MessageResponse,
    PushLocationResponse,
    BatchCounts,
    PostDataResponse,
)
from .auth import (
    User,
    TokenIdentity,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    ErrorResponse,
)

__all__ = [
    "RecordKind",
    "StoredRecord",
    "LocationRecord",
    "CallLogRecord",
    "SmsRecord",
    "RECORD_MODELS",
    "CallLogEntry",
    "SmsEntry",
    "PushLocationRequest",
    "PostDataRequest",
    "MessageResponse",
    "PushLocationResponse",
    "BatchCounts",
    "PostDataResponse",
    "User",
    "TokenIdentity",
    "RegisterRequest",
    "RegisterResponse",
    "TokenResponse",
    "ErrorResponse",
]
