"""
Telemetry Models
================
Pydantic models for everything a device pushes and everything we hand back.

This module defines:
- Record kinds: which collection a record lives in
- Stored records: LocationRecord, CallLogRecord, SmsRecord
- Incoming entries: what a device sends inside a batch
- Request/response bodies for the ingestion and read endpoints

Records are append-only. Nothing here is ever updated after insert.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from devicesync.utils.validation import as_utc


# =============================================================================
# ENUMS
# =============================================================================

class RecordKind(str, Enum):
    """
    Collections in the document store.

    Values are the collection names, so a kind can be passed straight to
    the database.
    """
    LOCATION = "locations"
    CALL_LOG = "calllogs"
    SMS = "sms"
    USER = "users"


# =============================================================================
# STORED RECORDS - What the read endpoints return
# =============================================================================

class StoredRecord(BaseModel):
    """Fields every stored record has."""
    id: str = Field(..., description="Store-assigned identifier")
    device: Optional[str] = Field(None, description="Free-text device identifier")
    timestamp: datetime = Field(..., description="Server receipt time (UTC)")

    @classmethod
    def from_document(cls, document: dict):
        """Build a record from a raw store document (``_id`` becomes ``id``)."""
        data = {k: v for k, v in document.items() if k != "_id"}
        data["id"] = str(document["_id"])
        if isinstance(data.get("timestamp"), datetime):
            data["timestamp"] = as_utc(data["timestamp"])
        return cls(**data)


class LocationRecord(StoredRecord):
    """
    One location fix.

    Example:
        {
            "id": "6528f0...",
            "device": "dev1",
            "latitude": 77.1,
            "longitude": 12.5,
            "timestamp": "2026-10-18T09:00:00Z"
        }
    """
    latitude: float = Field(..., description="Latitude in degrees")
    longitude: float = Field(..., description="Longitude in degrees")


class CallLogRecord(StoredRecord):
    """One call-log entry as stored. ``date`` is the client's raw string."""
    number: Optional[str] = Field(None, description="Other party's number")
    type: Optional[str] = Field(None, description="Call direction/kind")
    date: Optional[str] = Field(None, description="Client-supplied call time")
    duration: Optional[str] = Field(None, description="Call duration")


class SmsRecord(StoredRecord):
    """One SMS as stored. ``date`` is the client's raw string."""
    address: Optional[str] = Field(None, description="Sender/recipient")
    body: Optional[str] = Field(None, description="Message text")
    date: Optional[str] = Field(None, description="Client-supplied message time")


RECORD_MODELS = {
    RecordKind.LOCATION: LocationRecord,
    RecordKind.CALL_LOG: CallLogRecord,
    RecordKind.SMS: SmsRecord,
}


# =============================================================================
# INCOMING ENTRIES - What a device sends inside POST /api/post-data
# =============================================================================

class _Entry(BaseModel):
    """
    Base for batch entries.

    Phones send a mix of strings and numbers for the same field
    (duration "42" vs 42, date as epoch millis). Everything is kept as a
    string, the way the record is stored.
    """
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _numbers_to_strings(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return value
        if isinstance(value, float) and value.is_integer():
            # 1767600000000.0 -> "1767600000000", not "1767600000000.0"
            return str(int(value))
        if isinstance(value, (int, float)):
            return str(value)
        return value


class CallLogEntry(_Entry):
    number: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    duration: Optional[str] = None


class SmsEntry(_Entry):
    address: Optional[str] = None
    body: Optional[str] = None
    date: Optional[str] = None


# =============================================================================
# REQUEST MODELS
# =============================================================================

class PushLocationRequest(BaseModel):
    """
    Body for POST /api/push.

    ``long``/``lat`` are typed loosely on purpose: the ingestion service
    decides whether they are numbers so the caller gets our 400 message
    instead of a schema dump.

    Example Request:
        POST /api/push
        {"long": 12.5, "lat": 77.1, "device": "dev1"}
    """
    long: Any = Field(None, description="Longitude (JSON number)")
    lat: Any = Field(None, description="Latitude (JSON number)")
    device: Optional[str] = Field(None, description="Device identifier")


class PostDataRequest(BaseModel):
    """
    Body for POST /api/post-data.

    Only ``device`` is required. Location is stored when both coordinates
    are numbers; call logs and messages go through the watermark filter.

    Example Request:
        POST /api/post-data
        {
            "device": "pixel-7",
            "latitude": 23.81,
            "longitude": 90.41,
            "callLogs": [{"number": "+8801...", "type": "INCOMING",
                          "date": "1697450400000", "duration": "42"}],
            "messages": [{"address": "+8801...", "body": "hi",
                          "date": "2023-10-16T10:00:00Z"}]
        }
    """
    device: Optional[str] = Field(None, description="Device identifier")
    latitude: Any = Field(None, description="Latitude (JSON number)")
    longitude: Any = Field(None, description="Longitude (JSON number)")
    callLogs: Optional[list[CallLogEntry]] = Field(None, description="Call-log batch")
    messages: Optional[list[SmsEntry]] = Field(None, description="SMS batch")


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class MessageResponse(BaseModel):
    message: str


class PushLocationResponse(BaseModel):
    message: str = Field(..., description="Status message")
    data: LocationRecord = Field(..., description="The stored location")


class BatchCounts(BaseModel):
    """How a single kind inside a batch was handled."""
    received: int = Field(0, description="Entries in the request")
    inserted: int = Field(0, description="Entries newer than the watermark, stored")
    skipped: int = Field(0, description="Entries at/below the watermark or with unreadable dates")


class PostDataResponse(BaseModel):
    message: str = Field(..., description="Status message")
    location: bool = Field(False, description="Whether a location fix was stored")
    callLogs: BatchCounts = Field(default_factory=BatchCounts)
    messages: BatchCounts = Field(default_factory=BatchCounts)
