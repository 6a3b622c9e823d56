"""
Query Service
=============

Reads stored records back for the dashboard. No pagination, no scoping:
any authenticated caller sees every device's data.
"""

from devicesync.exceptions import ValidationError
from devicesync.models import (
    RECORD_MODELS,
    CallLogRecord,
    RecordKind,
    SmsRecord,
)
from devicesync.services.record_store import RecordStore


class QueryService:
    """Read-only lookups over stored records."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_all(self, kind: RecordKind) -> list:
        """All location, call-log or SMS records."""
        if kind not in RECORD_MODELS:
            raise ValidationError(f"Unknown record kind: {kind}")
        model = RECORD_MODELS[kind]
        return [model.from_document(doc) for doc in self.store.find_all(kind)]

    def get_by_number(self, number: str) -> list[CallLogRecord]:
        """Call logs whose number matches exactly."""
        if not number:
            raise ValidationError("Query parameter 'number' is required")
        return [
            CallLogRecord.from_document(doc)
            for doc in self.store.find_by_field(RecordKind.CALL_LOG, "number", number)
        ]

    def get_by_sms_address(self, address: str) -> list[SmsRecord]:
        """SMS records whose address matches exactly."""
        if not address:
            raise ValidationError("Query parameter 'address' is required")
        return [
            SmsRecord.from_document(doc)
            for doc in self.store.find_by_field(RecordKind.SMS, "address", address)
        ]
