"""
Ingestion Service
=================

Takes what devices push and decides what actually gets stored.

HOW A BATCH IS HANDLED:
----------------------
1. Location: stored if both coordinates are numbers (no dedup, every fix counts)
2. Call logs: look up the newest stored call log for the device (the
   "watermark"), keep only entries strictly newer, insert those
3. Messages: same thing against the newest stored SMS

KNOWN GAP:
---------
The watermark read and the insert are two separate store calls. Two
batches from the same device arriving at the same moment can both read
the same watermark and both insert the same entries. We accept that;
devices sync from a single loop so it hasn't mattered in practice.
"""

import logging
from typing import Optional, Sequence

from pydantic import BaseModel

from devicesync.exceptions import ValidationError
from devicesync.models import (
    BatchCounts,
    CallLogEntry,
    LocationRecord,
    PostDataResponse,
    RecordKind,
    SmsEntry,
)
from devicesync.services.record_store import RecordStore
from devicesync.utils.validation import as_utc, is_number, parse_client_date

logger = logging.getLogger(__name__)


class IngestionService:
    """Validates device submissions and appends them to the store."""

    def __init__(self, store: RecordStore):
        self.store = store

    def submit_location(self, long, lat, device: Optional[str] = None) -> LocationRecord:
        """
        Store a single location fix.

        Args:
            long: Longitude, must be a JSON number
            lat: Latitude, must be a JSON number
            device: Optional device identifier

        Returns:
            The stored LocationRecord

        Raises:
            ValidationError: If either coordinate isn't a number
        """
        if not is_number(long) or not is_number(lat):
            raise ValidationError("Invalid long/lat values")

        document = self.store.insert(
            RecordKind.LOCATION,
            {"device": device, "latitude": lat, "longitude": long},
        )
        logger.info(f"[{device or 'unknown'}] Location saved ({lat}, {long})")
        return LocationRecord.from_document(document)

    def submit_batch(
        self,
        device: Optional[str],
        latitude=None,
        longitude=None,
        call_logs: Optional[Sequence[CallLogEntry]] = None,
        messages: Optional[Sequence[SmsEntry]] = None,
    ) -> PostDataResponse:
        """
        Store a device's periodic batch.

        Returns:
            A PostDataResponse with per-kind received/inserted/skipped counts

        Raises:
            ValidationError: If device is missing
        """
        if not device:
            raise ValidationError("Device ID is required")

        location_saved = False
        if is_number(latitude) and is_number(longitude):
            self.store.insert(
                RecordKind.LOCATION,
                {"device": device, "latitude": latitude, "longitude": longitude},
            )
            location_saved = True

        call_counts = self._append_newer(RecordKind.CALL_LOG, device, call_logs or [])
        sms_counts = self._append_newer(RecordKind.SMS, device, messages or [])

        logger.info(
            f"[{device}] Batch stored - location: {'yes' if location_saved else 'no'}, "
            f"calls: {call_counts.inserted}/{call_counts.received}, "
            f"sms: {sms_counts.inserted}/{sms_counts.received}"
        )

        return PostDataResponse(
            message="Data saved successfully",
            location=location_saved,
            callLogs=call_counts,
            messages=sms_counts,
        )

    def _append_newer(
        self,
        kind: RecordKind,
        device: str,
        entries: Sequence[BaseModel],
    ) -> BatchCounts:
        """
        Insert the entries strictly newer than the device's watermark.

        Entries whose date can't be parsed are never stored.
        """
        counts = BatchCounts(received=len(entries))
        if not entries:
            return counts

        watermark = self._watermark(kind, device)

        fresh = []
        for entry in entries:
            date_value = parse_client_date(entry.date)
            if date_value is None:
                logger.debug(f"[{device}] Dropping {kind.value} entry with unreadable date {entry.date!r}")
                continue
            if watermark is not None and date_value <= watermark:
                continue
            record = entry.model_dump()
            record["device"] = device
            record[RecordStore.DATE_SORT_FIELD] = date_value
            fresh.append(record)

        counts.inserted = self.store.insert_many(kind, fresh)
        counts.skipped = counts.received - counts.inserted
        return counts

    def _watermark(self, kind: RecordKind, device: str):
        latest = self.store.find_latest_by_device(kind, device)
        if latest is None:
            return None
        return as_utc(latest[RecordStore.DATE_SORT_FIELD])
