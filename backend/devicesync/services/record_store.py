"""
Record Store
============

Append-only storage for everything devices push, plus the users table.

WHAT IT DOES:
------------
1. Inserts location fixes, call logs and SMS records (one or many at a time)
2. Reads them back: everything, or filtered on one field
3. Answers "what's the newest record for this device?" for the watermark
4. Keeps usernames unique (enforced by a unique index, not by a pre-check)

Backed by MongoDB through pymongo. The store is the only shared state in
the app; single-document writes are atomic, nothing else is.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pymongo import ASCENDING, DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from devicesync.exceptions import ConflictError, StoreError
from devicesync.models import RecordKind, User

logger = logging.getLogger(__name__)


class RecordStore:
    """
    Thin layer over a pymongo Database.

    Every pymongo failure is re-raised as StoreError so callers only deal
    with our own error taxonomy.
    """

    # Field used to order call logs / SMS per device
    DATE_SORT_FIELD = "dateValue"

    def __init__(self, database: Database):
        """
        Args:
            database: An open pymongo (or mongomock) Database
        """
        self.database = database

    def _collection(self, kind: RecordKind):
        return self.database[RecordKind(kind).value]

    # =========================================================================
    # SETUP
    # =========================================================================

    def ensure_indexes(self):
        """Create the indexes the app relies on. Safe to run on every startup."""
        try:
            self._collection(RecordKind.USER).create_index(
                [("username", ASCENDING)], unique=True
            )
            for kind in (RecordKind.CALL_LOG, RecordKind.SMS):
                self._collection(kind).create_index(
                    [("device", ASCENDING), (self.DATE_SORT_FIELD, DESCENDING)]
                )
            self._collection(RecordKind.LOCATION).create_index([("device", ASCENDING)])
        except PyMongoError as e:
            raise StoreError(f"Failed to create indexes: {e}") from e
        logger.info("Database indexes ready")

    def ping(self) -> bool:
        """True if the database answers a ping."""
        try:
            self.database.command("ping")
            return True
        except PyMongoError as e:
            logger.warning(f"Database ping failed: {e}")
            return False

    # =========================================================================
    # WRITES
    # =========================================================================

    def insert(self, kind: RecordKind, record: dict) -> dict:
        """
        Store one record.

        Assigns the server ``timestamp`` if the record has none. There is
        no content-level uniqueness: the same payload twice is two records.

        Returns:
            The stored document, including its ``_id``
        """
        document = dict(record)
        document.setdefault("timestamp", datetime.now(timezone.utc))
        try:
            result = self._collection(kind).insert_one(document)
        except PyMongoError as e:
            raise StoreError(f"Failed to insert into {RecordKind(kind).value}: {e}") from e
        document["_id"] = result.inserted_id
        return document

    def insert_many(self, kind: RecordKind, records: list[dict]) -> int:
        """
        Store several records.

        Not atomic across documents: writes are unordered, so a failure on
        one document doesn't stop the rest.

        Returns:
            Number of documents stored
        """
        if not records:
            return 0
        now = datetime.now(timezone.utc)
        documents = []
        for record in records:
            document = dict(record)
            document.setdefault("timestamp", now)
            documents.append(document)
        try:
            result = self._collection(kind).insert_many(documents, ordered=False)
        except PyMongoError as e:
            raise StoreError(f"Failed to insert into {RecordKind(kind).value}: {e}") from e
        return len(result.inserted_ids)

    # =========================================================================
    # READS
    # =========================================================================

    def find_all(self, kind: RecordKind) -> list[dict]:
        """All records of a kind, in insertion order."""
        return self._find(kind, {})

    def find_by_field(self, kind: RecordKind, field: str, value) -> list[dict]:
        """Records whose ``field`` equals ``value`` exactly, in insertion order."""
        return self._find(kind, {field: value})

    def find_latest_by_device(
        self,
        kind: RecordKind,
        device: str,
        sort_field: str = DATE_SORT_FIELD,
    ) -> Optional[dict]:
        """
        The record with the largest ``sort_field`` for a device.

        Records missing ``sort_field`` are ignored.

        Returns:
            The document, or None if the device has no such records
        """
        try:
            return self._collection(kind).find_one(
                {"device": device, sort_field: {"$ne": None}},
                sort=[(sort_field, DESCENDING)],
            )
        except PyMongoError as e:
            raise StoreError(f"Failed to read latest {RecordKind(kind).value}: {e}") from e

    def _find(self, kind: RecordKind, query: dict) -> list[dict]:
        try:
            return list(self._collection(kind).find(query).sort("_id", ASCENDING))
        except PyMongoError as e:
            raise StoreError(f"Failed to read {RecordKind(kind).value}: {e}") from e

    # =========================================================================
    # USERS
    # =========================================================================

    def create_user(self, username: str, password_hash: str) -> User:
        """
        Store a new user.

        Raises:
            ConflictError: If the username is already taken
        """
        document = {
            "username": username,
            "passwordHash": password_hash,
            "createdAt": datetime.now(timezone.utc),
        }
        try:
            result = self._collection(RecordKind.USER).insert_one(document)
        except DuplicateKeyError as e:
            raise ConflictError("Username already exists") from e
        except PyMongoError as e:
            raise StoreError(f"Failed to create user: {e}") from e
        document["_id"] = result.inserted_id
        return User.from_document(document)

    def find_user(self, username: str) -> Optional[User]:
        try:
            document = self._collection(RecordKind.USER).find_one({"username": username})
        except PyMongoError as e:
            raise StoreError(f"Failed to read user: {e}") from e
        return User.from_document(document) if document else None
