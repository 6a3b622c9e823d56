"""
Services Package
================

These are the "workers" that do the actual work.

- RecordStore: Talks to MongoDB
- IngestionService: Validates pushes and applies the per-device watermark
- QueryService: Reads records back for the dashboard
- AuthService: Registers users, issues and checks tokens
- KeepAliveService: Pings our own /get so the host doesn't idle us out
"""

from .record_store import RecordStore
from .ingestion_service import IngestionService
from .query_service import QueryService
from .auth_service import AuthService
from .keep_alive_service import KeepAliveService

__all__ = [
    "RecordStore",
    "IngestionService",
    "QueryService",
    "AuthService",
    "KeepAliveService",
]
