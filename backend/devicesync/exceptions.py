"""Error taxonomy for the ingestion backend.

Every error carries the HTTP status it maps to, so the request boundary in
``main.py`` can turn it into an ``{"error": ...}`` body without a lookup table.
"""

from __future__ import annotations


class DeviceSyncError(Exception):
    """Base exception for all devicesync errors."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(DeviceSyncError):
    """Malformed or missing input."""

    status_code = 400


class UnauthorizedError(DeviceSyncError):
    """Missing, malformed or expired token, or bad credentials."""

    status_code = 401


class ForbiddenError(DeviceSyncError):
    """Wrong provisioning secret."""

    status_code = 403


class ConflictError(DeviceSyncError):
    """Username already taken."""

    status_code = 409


class InternalError(DeviceSyncError):
    """Unexpected server-side failure."""

    status_code = 500


class StoreError(InternalError):
    """The document store rejected or failed an operation."""
