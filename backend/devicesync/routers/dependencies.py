"""
Router Dependencies
===================

Gives the endpoints access to the services built at startup, and guards
the protected endpoints with a bearer token check.
"""

from typing import Optional

from fastapi import Depends, Header

from devicesync.exceptions import InternalError, UnauthorizedError
from devicesync.models import TokenIdentity
from devicesync.services import AuthService, IngestionService, QueryService, RecordStore


class Services:
    """Everything the routers need, built once per process."""

    def __init__(
        self,
        store: RecordStore,
        ingestion: IngestionService,
        query: QueryService,
        auth: AuthService,
    ):
        self.store = store
        self.ingestion = ingestion
        self.query = query
        self.auth = auth


# =============================================================================
# DEPENDENCY INJECTION
# =============================================================================

_services: Optional[Services] = None  # Set when the app starts


def set_services(services: Optional[Services]):
    """Called from the app lifespan to hand the routers their services."""
    global _services
    _services = services


def get_services() -> Services:
    """Services for use in endpoints."""
    if _services is None:
        raise InternalError("Server not fully started yet")
    return _services


def get_ingestion_service(services: Services = Depends(get_services)) -> IngestionService:
    return services.ingestion


def get_query_service(services: Services = Depends(get_services)) -> QueryService:
    return services.query


def get_auth_service(services: Services = Depends(get_services)) -> AuthService:
    return services.auth


# =============================================================================
# BEARER TOKEN
# =============================================================================

def require_token(
    authorization: Optional[str] = Header(None),
    auth: AuthService = Depends(get_auth_service),
) -> TokenIdentity:
    """
    Verify the token from the Authorization header.

    Expected format: "Bearer <token>"

    Returns:
        The caller's identity

    Raises:
        UnauthorizedError: Header missing, wrong format, or token invalid/expired
    """
    if not authorization:
        raise UnauthorizedError("Missing Authorization header. Expected: Bearer <token>")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise UnauthorizedError("Invalid Authorization format. Expected: Bearer <token>")

    return auth.verify(parts[1])
