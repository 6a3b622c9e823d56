"""
Routers Package
===============

Routers are like the reception desk - they direct incoming requests
to the right place.
"""

from .auth import router as auth_router
from .ingest import router as ingest_router
from .records import router as records_router
from .dependencies import Services, set_services, get_services

__all__ = [
    "auth_router",
    "ingest_router",
    "records_router",
    "Services",
    "set_services",
    "get_services",
]
