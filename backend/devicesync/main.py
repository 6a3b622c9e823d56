"""
Device Sync - Backend API
=========================
FastAPI application that collects telemetry pushed by phones.

ARCHITECTURE:
    [Phone app] --POST /api/push, /api/post-data--> [This Backend] ---> [MongoDB]
                                                          ^
    [Dashboard] --GET /get-* (Bearer token)---------------+

WHAT DEVICES SEND:
    1. Location fixes (longitude/latitude)
    2. Call logs (number, type, date, duration)
    3. SMS (address, body, date)

    Call logs and SMS are de-duplicated per device: anything not newer
    than the newest stored date for that device is skipped.

HOW TO RUN:
    pip install -e .
    cp env.example.txt .env
    # Edit .env with your settings

    devicesync
    # or: uvicorn devicesync.main:app --reload --port 5000

API DOCUMENTATION:
    After starting the server, visit:
    - Swagger UI: http://localhost:5000/docs
    - ReDoc: http://localhost:5000/redoc
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo import MongoClient
from starlette.exceptions import HTTPException as StarletteHTTPException

from devicesync import __version__
from devicesync.config import Config
from devicesync.exceptions import DeviceSyncError, StoreError
from devicesync.middleware import BodySizeLimitMiddleware
from devicesync.models import MessageResponse
from devicesync.routers import (
    Services,
    auth_router,
    get_services,
    ingest_router,
    records_router,
    set_services,
)
from devicesync.services import (
    AuthService,
    IngestionService,
    KeepAliveService,
    QueryService,
    RecordStore,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO"):
    """Send every module's logger to stderr with timestamps."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_app(
    config: Optional[Config] = None,
    mongo_client=None,
    keep_alive: Optional[KeepAliveService] = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        config: Settings (default: read from the environment)
        mongo_client: A ready MongoClient-compatible client. If omitted, one
            is opened from ``config.mongo_uri`` at startup and closed at shutdown.
        keep_alive: Override for the keep-alive job. If omitted, one is
            created when ``config.self_url`` is set.
    """
    config = config or Config.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        STARTUP:
            1. Connect to MongoDB and make sure indexes exist
            2. Build the services and hand them to the routers
            3. Start the keep-alive ping (if SELF_URL is set)

        SHUTDOWN:
            1. Stop the keep-alive ping
            2. Close the database connection (if we opened it)
        """
        # ========== STARTUP ==========
        logger.info("=" * 60)
        logger.info(f"DEVICE SYNC BACKEND v{__version__} - Starting")
        logger.info("=" * 60)

        owns_client = mongo_client is None
        client = mongo_client or MongoClient(
            config.mongo_uri, tz_aware=True, serverSelectionTimeoutMS=5000
        )
        store = RecordStore(client[config.database_name])

        try:
            store.ensure_indexes()
            logger.info(f"MongoDB connected (database: {config.database_name})")
        except StoreError as e:
            # Keep serving; requests that need the store will answer 500
            logger.error(f"MongoDB setup failed: {e.message}")

        set_services(Services(
            store=store,
            ingestion=IngestionService(store),
            query=QueryService(store),
            auth=AuthService(
                store,
                provisioning_secret=config.provisioning_secret,
                token_secret=config.token_secret,
                token_ttl=config.token_ttl,
            ),
        ))

        pinger = keep_alive
        if pinger is None and config.self_url:
            pinger = KeepAliveService(config.self_url, interval=config.ping_interval)
        if pinger is not None:
            pinger.start()

        for key, value in config.summary().items():
            logger.info(f"   {key}: {value}")
        logger.info("Server ready")

        yield  # Application runs here

        # ========== SHUTDOWN ==========
        logger.info("Shutting down...")
        if pinger is not None:
            await pinger.shutdown()
        set_services(None)
        if owns_client:
            client.close()
        logger.info("Shutdown complete")

    app = FastAPI(
        title="Device Sync API",
        description="Collects location fixes, call logs and SMS pushed by devices.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # =========================================================================
    # REQUEST SIZE LIMIT
    # =========================================================================

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)

    # =========================================================================
    # ERROR HANDLERS - every error is {"error": "..."}
    # =========================================================================

    @app.exception_handler(DeviceSyncError)
    async def handle_devicesync_error(request: Request, exc: DeviceSyncError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            message = "Server error"
        else:
            message = exc.message
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            where = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"Invalid request: {where + ': ' if where else ''}{first.get('msg', 'invalid value')}"
        else:
            message = "Invalid request"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Server error"})

    # =========================================================================
    # ROUTERS
    # =========================================================================

    app.include_router(auth_router)
    app.include_router(ingest_router)
    app.include_router(records_router)

    # =========================================================================
    # ROOT ENDPOINTS
    # =========================================================================

    @app.get("/get", response_model=MessageResponse, summary="Liveness check")
    async def liveness():
        """Target of the keep-alive ping."""
        return {"message": "hello"}

    @app.get("/health", summary="Health Check")
    def health():
        """Liveness plus a database ping."""
        database_ok = get_services().store.ping()
        return {
            "status": "healthy",
            "database": "ok" if database_ok else "unavailable",
        }

    return app


_config = Config.from_env()
configure_logging(_config.log_level)
app = create_app(_config)


def run():
    """Console entry point: serve the app with uvicorn on HOST:PORT."""
    import uvicorn

    uvicorn.run(app, host=_config.host, port=_config.port)


if __name__ == "__main__":
    run()
