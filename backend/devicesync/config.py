"""
Configuration
=============

Application configuration loaded from environment variables.

Environment Variables:
    MONGO_URI: MongoDB connection string (default: mongodb://localhost:27017)
    MONGO_DB: Database name (default: devicesync)
    HOST / PORT: Where uvicorn listens (default: 0.0.0.0:5000)
    PROVISIONING_SECRET: Shared secret required to register a user
    JWT_SECRET: Secret used to sign access tokens
    SELF_URL: Base URL the keep-alive job pings (unset = disabled)
    CORS_ORIGINS: Comma-separated list of allowed origins (default: *)
    LOG_LEVEL: Logging level (default: INFO)

A ``.env`` file next to the process is picked up automatically.
"""

import logging
import os
import secrets
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


# Fixed by contract, not configurable
PING_INTERVAL_SECONDS = 30
TOKEN_TTL = timedelta(days=7)
TOKEN_ALGORITHM = "HS256"
MAX_BODY_BYTES = 50 * 1024 * 1024


class Config:
    """
    Settings for one running process.

    Built once at startup and handed to each service's constructor.
    Every argument falls back to its environment variable, so tests can
    build a Config directly without touching os.environ.
    """

    def __init__(
        self,
        mongo_uri: Optional[str] = None,
        database_name: Optional[str] = None,
        host: Optional[str] = None,
        port: Optional[int] = None,
        provisioning_secret: Optional[str] = None,
        token_secret: Optional[str] = None,
        self_url: Optional[str] = None,
        cors_origins: Optional[list[str]] = None,
        log_level: Optional[str] = None,
    ):
        self.mongo_uri = mongo_uri or os.getenv("MONGO_URI", "mongodb://localhost:27017")
        self.database_name = database_name or os.getenv("MONGO_DB", "devicesync")
        self.host = host or os.getenv("HOST", "0.0.0.0")
        self.port = port or int(os.getenv("PORT", "5000"))

        # Empty secret = registration is closed
        self.provisioning_secret = (
            provisioning_secret
            if provisioning_secret is not None
            else os.getenv("PROVISIONING_SECRET", "")
        )

        self.token_secret = token_secret or os.getenv("JWT_SECRET", "")
        if not self.token_secret:
            logger.warning(
                "JWT_SECRET not set. Using a random per-process secret; "
                "issued tokens will stop working after a restart."
            )
            self.token_secret = secrets.token_urlsafe(48)

        self.self_url = (self_url or os.getenv("SELF_URL", "")).rstrip("/") or None

        if cors_origins is None:
            raw = os.getenv("CORS_ORIGINS", "*")
            cors_origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        self.cors_origins = cors_origins

        self.log_level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()

        self.ping_interval = PING_INTERVAL_SECONDS
        self.token_ttl = TOKEN_TTL
        self.max_body_bytes = MAX_BODY_BYTES

    @classmethod
    def from_env(cls) -> "Config":
        """Read a ``.env`` file (if any) and build the config from the environment."""
        load_dotenv()
        return cls()

    def summary(self) -> dict:
        """Loggable view of the config. Secrets are reported as set/unset only."""
        return {
            "database": self.database_name,
            "port": self.port,
            "provisioning_secret": "set" if self.provisioning_secret else "unset",
            "self_url": self.self_url or "disabled",
            "ping_interval": self.ping_interval,
            "cors_origins": len(self.cors_origins),
        }
