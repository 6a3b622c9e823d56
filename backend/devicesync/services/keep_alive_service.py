"""
Keep-Alive Service
==================

Pings our own liveness endpoint every 30 seconds.

Free hosting tiers put an app to sleep when nobody calls it for a while.
Pinging ``{SELF_URL}/get`` from inside the process keeps it awake.

Fire-and-forget: a failed ping is logged and the next one runs on
schedule. Nothing here touches request handling.
"""

import logging
from typing import Optional

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from devicesync.config import PING_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class KeepAliveService:
    """
    Periodic self-ping.

    Args:
        self_url: Base URL of this deployment (e.g. "https://my-app.onrender.com")
        interval: Seconds between pings
        http_client: Optional httpx.AsyncClient (tests pass one with a mock transport)
    """

    JOB_ID = "keep_alive_ping"

    def __init__(
        self,
        self_url: str,
        interval: int = PING_INTERVAL_SECONDS,
        http_client: Optional[httpx.AsyncClient] = None,
        request_timeout: float = 10.0,
    ):
        self.ping_url = f"{self_url.rstrip('/')}/get"
        self.interval = interval
        self.http_client = http_client or httpx.AsyncClient(timeout=request_timeout)
        self.scheduler: Optional[AsyncIOScheduler] = None

    def start(self):
        """Schedule the ping job. Must be called from inside the running event loop."""
        self.scheduler = AsyncIOScheduler()
        self.scheduler.add_job(
            self.ping,
            trigger=IntervalTrigger(seconds=self.interval),
            id=self.JOB_ID,
            replace_existing=True,
        )
        self.scheduler.start()
        logger.info(f"Keep-alive ping every {self.interval}s -> {self.ping_url}")

    async def ping(self) -> bool:
        """
        Hit the liveness endpoint once.

        Returns:
            True if it answered with a 2xx, False otherwise (never raises)
        """
        try:
            response = await self.http_client.get(self.ping_url)
            response.raise_for_status()
            logger.debug(f"Keep-alive ping OK ({response.status_code})")
            return True
        except httpx.HTTPStatusError as e:
            logger.warning(f"Keep-alive ping failed: HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.warning(f"Keep-alive ping failed: {e}")
        return False

    async def shutdown(self):
        """Stop the scheduler and close the HTTP client."""
        if self.scheduler is not None:
            try:
                self.scheduler.shutdown(wait=False)
            except Exception as e:
                logger.error(f"Error shutting down keep-alive scheduler: {e}", exc_info=True)
            self.scheduler = None

        await self.http_client.aclose()
