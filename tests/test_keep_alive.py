from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

from devicesync.services import KeepAliveService


def _service(handler) -> KeepAliveService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return KeepAliveService("https://devicesync.example.com/", http_client=client)


@pytest.mark.asyncio
async def test_ping_hits_liveness_endpoint() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"message": "hello"})

    service = _service(handler)

    assert await service.ping() is True
    assert seen == ["https://devicesync.example.com/get"]
    await service.shutdown()


@pytest.mark.asyncio
async def test_ping_failure_status_is_swallowed() -> None:
    service = _service(lambda request: httpx.Response(503))

    assert await service.ping() is False
    await service.shutdown()


@pytest.mark.asyncio
async def test_ping_connection_error_is_swallowed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    service = _service(handler)

    assert await service.ping() is False
    await service.shutdown()


@pytest.mark.asyncio
async def test_start_schedules_ping_every_thirty_seconds() -> None:
    service = _service(lambda request: httpx.Response(200))

    service.start()
    job = service.scheduler.get_job(KeepAliveService.JOB_ID)

    assert job is not None
    assert job.trigger.interval == timedelta(seconds=30)
    await service.shutdown()
    assert service.scheduler is None
