"""
Ingestion API Router
====================

The endpoints devices push to. No auth: devices only know their own
identifier.

POST /api/push       - One location fix
POST /api/post-data  - Periodic batch: location + call logs + SMS
"""

from fastapi import APIRouter, Depends

from devicesync.models import (
    ErrorResponse,
    PostDataRequest,
    PostDataResponse,
    PushLocationRequest,
    PushLocationResponse,
)
from devicesync.routers.dependencies import get_ingestion_service
from devicesync.services import IngestionService

router = APIRouter(
    prefix="/api",
    tags=["ingestion"],
    responses={400: {"model": ErrorResponse}},
)


@router.post("/push", response_model=PushLocationResponse)
def push_location(
    body: PushLocationRequest,
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """
    Store one location fix.

    **Body (JSON)**
    - long, lat (required): JSON numbers
    - device (optional): device identifier
    """
    record = ingestion.submit_location(body.long, body.lat, body.device)
    return PushLocationResponse(message="Location saved", data=record)


@router.post("/post-data", response_model=PostDataResponse)
def post_data(
    body: PostDataRequest,
    ingestion: IngestionService = Depends(get_ingestion_service),
):
    """
    Store a device's batch.

    Call logs and messages older than (or equal to) what we already have
    for this device are skipped. The response says how many of each kind
    were stored.
    """
    return ingestion.submit_batch(
        device=body.device,
        latitude=body.latitude,
        longitude=body.longitude,
        call_logs=body.callLogs,
        messages=body.messages,
    )
