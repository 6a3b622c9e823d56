"""
Records API Router
==================

Read endpoints for the dashboard. All of them need a bearer token
from /api/register or /api/access-token.

GET /get-location     - All location fixes
GET /get-call-logs    - All call logs
GET /get-sms          - All SMS
GET /get-single-logs  - Call logs for one ?number
GET /get-single-sms   - SMS for one ?address
"""

from typing import Optional

from fastapi import APIRouter, Depends

from devicesync.models import CallLogRecord, ErrorResponse, LocationRecord, RecordKind, SmsRecord
from devicesync.routers.dependencies import get_query_service, require_token
from devicesync.services import QueryService

router = APIRouter(
    tags=["records"],
    dependencies=[Depends(require_token)],
    responses={401: {"model": ErrorResponse}},
)


@router.get("/get-location", response_model=list[LocationRecord])
def get_locations(query: QueryService = Depends(get_query_service)):
    return query.get_all(RecordKind.LOCATION)


@router.get("/get-call-logs", response_model=list[CallLogRecord])
def get_call_logs(query: QueryService = Depends(get_query_service)):
    return query.get_all(RecordKind.CALL_LOG)


@router.get("/get-sms", response_model=list[SmsRecord])
def get_sms(query: QueryService = Depends(get_query_service)):
    return query.get_all(RecordKind.SMS)


@router.get("/get-single-logs", response_model=list[CallLogRecord])
def get_single_logs(
    number: Optional[str] = None,
    query: QueryService = Depends(get_query_service),
):
    """Call logs whose number matches ``?number=`` exactly."""
    return query.get_by_number(number)


@router.get("/get-single-sms", response_model=list[SmsRecord])
def get_single_sms(
    address: Optional[str] = None,
    query: QueryService = Depends(get_query_service),
):
    """SMS whose address matches ``?address=`` exactly."""
    return query.get_by_sms_address(address)
