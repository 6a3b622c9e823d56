"""
Auth API Router
===============

POST /api/register      - Create a user (needs the provisioning secret)
GET  /api/access-token  - Trade username + password for a token
"""

from typing import Optional

from fastapi import APIRouter, Depends, status

from devicesync.models import ErrorResponse, RegisterRequest, RegisterResponse, TokenResponse
from devicesync.routers.dependencies import get_auth_service
from devicesync.services import AuthService

router = APIRouter(
    prefix="/api",
    tags=["auth"],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a user",
)
def register(
    request: RegisterRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Register a dashboard user.

    **Body (JSON)**
    - username, password (required)
    - provisioningSecret (required): the shared secret from the server's environment

    Returns a token valid for 7 days.
    """
    token = auth.register(request.username, request.password, request.provisioningSecret)
    return RegisterResponse(message="User registered successfully", token=token)


@router.get(
    "/access-token",
    response_model=TokenResponse,
    summary="Get an access token",
)
def access_token(
    username: Optional[str] = None,
    password: Optional[str] = None,
    auth: AuthService = Depends(get_auth_service),
):
    """Log in with query parameters ``username`` and ``password``."""
    return TokenResponse(token=auth.login(username, password))
