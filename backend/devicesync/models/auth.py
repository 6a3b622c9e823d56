"""
Auth Models
===========
Users, tokens and the bodies of the register/login endpoints.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from devicesync.utils.validation import as_utc


class User(BaseModel):
    """
    A registered user as stored.

    Only the bcrypt hash is kept, never the password itself.
    """
    id: str = Field(..., description="Store-assigned identifier")
    username: str = Field(..., description="Unique username")
    passwordHash: str = Field(..., description="bcrypt hash of the password")
    createdAt: datetime = Field(..., description="Registration time (UTC)")

    @classmethod
    def from_document(cls, document: dict) -> "User":
        return cls(
            id=str(document["_id"]),
            username=document["username"],
            passwordHash=document["passwordHash"],
            createdAt=as_utc(document["createdAt"]),
        )


class TokenIdentity(BaseModel):
    """What a verified token tells us about the caller."""
    user_id: str
    username: str
    expires_at: datetime


class RegisterRequest(BaseModel):
    """
    Body for POST /api/register.

    Example Request:
        POST /api/register
        {"username": "ops", "password": "hunter22", "provisioningSecret": "..."}
    """
    username: Optional[str] = Field(None, description="Desired username")
    password: Optional[str] = Field(None, description="Plain password (hashed before storage)")
    provisioningSecret: Optional[str] = Field(None, description="Shared registration secret")


class RegisterResponse(BaseModel):
    message: str
    token: str


class TokenResponse(BaseModel):
    token: str


class ErrorResponse(BaseModel):
    error: str
