"""
API request and response models for the user management REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Required-field checks for login and user creation are NOT expressed as
required Pydantic fields: clients expect a 400 naming the missing field, not
a 422 validation envelope. The fields are Optional here and checked with
core.errors.require_fields() in the handlers.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import User

# Passwords are hashed on their first 72 UTF-8 bytes; see auth.tokens.
_MAX_PASSWORD = 72


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class StatusEnum(str, Enum):
    active = "active"
    inactive = "inactive"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /login."""

    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    """Response body for a successful POST /login."""

    model_config = ConfigDict(frozen=True)

    message: str = "Login successful"
    token: str


class StatusMessage(BaseModel):
    """Response body for POST /logout."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    message: str


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Request body for POST /users."""

    firstname: Optional[str] = Field(default=None, max_length=255)
    fullname: Optional[str] = Field(default=None, max_length=255)
    lastname: Optional[str] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=_MAX_PASSWORD)
    status: StatusEnum = StatusEnum.active


class UserUpdate(BaseModel):
    """Request body for PUT /users/{id}. Only the fields sent are changed."""

    firstname: Optional[str] = Field(default=None, max_length=255)
    fullname: Optional[str] = Field(default=None, max_length=255)
    lastname: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, min_length=1, max_length=_MAX_PASSWORD)


class UserSummaryRow(BaseModel):
    """One row in the GET /users list."""

    model_config = ConfigDict(frozen=True)

    id: int
    firstname: Optional[str]
    fullname: Optional[str]
    lastname: Optional[str]


class UserResponse(BaseModel):
    """A single user record. The password hash is never part of it."""

    model_config = ConfigDict(frozen=True)

    id: int
    firstname: Optional[str]
    fullname: Optional[str]
    lastname: Optional[str]
    username: str
    status: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            firstname=user.firstname,
            fullname=user.fullname,
            lastname=user.lastname,
            username=user.username,
            status=user.status,
        )


# ---------------------------------------------------------------------------
# System
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "operational"
    service: str
    version: str
    timestamp: str
    database: str


class PingResponse(BaseModel):
    """Response for GET /ping."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    time: str


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Error envelope for request-schema validation failures (422)."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail
