"""Request/response schemas for user registration and login."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CredentialsRequest(BaseModel):
    """
    Email and password from the request body.

    Both are optional here so that missing fields are reported by the
    service as 400, not by request validation as 422.
    """

    model_config = ConfigDict(extra="ignore")

    email: str | None = Field(default=None, description="Account email")
    password: str | None = Field(default=None, description="Plain-text password")


class RegisterRequest(CredentialsRequest):
    """Body for POST /users/register."""


class LoginRequest(CredentialsRequest):
    """Body for POST /users/login."""


class UserPublic(BaseModel):
    """User fields safe to return to clients (no password hash, no refresh token)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")
    updated_at: datetime | None = Field(default=None, serialization_alias="updatedAt")


class RegisterResponse(BaseModel):
    user: UserPublic
    message: str = "User created successfully"


class LoginResponse(BaseModel):
    """Login result: sanitized user plus both tokens (also sent as cookies)."""

    user: UserPublic
    access_token: str = Field(..., serialization_alias="accessToken")
    refresh_token: str = Field(..., serialization_alias="refreshToken")
    message: str = "Logged in successfully"


class MessageResponse(BaseModel):
    """Error body: every failure carries a single message."""

    message: str
