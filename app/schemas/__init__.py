"""Pydantic request/response schemas."""

from app.schemas.health import HealthResponse
from app.schemas.user import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    UserPublic,
)

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
    "UserPublic",
]
