"""Pydantic request/response schemas."""

from portal.schemas.access_password import (
    AccessPasswordResponse,
    AccessPasswordSet,
    AccessPasswordVerify,
    PanelType,
)
from portal.schemas.auth import (
    AuthenticatedUser,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SessionUser,
    SuccessResponse,
    UsersListResponse,
    UserUpdateRequest,
)
from portal.schemas.health import HealthResponse

__all__ = [
    "AccessPasswordResponse",
    "AccessPasswordSet",
    "AccessPasswordVerify",
    "AuthenticatedUser",
    "ChangePasswordRequest",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "PanelType",
    "RegisterRequest",
    "SessionUser",
    "SuccessResponse",
    "UserUpdateRequest",
    "UsersListResponse",
]
