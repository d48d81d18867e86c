"""Request/response schemas for auth and user-management endpoints."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, TypeAdapter, ValidationError, field_validator

from portal.core.security import EMAIL_MAX_LEN, PASSWORD_MAX_LEN, PASSWORD_MIN_LEN

Role = Literal["admin", "member"]

_EMAIL_ADAPTER = TypeAdapter(EmailStr)


def _check_email_format(v: str) -> str:
    """Validate the email format but keep the string exactly as typed (emails match case-sensitively)."""
    try:
        _EMAIL_ADAPTER.validate_python(v)
    except ValidationError:
        raise ValueError("value is not a valid email address") from None
    return v


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str = Field(..., max_length=EMAIL_MAX_LEN, description="Account email")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email_format(v)


class RegisterRequest(BaseModel):
    """Self-registration of a new member account."""

    email: str = Field(..., max_length=EMAIL_MAX_LEN)
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    name: str | None = Field(default=None, max_length=255)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email_format(v)


class ChangePasswordRequest(BaseModel):
    """Password change for the logged-in user."""

    current_password: str = Field(..., max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class AuthenticatedUser(BaseModel):
    """User record as exposed after authentication (never includes the hash)."""

    id: int
    email: str
    name: str | None = None
    role: Role
    is_active: bool = True

    class Config:
        from_attributes = True


class SessionUser(BaseModel):
    """Identity returned by login and /me."""

    id: int
    email: str
    name: str | None = None
    role: Role


class LoginResponse(BaseModel):
    success: bool = True
    user: SessionUser


class SuccessResponse(BaseModel):
    success: bool = True


class UserUpdateRequest(BaseModel):
    """Administrative update: toggle activity and/or change role."""

    is_active: bool | None = None
    role: Role | None = None


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[AuthenticatedUser]
