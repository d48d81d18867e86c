"""Cookie-session login/logout, registration, password change and auth dependencies."""

import logging
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from portal.api.deps import get_app_settings, get_auth_service
from portal.core.config import Settings
from portal.core.security import decode_session_token
from portal.core.session import clear_session, issue_session
from portal.schemas.auth import (
    AuthenticatedUser,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    SessionUser,
    SuccessResponse,
)
from portal.services.auth import AuthService
from portal.services.errors import AuthError

logger = logging.getLogger(__name__)
router = APIRouter()

INVALID_LOGIN_DETAIL = "Invalid email or password"


def _session_user(user: AuthenticatedUser) -> SessionUser:
    return SessionUser(id=user.id, email=user.email, name=user.name, role=user.role)


def get_current_user_optional(
    request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthenticatedUser | None:
    """Dependency: resolve the session cookie to an active user, or None."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        payload = decode_session_token(token, settings=settings)
    except jwt.PyJWTError:
        return None
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        return None
    user = auth.get_user(user_id)
    if user is None or not user.is_active:
        return None
    return user


def get_current_user(
    user: Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)],
) -> AuthenticatedUser:
    """Dependency: require a valid session cookie. Raises 401 if missing or invalid."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_admin(
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AuthenticatedUser:
    """Dependency: require authenticated user with role 'admin'. Raises 403 for non-admin."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> LoginResponse:
    """
    Authenticate with email and password and set the session cookie.
    Every credential failure (unknown email, wrong password, inactive account) returns
    the same 401 so responses cannot be used to enumerate accounts.
    """
    try:
        user = auth.authenticate(body.email, body.password)
    except AuthError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_LOGIN_DETAIL,
        )
    issue_session(response, request, user_id=user.id, role=user.role, settings=settings)
    logger.info("User id=%s logged in", user.id)
    return LoginResponse(success=True, user=_session_user(user))


@router.post("/register", response_model=SuccessResponse)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SuccessResponse:
    """Create a member account. Does not log the new user in."""
    if not settings.REGISTRATION_ENABLED:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Registration is disabled",
        )
    try:
        auth.register(body.email, body.password, name=body.name)
    except (AuthError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create user",
        )
    return SuccessResponse(success=True)


@router.post("/change-password", response_model=SuccessResponse)
def change_password(
    body: ChangePasswordRequest,
    current_user: Annotated[AuthenticatedUser, Depends(get_current_user)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> SuccessResponse:
    """Change the logged-in user's password after re-checking the current one."""
    try:
        auth.change_password(current_user.id, body.current_password, body.new_password)
    except AuthError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )
    return SuccessResponse(success=True)


@router.get("/me", response_model=SessionUser | None)
def me(
    user: Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)],
) -> SessionUser | None:
    """Current identity, or null when there is no valid session."""
    if user is None:
        return None
    return _session_user(user)


@router.post("/logout", response_model=SuccessResponse)
def logout(
    request: Request,
    response: Response,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> SuccessResponse:
    """
    Clear the session cookie. The token itself is not revoked (sessions are stateless),
    so a copy of it stays valid until it expires.
    """
    clear_session(response, request, settings)
    return SuccessResponse(success=True)
