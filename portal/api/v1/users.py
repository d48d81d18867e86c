"""Admin management of internal users: list, enable/disable, change role."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from portal.api.deps import get_auth_service
from portal.api.v1.auth import require_admin
from portal.schemas.auth import AuthenticatedUser, UsersListResponse, UserUpdateRequest
from portal.services.auth import AuthService
from portal.services.errors import UserNotFoundError

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[AuthenticatedUser, Depends(require_admin)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> UsersListResponse:
    """List all internal users (admin only, no password hashes)."""
    return UsersListResponse(users=auth.list_users())


@router.patch("/{user_id}", response_model=AuthenticatedUser)
def update_user(
    user_id: int,
    body: UserUpdateRequest,
    admin: Annotated[AuthenticatedUser, Depends(require_admin)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthenticatedUser:
    """Toggle a user's active flag and/or role. Admins cannot deactivate or demote themselves."""
    if user_id == admin.id and (body.is_active is False or body.role == "member"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Admins cannot deactivate or demote their own account.",
        )
    try:
        user = auth.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if body.is_active is not None:
            user = auth.set_active(user_id, body.is_active)
        if body.role is not None:
            user = auth.set_role(user_id, body.role)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    return user
