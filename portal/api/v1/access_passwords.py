"""Per-panel shared access passwords: admin get/set, public verify."""

from typing import Annotated

from fastapi import APIRouter, Depends

from portal.api.deps import get_panel_gate
from portal.api.v1.auth import get_current_user
from portal.schemas.access_password import (
    AccessPasswordResponse,
    AccessPasswordSet,
    AccessPasswordVerify,
    PanelType,
)
from portal.schemas.auth import AuthenticatedUser
from portal.services.panel_gate import PanelGate

router = APIRouter()


@router.get("/{panel_type}", response_model=AccessPasswordResponse | None)
def get_access_password(
    panel_type: PanelType,
    gate: Annotated[PanelGate, Depends(get_panel_gate)],
    _user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AccessPasswordResponse | None:
    """Return the stored password for the panel, or null if none has been set."""
    row = gate.get_password(panel_type)
    if row is None:
        return None
    return AccessPasswordResponse.model_validate(row)


@router.put("/{panel_type}", response_model=AccessPasswordResponse)
def set_access_password(
    panel_type: PanelType,
    body: AccessPasswordSet,
    gate: Annotated[PanelGate, Depends(get_panel_gate)],
    _user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AccessPasswordResponse:
    """Create or overwrite the panel's password."""
    row = gate.set_password(panel_type, body.password)
    return AccessPasswordResponse.model_validate(row)


@router.post("/{panel_type}/verify", response_model=bool)
def verify_access_password(
    panel_type: PanelType,
    body: AccessPasswordVerify,
    gate: Annotated[PanelGate, Depends(get_panel_gate)],
) -> bool:
    """Public check used by the panel pages; false when no password is set."""
    return gate.verify_password(panel_type, body.password)
