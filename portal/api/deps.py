"""Shared FastAPI dependencies: settings and service construction per request."""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from portal.core.config import Settings
from portal.core.database import get_db
from portal.services.auth import AuthService
from portal.services.credential_store import SqlCredentialStore
from portal.services.panel_gate import PanelGate


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with (see create_app)."""
    return request.app.state.settings


def get_auth_service(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    return AuthService(SqlCredentialStore(db), bcrypt_rounds=settings.BCRYPT_ROUNDS)


def get_panel_gate(db: Annotated[Session, Depends(get_db)]) -> PanelGate:
    return PanelGate(db)
