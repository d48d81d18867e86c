"""Shared per-panel access passwords (visitors, prayers, raffles).

These passwords are a lightweight gate in front of the public panels, not
user credentials: they are stored in plain text and compared with ==.
"""

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.models import AccessPassword
from portal.models.access_password import PANEL_TYPES
from portal.services.errors import StoreUnavailableError

logger = logging.getLogger(__name__)


def _validate_panel_type(panel_type: str) -> str:
    if panel_type not in PANEL_TYPES:
        raise ValueError(f"panel_type must be one of {', '.join(PANEL_TYPES)}")
    return panel_type


class PanelGate:
    """Get/set/verify the access password for each panel type."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_password(self, panel_type: str) -> AccessPassword | None:
        _validate_panel_type(panel_type)
        try:
            return (
                self.session.query(AccessPassword)
                .filter(AccessPassword.panel_type == panel_type)
                .first()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Access password lookup failed: %s", e)
            raise StoreUnavailableError() from e

    def set_password(self, panel_type: str, password: str) -> AccessPassword:
        """
        Overwrite the panel's password, inserting the row on first use.

        If a concurrent writer inserts the row first, the unique panel_type
        index rejects our insert; the row is then re-read and overwritten.
        """
        row = self.get_password(panel_type)
        if row is None:
            row = AccessPassword(panel_type=panel_type, password=password)
            self.session.add(row)
        else:
            row.password = password
        try:
            self.session.commit()
        except IntegrityError:
            self.session.rollback()
            logger.info("Access password for panel=%s inserted concurrently; overwriting", panel_type)
            row = self.get_password(panel_type)
            if row is None:
                logger.error("Access password row for panel=%s vanished after conflict", panel_type)
                raise StoreUnavailableError()
            row.password = password
            self._commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Access password update failed: %s", e)
            raise StoreUnavailableError() from e
        self.session.refresh(row)
        logger.info("Access password set for panel=%s", panel_type)
        return row

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error("Access password update failed: %s", e)
            raise StoreUnavailableError() from e

    def verify_password(self, panel_type: str, password: str) -> bool:
        """False when no password is set; otherwise exact string equality."""
        row = self.get_password(panel_type)
        if row is None:
            return False
        return row.password == password
