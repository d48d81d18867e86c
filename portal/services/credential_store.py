"""Persistence boundary for internal user accounts."""

import logging
from typing import Any, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from portal.models import InternalUser
from portal.services.errors import DuplicateCredentialError, StoreUnavailableError

logger = logging.getLogger(__name__)

# Columns callers may change through update(); id and timestamps are managed here.
UPDATABLE_FIELDS = frozenset({"email", "password_hash", "name", "role", "is_active"})


class CredentialStore(Protocol):
    """What the auth flow needs from persistence; storage engine is not its concern."""

    def get_by_email(self, email: str) -> InternalUser | None: ...

    def get_by_id(self, user_id: int) -> InternalUser | None: ...

    def create(
        self,
        email: str,
        password_hash: str,
        name: str | None,
        role: str,
        is_active: bool = True,
    ) -> InternalUser: ...

    def update(self, user_id: int, **fields: Any) -> InternalUser | None: ...

    def delete(self, user_id: int) -> bool: ...

    def list_users(self) -> list[InternalUser]: ...


class SqlCredentialStore:
    """
    CredentialStore backed by a SQLAlchemy session.

    Email uniqueness is guaranteed by the unique index on internal_users.email;
    an IntegrityError on insert surfaces as DuplicateCredentialError. Every other
    database error is rolled back and re-raised as StoreUnavailableError.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _unavailable(self, action: str, exc: SQLAlchemyError) -> StoreUnavailableError:
        self.session.rollback()
        logger.error("Credential store %s failed: %s", action, exc)
        return StoreUnavailableError()

    def get_by_email(self, email: str) -> InternalUser | None:
        try:
            return (
                self.session.query(InternalUser)
                .filter(InternalUser.email == email)
                .first()
            )
        except SQLAlchemyError as e:
            raise self._unavailable("lookup by email", e) from e

    def get_by_id(self, user_id: int) -> InternalUser | None:
        try:
            return self.session.get(InternalUser, user_id)
        except SQLAlchemyError as e:
            raise self._unavailable("lookup by id", e) from e

    def create(
        self,
        email: str,
        password_hash: str,
        name: str | None,
        role: str,
        is_active: bool = True,
    ) -> InternalUser:
        user = InternalUser(
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            is_active=is_active,
        )
        try:
            self.session.add(user)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateCredentialError() from e
        except SQLAlchemyError as e:
            raise self._unavailable("create", e) from e
        self.session.refresh(user)
        return user

    def update(self, user_id: int, **fields: Any) -> InternalUser | None:
        """Apply a partial update; fields not passed are left untouched."""
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        user = self.get_by_id(user_id)
        if user is None:
            return None
        for key, value in fields.items():
            setattr(user, key, value)
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateCredentialError() from e
        except SQLAlchemyError as e:
            raise self._unavailable("update", e) from e
        self.session.refresh(user)
        return user

    def delete(self, user_id: int) -> bool:
        user = self.get_by_id(user_id)
        if user is None:
            return False
        try:
            self.session.delete(user)
            self.session.commit()
        except SQLAlchemyError as e:
            raise self._unavailable("delete", e) from e
        return True

    def list_users(self) -> list[InternalUser]:
        try:
            return (
                self.session.query(InternalUser)
                .order_by(InternalUser.created_at, InternalUser.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._unavailable("list", e) from e
