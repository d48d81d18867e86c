"""Registration, authentication and password changes for internal users."""

import logging

from portal.core.security import BCRYPT_ROUNDS, MalformedHashError, hash_password, verify_password
from portal.models.user import ROLE_MEMBER, VALID_ROLES, InternalUser
from portal.schemas.auth import AuthenticatedUser
from portal.services.credential_store import CredentialStore
from portal.services.errors import (
    AccountInactiveError,
    DuplicateCredentialError,
    InvalidCredentialsError,
    UserNotFoundError,
)

logger = logging.getLogger(__name__)


def _validate_role(role: str) -> str:
    if role not in VALID_ROLES:
        raise ValueError(f"role must be one of {', '.join(VALID_ROLES)}")
    return role


class AuthService:
    """
    Authentication flow over an injected CredentialStore.

    Account state is Active/Inactive only; transitions happen through
    set_active() and never automatically (no lockout after failed attempts).
    """

    def __init__(self, store: CredentialStore, bcrypt_rounds: int = BCRYPT_ROUNDS) -> None:
        self.store = store
        self.bcrypt_rounds = bcrypt_rounds

    def register(
        self,
        email: str,
        password: str,
        name: str | None = None,
        role: str = ROLE_MEMBER,
    ) -> int:
        """
        Create an active user and return its id. Does not log the user in.

        The lookup is only a fast path for a clear error; the store's unique
        index is what actually rejects a concurrent duplicate.
        """
        _validate_role(role)
        if self.store.get_by_email(email) is not None:
            logger.info("Registration rejected: email already exists (email=%s)", email)
            raise DuplicateCredentialError()
        password_hash = hash_password(password, rounds=self.bcrypt_rounds)
        user = self.store.create(
            email=email,
            password_hash=password_hash,
            name=name,
            role=role,
            is_active=True,
        )
        logger.info("Registered user id=%s role=%s", user.id, user.role)
        return user.id

    def _check_password(self, user: InternalUser, password: str) -> bool:
        try:
            return verify_password(password, user.password_hash)
        except MalformedHashError:
            logger.error("Stored password hash for user id=%s is malformed", user.id)
            return False

    def authenticate(self, email: str, password: str) -> AuthenticatedUser:
        """
        Return the user for a valid email/password pair.

        Unknown email and wrong password raise the same InvalidCredentialsError;
        the distinction only appears in the logs.
        """
        user = self.store.get_by_email(email)
        if user is None:
            logger.info("Login failed: unknown email (email=%s)", email)
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.warning("Login refused: inactive account (user id=%s)", user.id)
            raise AccountInactiveError()
        if not self._check_password(user, password):
            logger.info("Login failed: wrong password (user id=%s)", user.id)
            raise InvalidCredentialsError()
        return AuthenticatedUser.model_validate(user)

    def change_password(self, user_id: int, current_password: str, new_password: str) -> bool:
        """
        Re-verify current_password against the acting user's own stored hash,
        then replace the hash with one for new_password.
        """
        user = self.store.get_by_id(user_id)
        if user is None:
            logger.warning("Password change for missing user id=%s", user_id)
            raise InvalidCredentialsError()
        if not user.is_active:
            logger.warning("Password change rejected: inactive account (user id=%s)", user_id)
            raise InvalidCredentialsError()
        if not self._check_password(user, current_password):
            logger.info("Password change rejected: wrong current password (user id=%s)", user_id)
            raise InvalidCredentialsError()
        self.store.update(
            user_id,
            password_hash=hash_password(new_password, rounds=self.bcrypt_rounds),
        )
        logger.info("Password changed for user id=%s", user_id)
        return True

    def get_user(self, user_id: int) -> AuthenticatedUser | None:
        user = self.store.get_by_id(user_id)
        if user is None:
            return None
        return AuthenticatedUser.model_validate(user)

    def list_users(self) -> list[AuthenticatedUser]:
        return [AuthenticatedUser.model_validate(u) for u in self.store.list_users()]

    def set_active(self, user_id: int, is_active: bool) -> AuthenticatedUser:
        """Administrative Active <-> Inactive transition."""
        user = self.store.update(user_id, is_active=is_active)
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info("User id=%s is_active=%s", user_id, is_active)
        return AuthenticatedUser.model_validate(user)

    def set_role(self, user_id: int, role: str) -> AuthenticatedUser:
        user = self.store.update(user_id, role=_validate_role(role))
        if user is None:
            raise UserNotFoundError(user_id)
        logger.info("User id=%s role=%s", user_id, role)
        return AuthenticatedUser.model_validate(user)
