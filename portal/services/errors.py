"""Typed errors raised by the credential store, auth flow and panel gate."""


class AuthError(Exception):
    """Base for authentication/registration failures (map to 4xx at the API)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateCredentialError(AuthError):
    """Raised when registering an email that already exists."""

    def __init__(self, message: str = "User already exists") -> None:
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """Raised for unknown email or wrong password; the message never says which."""

    def __init__(self, message: str = "Invalid email or password") -> None:
        super().__init__(message)


class AccountInactiveError(AuthError):
    """Raised when an inactive account presents correct or incorrect credentials."""

    def __init__(self, message: str = "User account is inactive") -> None:
        super().__init__(message)


class UserNotFoundError(AuthError):
    """Raised by administrative updates that target a missing user id."""

    def __init__(self, user_id: int) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} not found")


class StoreUnavailableError(Exception):
    """Raised when the persistence layer cannot be reached or fails; maps to 503."""

    def __init__(self, message: str = "Credential store unavailable") -> None:
        self.message = message
        super().__init__(message)
