"""Session cookie issuance and clearing.

Sessions are stateless: the cookie carries a signed token and nothing is stored
server-side, so logout only clears the cookie in the browser. A copied token
stays valid until it expires.
"""

from typing import Any

from fastapi import Request, Response

from portal.core.config import Settings
from portal.core.security import create_session_token


def is_secure_request(request: Request) -> bool:
    """True when the request reached us over HTTPS (directly or via a proxy)."""
    forwarded = request.headers.get("x-forwarded-proto", "")
    if forwarded:
        return forwarded.split(",")[0].strip().lower() == "https"
    return request.url.scheme == "https"


def session_cookie_options(request: Request) -> dict[str, Any]:
    return {
        "httponly": True,
        "samesite": "lax",
        "secure": is_secure_request(request),
        "path": "/",
    }


def issue_session(
    response: Response,
    request: Request,
    user_id: int,
    role: str,
    settings: Settings,
) -> str:
    """Mint a session token for the user and set it as the session cookie."""
    token = create_session_token(sub=user_id, role=role, settings=settings)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.JWT_EXPIRE_MINUTES * 60,
        **session_cookie_options(request),
    )
    return token


def clear_session(response: Response, request: Request, settings: Settings) -> None:
    """Expire the session cookie immediately (max-age 0, past expiry)."""
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        **session_cookie_options(request),
    )
