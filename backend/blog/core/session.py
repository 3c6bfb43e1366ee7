# blog/core/session.py
"""
Session cookie handling.

The session token travels in an HttpOnly cookie (and in the response body for
non-browser clients). Logging out overwrites the cookie with an expired empty
value; there is no server-side revocation list.
"""
import datetime as dt

from fastapi import Response

from blog.config import settings
from blog.core.security import create_access_token

EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


def _cookie_policy() -> dict:
    return {
        "httponly": True,
        "secure": not settings.is_development,
        "samesite": "strict",
    }


def issue_session_token(user_id, response: Response) -> str:
    """
    Create a session token for ``user_id`` and attach it to ``response``.

    Returns:
        The encoded token, so callers can also return it in the body.
    """
    token = create_access_token(str(user_id))
    response.set_cookie(
        settings.session_cookie_name,
        token,
        max_age=settings.token_expire_days * 24 * 60 * 60,
        **_cookie_policy(),
    )
    return token


def clear_session_token(response: Response) -> None:
    """Overwrite the session cookie with an already-expired empty value."""
    response.set_cookie(
        settings.session_cookie_name,
        "",
        max_age=0,
        expires=EPOCH,
        **_cookie_policy(),
    )
