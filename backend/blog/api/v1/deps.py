# blog/api/v1/deps.py
from fastapi import Depends, Header, HTTPException, Request, status
from blog.config import settings
from blog.core.presence import PresenceNotifier
from blog.core.roles import UserRole, has_role
from blog.core.security import decode_access_token
from blog.models.user import User
from blog.services import accounts

async def get_current_user(
    request: Request,
    authorization: str | None = Header(default=None),
) -> User:
    """
    FastAPI dependency to get the current authenticated account.

    The session token is read from either:
    1. Authorization header (Bearer token) - preferred method
    2. HttpOnly cookie (jwt) - browser clients

    Raises:
        HTTPException (401): No token (AUTH_REQUIRED), bad/expired token
            (AUTH_INVALID_TOKEN) or account no longer exists (AUTH_USER_NOT_FOUND)
        HTTPException (403): Account is banned (ACCOUNT_BANNED)
    """
    token = None
    # 1) Prioritize Authorization: Bearer xxx
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()
    # 2) Secondly HttpOnly Cookie
    if not token:
        token = request.cookies.get(settings.session_cookie_name)

    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_REQUIRED")

    try:
        payload = decode_access_token(token)
        user_id: str = payload.get("sub")
    except Exception:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_INVALID_TOKEN")

    user = await accounts.get_account(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="AUTH_USER_NOT_FOUND")
    if user.is_banned:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="ACCOUNT_BANNED")
    return user

async def require_admin(current: User = Depends(get_current_user)) -> User:
    """
    FastAPI dependency to ensure the current account holds the ADMIN role.

    Raises:
        HTTPException (403): If the account is not an admin (FORBIDDEN_ADMIN_ONLY)
    """
    if not has_role(current, UserRole.ADMIN):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="FORBIDDEN_ADMIN_ONLY")
    return current

def get_presence(request: Request) -> PresenceNotifier:
    """Presence notifier installed on the application at startup."""
    return request.app.state.presence
