"""
Authentication flow.

    Anonymous --authenticate(email, password)--> Authenticated
    Authenticated --logout--> Anonymous

Registration lands directly in Authenticated. Presence events are
fire-and-forget: a failing notifier is logged and never fails the request.
"""
import logging
from typing import Optional

from fastapi import Response

from blog.core.errors import ForbiddenRoles, InvalidCredentials, InvalidRoles
from blog.core.presence import PresenceNotifier
from blog.core.roles import UserRole, find_invalid_roles
from blog.core.security import verify_password
from blog.core.session import clear_session_token, issue_session_token
from blog.services import accounts

logger = logging.getLogger("uvicorn.error")

PRESENCE_EVENT = "userStatus"


async def _notify(presence: Optional[PresenceNotifier], user_id, status: str) -> None:
    if presence is None:
        return
    try:
        await presence.publish(PRESENCE_EVENT, {"userId": str(user_id), "status": status})
    except Exception as e:
        logger.warning("[auth] presence broadcast failed for %s: %r", user_id, e)


async def authenticate(email: str, password: str, response: Response,
                       presence: Optional[PresenceNotifier] = None) -> dict:
    """
    Verify credentials and start a session.

    Unknown email and wrong password raise the same InvalidCredentials, so
    the response never reveals whether an address is registered.

    Returns:
        dict: serialized account plus ``token``
    """
    user = await accounts.find_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()

    token = issue_session_token(user.id, response)
    await _notify(presence, user.id, "active")
    logger.info("[auth] login id=%s", user.id)
    return {**accounts.user_to_dict(user), "token": token}


async def register(full_name, email, password, response: Response,
                   profile_image=None, username=None, roles=None,
                   allow_elevated_roles: bool = False) -> dict:
    """
    Create an account and start its session without re-verifying the password.

    Unknown roles raise InvalidRoles. Unless ``allow_elevated_roles`` is set,
    any role other than USER raises ForbiddenRoles, so anonymous callers
    cannot register themselves as administrators.
    """
    invalid = find_invalid_roles(roles or [])
    if invalid:
        raise InvalidRoles(invalid)
    if not allow_elevated_roles and any(r != UserRole.USER.value for r in roles or []):
        raise ForbiddenRoles()

    user = await accounts.create_account(
        full_name=full_name,
        email=email,
        password=password,
        profile_image=profile_image,
        username=username,
        roles=roles,
    )
    token = issue_session_token(user.id, response)
    return {**accounts.user_to_dict(user), "token": token}


async def logout(user, response: Response, presence: Optional[PresenceNotifier] = None) -> dict:
    clear_session_token(response)
    await _notify(presence, user.id, "inactive")
    logger.info("[auth] logout id=%s", user.id)
    return {"message": "Logged out successfully"}
