"""
Moderation: the per-account ban flag.

Only ``is_banned`` is written, through the account store's update path.
Both operations are idempotent. Rejecting requests from banned accounts is
the job of the request dependencies, not of this module.
"""
import logging

from blog.services import accounts

logger = logging.getLogger("uvicorn.error")


async def _set_banned(user_id, banned: bool):
    u = await accounts.get_account_or_raise(user_id)
    if u.is_banned != banned:
        u.is_banned = banned
        await accounts.persist(u, ["is_banned"])
        logger.info("[moderation] id=%s banned=%s", u.id, banned)
    return u


async def ban_user(user_id) -> dict:
    u = await _set_banned(user_id, True)
    return {"message": "User banned successfully", "user": accounts.user_to_dict(u)}


async def unban_user(user_id) -> dict:
    u = await _set_banned(user_id, False)
    return {"message": "User unbanned successfully", "user": accounts.user_to_dict(u)}
