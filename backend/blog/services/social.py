"""
Social graph: directed follow edges between accounts.

This module is the only reader/writer of ``Follow``. Account existence is
checked through the account store, never through the ``User`` model.

Policies:
- following an account twice raises AlreadyFollowing
- unfollowing an account that is not followed succeeds (idempotent)
"""
import logging

from blog.core.errors import AlreadyFollowing, NotFound, SelfFollow, storage_guard
from blog.models.follow import Follow
from blog.services import accounts

logger = logging.getLogger("uvicorn.error")


async def _resolve_pair(follower_id, following_id):
    # Compare parsed UUIDs: "ABC...", "{abc...}" and "urn:uuid:abc..." are one account
    follower_pk = accounts.parse_id(follower_id)
    if follower_pk is not None and follower_pk == accounts.parse_id(following_id):
        raise SelfFollow()
    follower = await accounts.get_account(follower_id)
    following = await accounts.get_account(following_id)
    if follower is None or following is None:
        raise NotFound()
    return follower, following


async def follow_counts(user_id) -> dict:
    with storage_guard():
        followers = await Follow.filter(following_id=user_id).count()
        following = await Follow.filter(follower_id=user_id).count()
    return {"followersCount": followers, "followingCount": following}


async def _result(message: str, follower, following) -> dict:
    target = await follow_counts(following.id)
    actor = await follow_counts(follower.id)
    return {
        "message": message,
        "followerId": str(follower.id),
        "followingId": str(following.id),
        "followersCount": target["followersCount"],
        "followingCount": actor["followingCount"],
    }


async def is_following(follower_id, following_id) -> bool:
    with storage_guard():
        return await Follow.filter(follower_id=follower_id, following_id=following_id).exists()


async def follow_user(follower_id, following_id) -> dict:
    """
    Create the edge follower -> following.

    Returns:
        dict: confirmation with the target's follower count and the
        actor's following count.

    Raises:
        SelfFollow, NotFound, AlreadyFollowing
    """
    follower, following = await _resolve_pair(follower_id, following_id)
    if await is_following(follower.id, following.id):
        raise AlreadyFollowing()
    # The unique constraint settles a concurrent duplicate insert
    with storage_guard(on_conflict=AlreadyFollowing):
        await Follow.create(follower_id=follower.id, following_id=following.id)
    logger.info("[social] %s followed %s", follower.id, following.id)
    return await _result("User followed successfully", follower, following)


async def unfollow_user(follower_id, following_id) -> dict:
    """Remove the edge if present; an absent edge is not an error."""
    follower, following = await _resolve_pair(follower_id, following_id)
    with storage_guard():
        deleted = await Follow.filter(follower_id=follower.id, following_id=following.id).delete()
    if deleted:
        logger.info("[social] %s unfollowed %s", follower.id, following.id)
    return await _result("User unfollowed successfully", follower, following)


async def list_followers(user_id) -> list[dict]:
    u = await accounts.get_account_or_raise(user_id)
    with storage_guard():
        edges = await Follow.filter(following_id=u.id).order_by("-created_at").prefetch_related("follower")
    return [accounts.user_to_dict(e.follower) for e in edges]


async def list_following(user_id) -> list[dict]:
    u = await accounts.get_account_or_raise(user_id)
    with storage_guard():
        edges = await Follow.filter(follower_id=u.id).order_by("-created_at").prefetch_related("following")
    return [accounts.user_to_dict(e.following) for e in edges]
