"""
Tests for the follow graph service.
"""
import uuid

import pytest

from blog.core.errors import AlreadyFollowing, NotFound, SelfFollow
from blog.models.follow import Follow
from blog.services import accounts, social


pytestmark = pytest.mark.asyncio


async def test_follow_creates_edge_and_counts(create_user):
    a, _ = await create_user()
    b, _ = await create_user()

    result = await social.follow_user(a.id, b.id)

    assert result["followerId"] == str(a.id)
    assert result["followingId"] == str(b.id)
    assert result["followersCount"] == 1
    assert result["followingCount"] == 1
    assert await social.is_following(a.id, b.id)
    assert not await social.is_following(b.id, a.id)


async def test_self_follow_always_fails(create_user):
    a, _ = await create_user()
    with pytest.raises(SelfFollow):
        await social.follow_user(a.id, a.id)
    with pytest.raises(SelfFollow):
        await social.follow_user(str(a.id), str(a.id))
    assert await Follow.all().count() == 0


@pytest.mark.parametrize("spelling", [
    lambda pk: str(pk).upper(),
    lambda pk: "{" + str(pk) + "}",
    lambda pk: "urn:uuid:" + str(pk),
    lambda pk: pk.hex,
])
async def test_self_follow_with_alternate_id_spelling(create_user, spelling):
    a, _ = await create_user()
    with pytest.raises(SelfFollow):
        await social.follow_user(a.id, spelling(a.id))
    with pytest.raises(SelfFollow):
        await social.unfollow_user(str(a.id), spelling(a.id))
    assert await Follow.filter(follower_id=a.id, following_id=a.id).count() == 0


async def test_follow_twice_raises_and_keeps_single_edge(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    await social.follow_user(a.id, b.id)

    with pytest.raises(AlreadyFollowing):
        await social.follow_user(a.id, b.id)

    assert await Follow.filter(follower_id=a.id, following_id=b.id).count() == 1


async def test_follow_missing_account(create_user):
    a, _ = await create_user()
    with pytest.raises(NotFound):
        await social.follow_user(a.id, uuid.uuid4())
    with pytest.raises(NotFound):
        await social.follow_user(a.id, "not-a-uuid")


async def test_unfollow_is_idempotent(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    await social.follow_user(a.id, b.id)

    first = await social.unfollow_user(a.id, b.id)
    second = await social.unfollow_user(a.id, b.id)

    assert first["followersCount"] == 0
    assert second["followersCount"] == 0
    assert not await social.is_following(a.id, b.id)


async def test_unfollow_never_followed_succeeds(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    result = await social.unfollow_user(a.id, b.id)
    assert result["followingCount"] == 0


async def test_follow_again_after_unfollow(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    await social.follow_user(a.id, b.id)
    await social.unfollow_user(a.id, b.id)

    result = await social.follow_user(a.id, b.id)
    assert result["followersCount"] == 1


async def test_follower_and_following_lists(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    c, _ = await create_user()
    await social.follow_user(a.id, c.id)
    await social.follow_user(b.id, c.id)

    followers = await social.list_followers(c.id)
    assert {f["id"] for f in followers} == {str(a.id), str(b.id)}
    following = await social.list_following(a.id)
    assert [f["id"] for f in following] == [str(c.id)]
    assert await social.follow_counts(c.id) == {"followersCount": 2, "followingCount": 0}

    with pytest.raises(NotFound):
        await social.list_followers(uuid.uuid4())


async def test_edges_removed_with_account(create_user):
    a, _ = await create_user()
    b, _ = await create_user()
    await social.follow_user(a.id, b.id)
    await social.follow_user(b.id, a.id)

    await accounts.remove_account(a.id)

    assert await social.follow_counts(b.id) == {"followersCount": 0, "followingCount": 0}
