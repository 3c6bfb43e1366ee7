# blog/api/v1/routers/users.py
from fastapi import APIRouter, Depends
from blog.api.v1.deps import get_current_user
from blog.models.user import User
from blog.schemas.users import FollowIn, FollowOut, ProfileOut, ProfileUpdateIn, UserOut
from blog.services import accounts, social

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/profile", response_model=ProfileOut)
async def get_profile(user: User = Depends(get_current_user)):
    """Current account with its follower/following counts."""
    counts = await social.follow_counts(user.id)
    return {**accounts.user_to_dict(user), **counts}

@router.put("/profile", response_model=UserOut)
async def update_profile(body: ProfileUpdateIn, user: User = Depends(get_current_user)):
    """
    Update the current account's fullName, email or username.
    Missing or empty fields keep their current value.

    Error codes:
        - USER_EXISTS / USERNAME_EXISTS: Value already used by another account
        - USER_NOT_FOUND: Account disappeared in between
    """
    updated = await accounts.update_profile(
        user.id, full_name=body.fullName, email=body.email, username=body.username
    )
    return accounts.user_to_dict(updated)

@router.post("/follow", response_model=FollowOut)
async def follow(body: FollowIn, user: User = Depends(get_current_user)):
    """
    Follow another account.

    Error codes:
        - SELF_FOLLOW: followingId is the current account
        - ALREADY_FOLLOWING: Edge already exists
        - USER_NOT_FOUND: Target account does not exist
    """
    return await social.follow_user(user.id, body.followingId)

@router.post("/unfollow", response_model=FollowOut)
async def unfollow(body: FollowIn, user: User = Depends(get_current_user)):
    """Unfollow an account. Unfollowing an account not followed succeeds."""
    return await social.unfollow_user(user.id, body.followingId)

@router.get("/{user_id}/followers", response_model=list[UserOut])
async def followers(user_id: str, user: User = Depends(get_current_user)):
    return await social.list_followers(user_id)

@router.get("/{user_id}/following", response_model=list[UserOut])
async def following(user_id: str, user: User = Depends(get_current_user)):
    return await social.list_following(user_id)
