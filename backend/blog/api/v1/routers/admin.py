# blog/api/v1/routers/admin.py
from fastapi import APIRouter, Depends, Query
from blog.api.v1.deps import require_admin
from blog.core.errors import NotFound
from blog.schemas.users import AdminUserUpdateIn, MessageOut, ModerationOut, UserOut
from blog.services import accounts, moderation

router = APIRouter(prefix="/users", tags=["admin"], dependencies=[Depends(require_admin)])


# ==============================================================================
# I. Moderation
#     Prefix: /api/v1/users/ban|unban
# ==============================================================================
@router.patch("/ban/{user_id}", response_model=ModerationOut)
async def ban_user(user_id: str):
    """
    Ban an account (admin only). Banning a banned account is a no-op.

    Raises:
        USER_NOT_FOUND (404): If the account does not exist
    """
    return await moderation.ban_user(user_id)


@router.patch("/unban/{user_id}", response_model=ModerationOut)
async def unban_user(user_id: str):
    """Lift a ban (admin only). Unbanning an unbanned account is a no-op."""
    return await moderation.unban_user(user_id)


# ==============================================================================
# II. User Management
#     Prefix: /api/v1/users
# ==============================================================================
@router.get("", response_model=list[UserOut])
async def list_users(
    q: str | None = Query(default=None, description="Fuzzy search by name/email/username"),
    offset: int = Query(0, ge=0),
    limit: int | None = Query(default=None, ge=1, le=500),
):
    """
    List accounts (admin only), newest first.
    Without limit every account is returned.
    """
    rows = await accounts.list_accounts(offset=offset, limit=limit, q=q)
    return [accounts.user_to_dict(u) for u in rows]


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: str):
    """
    Get a single account (admin only).

    Raises:
        USER_NOT_FOUND (404): If the account does not exist
    """
    u = await accounts.get_account(user_id)
    if u is None:
        raise NotFound()
    return accounts.user_to_dict(u)


@router.put("/{user_id}", response_model=UserOut)
async def update_user(user_id: str, body: AdminUserUpdateIn):
    """
    Update an account (admin only).

    Provided fields replace the stored ones; roles replace the whole set and
    must all belong to the role enumeration.

    Error codes:
        - INVALID_ROLES (400): "Invalid roles provided: X, Y" (nothing is changed)
        - USER_EXISTS / USERNAME_EXISTS (400): Value used by another account
        - USER_NOT_FOUND (404)
    """
    u = await accounts.update_admin(
        user_id,
        full_name=body.fullName,
        email=body.email,
        username=body.username,
        roles=body.roles,
    )
    return accounts.user_to_dict(u)


@router.delete("/{user_id}", response_model=MessageOut)
async def delete_user(user_id: str):
    """
    Permanently delete an account (admin only).
    Follow edges touching the account are removed with it.
    """
    await accounts.remove_account(user_id)
    return {"message": "User removed"}
