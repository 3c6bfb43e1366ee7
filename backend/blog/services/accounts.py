"""
Account store.

Owns every read and write of ``User`` records. Updates are explicit
read-modify-write: load the record, apply the changes, save the listed fields
and hand the refreshed instance back to the caller.
"""
import logging
import uuid
from typing import Iterable, Optional

from tortoise.expressions import Q

from blog.config import settings
from blog.core.errors import (
    AccountError,
    DuplicateEmail,
    DuplicateUsername,
    InvalidAccountData,
    InvalidRoles,
    NotFound,
    storage_guard,
)
from blog.core.roles import find_invalid_roles, normalize_roles
from blog.core.security import hash_password
from blog.models.user import User

logger = logging.getLogger("uvicorn.error")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def parse_id(user_id) -> Optional[uuid.UUID]:
    if isinstance(user_id, uuid.UUID):
        return user_id
    try:
        return uuid.UUID(str(user_id))
    except ValueError:
        return None


def _check_email(email: str) -> None:
    if not email or "@" not in email:
        raise InvalidAccountData("A valid email address is required")


def _check_roles(roles: Iterable[str]) -> None:
    invalid = find_invalid_roles(roles)
    if invalid:
        raise InvalidRoles(invalid)


def _unique_conflict(e) -> AccountError:
    """
    Map a unique-constraint violation on ``users`` to the matching error.
    SQLite reports "UNIQUE constraint failed: users.username", Postgres
    names the "users_username_key" constraint; email is the only other unique column.
    """
    if "username" in str(e).lower():
        return DuplicateUsername()
    return DuplicateEmail()


def user_to_dict(u: User) -> dict:
    """
    Outward representation of an account.
    The password hash is deliberately absent.
    """
    return {
        "id": str(u.id),
        "fullName": u.full_name,
        "email": u.email,
        "username": u.username,
        "profileImage": u.profile_image,
        "roles": list(u.roles or []),
        "isAdmin": u.is_admin,
        "isBanned": u.is_banned,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "updatedAt": u.updated_at.isoformat() if u.updated_at else None,
    }


# ------------------------------------------------------------------------------
# Lookups
# ------------------------------------------------------------------------------
async def find_by_email(email: str) -> Optional[User]:
    email = normalize_email(email)
    if not email:
        return None
    with storage_guard():
        return await User.get_or_none(email=email)


async def get_account(user_id) -> Optional[User]:
    """Return the account or None. Malformed identifiers count as absent."""
    pk = parse_id(user_id)
    if pk is None:
        return None
    with storage_guard():
        return await User.get_or_none(id=pk)


async def get_account_or_raise(user_id) -> User:
    u = await get_account(user_id)
    if u is None:
        raise NotFound()
    return u


async def list_accounts(offset: int = 0, limit: Optional[int] = None, q: Optional[str] = None) -> list[User]:
    """
    All accounts, newest first, with optional fuzzy search over
    full name, email and username.
    """
    qs = User.all().order_by("-created_at")
    if q:
        qs = qs.filter(Q(full_name__icontains=q) | Q(email__icontains=q) | Q(username__icontains=q))
    if offset:
        qs = qs.offset(offset)
    if limit is not None:
        qs = qs.limit(limit)
    with storage_guard():
        return await qs


# ------------------------------------------------------------------------------
# Writes
# ------------------------------------------------------------------------------
async def _ensure_email_free(email: str, exclude_id=None) -> None:
    qs = User.filter(email=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    with storage_guard():
        taken = await qs.exists()
    if taken:
        raise DuplicateEmail()


async def _ensure_username_free(username: str, exclude_id=None) -> None:
    qs = User.filter(username=username)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    with storage_guard():
        taken = await qs.exists()
    if taken:
        raise DuplicateUsername()


async def persist(u: User, update_fields: Optional[list[str]] = None) -> User:
    """
    Save ``u`` (optionally only ``update_fields``) and return it.
    A unique-constraint race surfaces as DuplicateEmail or DuplicateUsername.
    """
    if update_fields is not None:
        update_fields = list(update_fields) + ["updated_at"]
    with storage_guard(on_conflict=_unique_conflict):
        await u.save(update_fields=update_fields)
    return u


async def create_account(
    full_name: Optional[str],
    email: Optional[str],
    password: Optional[str],
    profile_image: Optional[str] = None,
    username: Optional[str] = None,
    roles: Optional[list[str]] = None,
) -> User:
    """
    Create an account.

    Defaults: placeholder profile image, roles ["USER"] when omitted or empty.
    The password is hashed before anything is written.

    Raises:
        InvalidAccountData: full name, email or password missing
        InvalidRoles: a supplied role is outside the enumeration
        DuplicateEmail / DuplicateUsername: uniqueness violated
    """
    full_name = (full_name or "").strip()
    email = normalize_email(email)
    username = (username or "").strip() or None
    if not full_name or not password:
        raise InvalidAccountData("fullName, email and password are required")
    _check_email(email)
    _check_roles(roles or [])

    await _ensure_email_free(email)
    if username:
        await _ensure_username_free(username)

    with storage_guard(on_conflict=_unique_conflict):
        u = await User.create(
            full_name=full_name,
            email=email,
            password_hash=hash_password(password),
            username=username,
            profile_image=profile_image or settings.default_profile_image,
            roles=normalize_roles(roles),
        )
    logger.info("[accounts] created id=%s email=%s", u.id, u.email)
    return u


async def _apply_identity(u: User, full_name, email, username, keep_falsy: bool) -> list[str]:
    """
    Apply name/email/username changes to ``u`` in memory.

    keep_falsy=True: empty values keep the current field (profile edits).
    keep_falsy=False: only None keeps the field (admin edits).
    """
    changed: list[str] = []

    def provided(value) -> bool:
        return bool(value) if keep_falsy else value is not None

    if provided(full_name):
        full_name = full_name.strip()
        if not full_name:
            raise InvalidAccountData("fullName cannot be empty")
        u.full_name = full_name
        changed.append("full_name")

    if provided(email):
        email = normalize_email(email)
        _check_email(email)
        if email != u.email:
            await _ensure_email_free(email, exclude_id=u.id)
            u.email = email
            changed.append("email")

    if provided(username):
        username = username.strip() or None
        if username != u.username:
            if username:
                await _ensure_username_free(username, exclude_id=u.id)
            u.username = username
            changed.append("username")

    return changed


async def update_profile(user_id, full_name=None, email=None, username=None) -> User:
    """Partial self-service update; unspecified (or empty) fields are retained."""
    u = await get_account_or_raise(user_id)
    changed = await _apply_identity(u, full_name, email, username, keep_falsy=True)
    if not changed:
        return u
    return await persist(u, changed)


async def update_admin(user_id, full_name=None, email=None, username=None, roles=None) -> User:
    """
    Admin update: identity fields plus full role replacement.
    Roles are validated before any field is touched.
    """
    u = await get_account_or_raise(user_id)
    if roles is not None:
        _check_roles(roles)
        if not roles:
            raise InvalidAccountData("At least one role is required")

    changed = await _apply_identity(u, full_name, email, username, keep_falsy=False)
    if roles is not None:
        u.roles = normalize_roles(roles)
        changed.append("roles")
    if not changed:
        return u
    await persist(u, changed)
    logger.info("[accounts] admin update id=%s fields=%s", u.id, ",".join(changed))
    return u


async def remove_account(user_id) -> None:
    """Hard delete. Follow edges touching the account cascade with it."""
    u = await get_account_or_raise(user_id)
    with storage_guard():
        await u.delete()
    logger.info("[accounts] removed id=%s", user_id)
