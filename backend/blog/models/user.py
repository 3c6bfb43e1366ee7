# blog/models/user.py
"""
Database model for accounts.
Represents a registered user: credentials, profile information, roles and
moderation state.
"""
import uuid
from tortoise import fields, models

from blog.config import settings
from blog.core.roles import DEFAULT_ROLES, UserRole, has_role


def _default_roles() -> list[str]:
    return list(DEFAULT_ROLES)


class User(models.Model):
    """
    Account database model.

    Relationships:
    - Has many outgoing Follow edges (related_name="following_edges")
    - Has many incoming Follow edges (related_name="follower_edges")

    Security:
    - Password is stored as an argon2 hash and never serialized outward
    - Email is stored lower-cased and unique; username is unique when set
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)
    full_name = fields.CharField(max_length=256)
    email = fields.CharField(max_length=256, unique=True, index=True)  # Always lower-cased
    password_hash = fields.CharField(max_length=255)
    username = fields.CharField(max_length=256, unique=True, null=True)
    profile_image = fields.CharField(max_length=1024, default=settings.default_profile_image)
    roles = fields.JSONField(default=_default_roles)  # Subset of UserRole values, never empty
    is_banned = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "users"

    @property
    def is_admin(self) -> bool:
        return has_role(self, UserRole.ADMIN)

    def __str__(self) -> str:
        return self.email
