# blog/core/bootstrap.py
"""
Bootstrap module for application initialization.
Creates a default administrator on first startup.
"""
import os
import logging
from blog.core.errors import AccountError
from blog.core.roles import UserRole
from blog.models.user import User
from blog.services import accounts

logger = logging.getLogger("uvicorn.error")

async def ensure_default_admin() -> None:
    """
    If no account holds the ADMIN role, create one from environment variables.
    Only takes effect when ADMIN_PASSWORD is set (no default weak password).
    Environment variables:
      ADMIN_EMAIL     (default: "admin@example.com")
      ADMIN_FULL_NAME (default: "Administrator")
      ADMIN_PASSWORD  (required, otherwise won't create)
    """
    # JSON containment queries differ per backend; role lists are small
    role_lists = await User.all().values_list("roles", flat=True)
    if any(UserRole.ADMIN.value in (roles or []) for roles in role_lists):
        return

    admin_password = os.getenv("ADMIN_PASSWORD")
    if not admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return

    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_full_name = os.getenv("ADMIN_FULL_NAME", "Administrator")

    try:
        u = await accounts.create_account(
            full_name=admin_full_name,
            email=admin_email,
            password=admin_password,
            roles=[UserRole.USER.value, UserRole.ADMIN.value],
        )
    except AccountError as e:
        # e.g. the address is already used by a regular account
        logger.warning("[bootstrap] Could not create default admin (%s): %s", e.code, e.message)
        return
    logger.warning("[bootstrap] Created default admin -> email=%s id=%s", u.email, u.id)
