# blog/core/roles.py
"""
Role-based access control primitives.
Roles are a closed enumeration held as a list on each account.
"""
from enum import Enum
from typing import Iterable


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"

    @classmethod
    def is_valid(cls, value) -> bool:
        """Return True if ``value`` names a member of the enumeration."""
        return value in cls._value2member_map_


DEFAULT_ROLES = [UserRole.USER.value]


def has_role(account, role) -> bool:
    """
    Pure membership test on an account's roles.
    Unknown roles (or accounts without roles) simply return False.
    """
    value = role.value if isinstance(role, UserRole) else role
    return value in (getattr(account, "roles", None) or [])


def find_invalid_roles(roles: Iterable) -> list[str]:
    """Return every value outside the enumeration, in input order."""
    return [str(r) for r in roles if not UserRole.is_valid(r)]


def normalize_roles(roles) -> list[str]:
    """Deduplicate a validated role list while keeping its order; empty -> default."""
    if not roles:
        return list(DEFAULT_ROLES)
    seen: list[str] = []
    for r in roles:
        value = r.value if isinstance(r, UserRole) else r
        if value not in seen:
            seen.append(value)
    return seen
