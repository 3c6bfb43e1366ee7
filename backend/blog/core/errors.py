# blog/core/errors.py
"""
Typed failures raised by the account core.

Every error carries a stable ``code`` for clients, a human readable
``message`` and the HTTP status the handler layer answers with. The FastAPI
exception handler registered in ``blog.main`` renders them as
``{"detail": {"code": ..., "message": ...}}``.
"""
import logging
from contextlib import contextmanager
from typing import Callable, Iterable

from tortoise.exceptions import DBConnectionError, IntegrityError, OperationalError

logger = logging.getLogger("uvicorn.error")


class AccountError(Exception):
    """Base class for all account-core failures."""

    code = "ACCOUNT_ERROR"
    status_code = 400
    default_message = "Account operation failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidCredentials(AccountError):
    # Same message for unknown email and wrong password
    code = "INVALID_CREDENTIALS"
    status_code = 401
    default_message = "Invalid email or password"


class DuplicateEmail(AccountError):
    code = "USER_EXISTS"
    default_message = "User already exists"


class DuplicateUsername(AccountError):
    code = "USERNAME_EXISTS"
    default_message = "Username already exists"


class InvalidAccountData(AccountError):
    code = "INVALID_USER_DATA"
    default_message = "Invalid user data"


class NotFound(AccountError):
    code = "USER_NOT_FOUND"
    status_code = 404
    default_message = "User not found"


class InvalidRoles(AccountError):
    code = "INVALID_ROLES"

    def __init__(self, roles: Iterable[str]):
        self.roles = list(roles)
        super().__init__(f"Invalid roles provided: {', '.join(self.roles)}")


class ForbiddenRoles(AccountError):
    # Self-registration may not grant anything beyond USER
    code = "FORBIDDEN_ROLES"
    status_code = 403
    default_message = "Only administrators can assign elevated roles"


class SelfFollow(AccountError):
    code = "SELF_FOLLOW"
    default_message = "You cannot follow yourself"


class AlreadyFollowing(AccountError):
    code = "ALREADY_FOLLOWING"
    default_message = "You are already following this user"


class StorageUnavailable(AccountError):
    code = "STORAGE_UNAVAILABLE"
    status_code = 503
    default_message = "Storage temporarily unavailable"


@contextmanager
def storage_guard(on_conflict: Callable[[IntegrityError], AccountError] | None = None):
    """
    Translate Tortoise failures into the account taxonomy.

    Args:
        on_conflict: Error raised when a uniqueness constraint is violated:
            either an AccountError subclass, or a callable that receives the
            IntegrityError and returns the error to raise. When omitted,
            integrity errors are reported as storage failures.
    """
    try:
        yield
    except IntegrityError as e:
        if on_conflict is not None:
            if isinstance(on_conflict, type) and issubclass(on_conflict, AccountError):
                raise on_conflict() from e
            raise on_conflict(e) from e
        logger.warning("[storage] integrity error: %s", e)
        raise StorageUnavailable() from e
    except (DBConnectionError, OperationalError) as e:
        logger.warning("[storage] unavailable: %s", e)
        raise StorageUnavailable() from e
