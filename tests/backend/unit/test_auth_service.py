"""
Tests for the authentication flow (login, registration, logout).
"""
import pytest
from fastapi import Response

from blog.core.errors import DuplicateEmail, ForbiddenRoles, InvalidCredentials, InvalidRoles
from blog.core.security import decode_access_token
from blog.services import accounts, auth


pytestmark = pytest.mark.asyncio


async def test_authenticate_success_issues_token_and_presence(create_user, presence):
    u, password = await create_user(email="reader@example.com")
    response = Response()

    result = await auth.authenticate("reader@example.com", password, response, presence)

    assert decode_access_token(result["token"])["sub"] == str(u.id)
    assert "password_hash" not in result
    assert any(k == b"set-cookie" for k, _ in response.raw_headers)
    assert presence.events == [("userStatus", {"userId": str(u.id), "status": "active"})]


async def test_authenticate_email_is_case_insensitive(create_user):
    await create_user(email="mixed@example.com", password="pw")
    result = await auth.authenticate("MIXED@example.com", "pw", Response())
    assert result["email"] == "mixed@example.com"


async def test_unknown_email_and_wrong_password_look_identical(create_user, presence):
    await create_user(email="known@example.com", password="right")

    with pytest.raises(InvalidCredentials) as wrong_pw:
        await auth.authenticate("known@example.com", "wrong", Response(), presence)
    with pytest.raises(InvalidCredentials) as unknown:
        await auth.authenticate("unknown@example.com", "right", Response(), presence)

    assert wrong_pw.value.to_dict() == unknown.value.to_dict()
    assert wrong_pw.value.status_code == 401
    assert presence.events == []


async def test_presence_failure_does_not_fail_login_or_logout(create_user, failing_presence):
    u, password = await create_user(email="flaky@example.com")
    failing = failing_presence

    result = await auth.authenticate("flaky@example.com", password, Response(), failing)
    assert result["token"]
    out = await auth.logout(u, Response(), failing)
    assert out == {"message": "Logged out successfully"}
    assert failing.calls == 2


async def test_register_returns_session(db):
    response = Response()
    result = await auth.register("A", "a@x.com", "p1", response)

    assert result["roles"] == ["USER"]
    assert result["token"]
    assert decode_access_token(result["token"])["sub"] == result["id"]

    with pytest.raises(DuplicateEmail):
        await auth.register("A", "a@x.com", "p1", Response())


async def test_register_cannot_self_assign_admin(db):
    with pytest.raises(ForbiddenRoles) as exc:
        await auth.register("Eve", "eve@x.com", "p1", Response(), roles=["USER", "ADMIN"])
    assert exc.value.status_code == 403
    assert await accounts.find_by_email("eve@x.com") is None

    # Unknown roles are still reported as such
    with pytest.raises(InvalidRoles):
        await auth.register("Eve", "eve@x.com", "p1", Response(), roles=["SUPERUSER"])

    result = await auth.register("Eve", "eve@x.com", "p1", Response(), roles=["USER"])
    assert result["roles"] == ["USER"]


async def test_register_with_elevated_roles_when_allowed(db):
    result = await auth.register(
        "Root", "root@x.com", "p1", Response(), roles=["ADMIN"], allow_elevated_roles=True,
    )
    assert result["roles"] == ["ADMIN"]
    assert result["isAdmin"] is True


async def test_logout_clears_cookie_and_notifies(create_user, presence):
    u, _ = await create_user()
    response = Response()

    await auth.logout(u, response, presence)

    cookie = [v.decode() for k, v in response.raw_headers if k == b"set-cookie"][0]
    assert "Max-Age=0" in cookie
    assert presence.events == [("userStatus", {"userId": str(u.id), "status": "inactive"})]
