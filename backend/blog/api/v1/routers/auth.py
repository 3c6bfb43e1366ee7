# blog/api/v1/routers/auth.py
from fastapi import APIRouter, Depends, Response, status
from blog.api.v1.deps import get_current_user, get_presence
from blog.core.presence import PresenceNotifier
from blog.models.user import User
from blog.schemas.users import AuthOut, LoginIn, MessageOut, RegisterIn
from blog.services import auth as auth_service

router = APIRouter(prefix="/users", tags=["auth"])

@router.post("/login", response_model=AuthOut)
async def login(
    body: LoginIn,
    response: Response,
    presence: PresenceNotifier = Depends(get_presence),
):
    """
    Authenticate with email and password and start a session.

    The session token is returned in the body and set as the HttpOnly
    "jwt" cookie. A "userStatus" active event is broadcast to connected
    clients.

    Raises:
        INVALID_CREDENTIALS (401): Unknown email or wrong password
            (same message for both)
    """
    return await auth_service.authenticate(body.email, body.password, response, presence)

@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, response: Response):
    """
    Register a new account and start its session.

    Roles default to ["USER"]; the profile image defaults to a placeholder.
    Self-registration only grants USER; other roles are assigned by an
    administrator through PUT /users/{id}.

    Error codes:
        - INVALID_USER_DATA: fullName/email/password missing or malformed
        - USER_EXISTS: Email already registered
        - USERNAME_EXISTS: Username already taken
        - INVALID_ROLES: Unknown role requested
        - FORBIDDEN_ROLES: A role other than USER requested
    """
    return await auth_service.register(
        body.fullName,
        body.email,
        body.password,
        response,
        profile_image=body.profileImage,
        username=body.username,
        roles=body.roles,
    )

@router.post("/logout", response_model=MessageOut)
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
    presence: PresenceNotifier = Depends(get_presence),
):
    """
    Clear the session cookie and broadcast a "userStatus" inactive event.

    Note:
        The token itself stays valid until it expires; there is no
        server-side revocation.
    """
    return await auth_service.logout(user, response, presence)
