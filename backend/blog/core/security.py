# blog/core/security.py
"""
Security module for authentication.
Handles password hashing and JWT session token creation/validation.
"""
import datetime as dt
import jwt  # PyJWT
from passlib.context import CryptContext

from blog.config import settings

# Password hashing context
# Argon2 is a modern, salted password hashing algorithm; verification is constant-time
pwd_context = CryptContext(
    schemes=["argon2"],
    deprecated="auto",
)

# JWT configuration
JWT_SECRET = settings.jwt_secret  # Secret key for JWT signing (use strong secret in production)
JWT_ALG = settings.jwt_algorithm
TOKEN_EXPIRE_DAYS = settings.token_expire_days

def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database)
    """
    return pwd_context.hash(plain)

def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a stored hash.

    Never raises: a mismatch, an empty hash or a hash passlib cannot
    identify all yield False.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise
    """
    if not hashed or plain is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (ValueError, TypeError):
        return False

def create_access_token(user_id: str) -> str:
    """
    Create a signed session token for an account.

    Token payload includes:
        - sub: Subject (account ID)
        - iat: Issued at timestamp
        - exp: Expiration timestamp (TOKEN_EXPIRE_DAYS after issue)
    """
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + dt.timedelta(days=TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALG)

def decode_access_token(token: str) -> dict:
    """
    Decode and validate a session token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or malformed
    """
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
