"""
Credential Helpers

Password hashing (passlib/bcrypt) and access-token issuing/decoding
(python-jose). Tokens carry only the user id, role, a random token id
used for revocation, and the expiry. Never put e-mail, phone or password
data in a token.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from uaifood.core.config import get_settings
from uaifood.core.errors import UnauthenticatedError
from uaifood.models import UserRole

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=get_settings().password_hash_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


@dataclass(frozen=True)
class TokenClaims:
    """
    Decoded access token.

    Attributes:
        user_id: Id of the authenticated user
        role: Role at the time the token was issued
        token_id: Unique token identifier (``jti``), the revocation key
        expires_at: Absolute expiry (UTC)
    """
    user_id: int
    role: UserRole
    token_id: str
    expires_at: datetime


def create_access_token(
    user_id: int,
    role: UserRole,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Sign a new access token for a user.

    Args:
        user_id: Id of the user the token represents
        role: The user's role
        expires_delta: Custom lifetime (defaults to TOKEN_EXPIRE_MINUTES)

    Returns:
        str: Encoded JWT
    """
    settings = get_settings()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.token_expire_minutes)
    )
    claims = {
        "sub": str(user_id),
        "role": role.value,
        "jti": uuid.uuid4().hex,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry of a token and return its claims.

    Raises:
        UnauthenticatedError: Token malformed, expired, forged or incomplete
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token.")

    try:
        return TokenClaims(
            user_id=int(payload["sub"]),
            role=UserRole(payload["role"]),
            token_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise UnauthenticatedError("Invalid or expired token.")
