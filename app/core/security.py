"""Security utilities: JWT credentials and password hashing."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ConfigDict, ValidationError

from app.config import settings
from app.utils.constants import Role

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

__all__ = [
    "Role",
    "TokenClaims",
    "create_access_token",
    "verify_token",
    "get_password_hash",
    "verify_password",
]


class TokenClaims(BaseModel):
    """Decoded payload of a verified access token. Lives for one request."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sub: UUID
    role: Role
    email: Optional[str] = None
    iat: Optional[int] = None
    exp: int
    type: str = "access"

    @property
    def user_id(self) -> UUID:
        return self.sub


def get_password_hash(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify password against hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: UUID,
    role: Role,
    email: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create JWT access token."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(user_id),
        "role": Role(role).value,
        "email": email,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "type": "access",
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: Optional[str]) -> Optional[TokenClaims]:
    """Decode and verify a JWT access token.

    Returns None for a missing, malformed, unsigned, wrongly signed or expired
    token, and for payloads without a subject id or with an unknown role.
    Callers treat "no credential" and "bad credential" the same way.
    """
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True},
        )
        claims = TokenClaims.model_validate(payload)
    except JWTError as e:
        logger.debug(f"Token rejected: {e}")
        return None
    except ValidationError:
        logger.debug("Token rejected: payload missing required claims")
        return None

    if claims.type != "access":
        return None

    return claims
