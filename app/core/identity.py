"""Identity resolution: verified claim -> current user record."""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import TokenClaims, verify_token
from app.db.repositories import UserStore
from app.schemas.profile import ProfileResponse
from app.utils.constants import Role

logger = logging.getLogger(__name__)


class CurrentUser(BaseModel):
    """The authenticated caller, rebuilt for every request.

    Carries no password hash; the stored role (not the token's) is
    authoritative.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    email: str
    role: Role
    created_at: datetime
    profile: Optional[ProfileResponse] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def display_name(self) -> Optional[str]:
        if self.profile is None:
            return None
        return f"{self.profile.first_name} {self.profile.last_name}".strip()


async def resolve_identity(db: AsyncSession, claims: TokenClaims) -> Optional[CurrentUser]:
    """Load the user behind a verified claim, or None if it no longer exists."""
    user = await UserStore(db).find_by_id(claims.user_id, with_profile=True)
    if user is None:
        logger.info(f"Token subject {claims.user_id} no longer exists")
        return None
    return CurrentUser.model_validate(user)


async def authenticate(db: AsyncSession, token: Optional[str]) -> Optional[CurrentUser]:
    """Verify a raw token and resolve its subject. None means unauthenticated."""
    claims = verify_token(token)
    if claims is None:
        return None
    return await resolve_identity(db, claims)
