"""
API Dependencies
Common dependencies for API endpoints (authentication, services)
"""

from typing import AsyncGenerator, Optional

from fastapi import Depends
from fastapi.security import APIKeyCookie, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import AuthenticationError
from app.core.identity import CurrentUser, authenticate
from app.db.session import get_db as get_db_session
from app.services.application_service import ApplicationService
from app.services.job_service import JobService
from app.services.user_service import UserService

# The token normally travels in the auth cookie; a Bearer header also works
# (Swagger "Authorize", scripts)
cookie_scheme = APIKeyCookie(name=settings.AUTH_COOKIE_NAME, auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async for session in get_db_session():
        yield session


def get_token(
    cookie_token: Optional[str] = Depends(cookie_scheme),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    """Raw credential from the cookie, falling back to the Authorization header."""
    if cookie_token:
        return cookie_token
    if credentials is not None:
        return credentials.credentials
    return None


async def get_current_user_optional(
    token: Optional[str] = Depends(get_token),
    db: AsyncSession = Depends(get_db),
) -> Optional[CurrentUser]:
    """
    Get current user if authenticated, None otherwise.

    Rebuilt from the credential on every request, never cached across requests.
    """
    return await authenticate(db, token)


async def get_current_user(
    current_user: Optional[CurrentUser] = Depends(get_current_user_optional),
) -> CurrentUser:
    """Get current authenticated user; 401 when the credential is absent or invalid."""
    if current_user is None:
        raise AuthenticationError("Not authenticated")
    return current_user


def get_application_service(db: AsyncSession = Depends(get_db)) -> ApplicationService:
    return ApplicationService(db)


def get_job_service(db: AsyncSession = Depends(get_db)) -> JobService:
    return JobService(db)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)
