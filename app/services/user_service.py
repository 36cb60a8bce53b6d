"""Accounts: registration, login, own profile, and the admin user console."""

import logging
from typing import Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateError,
    InvalidInputError,
    NotFoundError,
)
from app.core.identity import CurrentUser
from app.core.permissions import Action, Resource, require
from app.core.security import create_access_token, get_password_hash, verify_password
from app.db.repositories import JobPostingStore, ProfileStore, UserStore
from app.models.profile import Profile
from app.models.user import User
from app.schemas.auth import RegisterRequest
from app.schemas.profile import ProfileUpdate
from app.utils.constants import USER_ROLES, Role

logger = logging.getLogger(__name__)

# Roles anyone may pick at sign-up; admins are appointed by another admin
SELF_REGISTER_ROLES = {Role.STUDENT, Role.EMPLOYER}


def parse_role(value: Optional[str]) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid role. Must be one of: " + ", ".join(USER_ROLES),
            allowed_roles=USER_ROLES,
        )


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.users = UserStore(db)
        self.profiles = ProfileStore(db)
        self.jobs = JobPostingStore(db)

    async def register(self, request: RegisterRequest) -> User:
        """Create a user and their profile in one transaction."""
        role = parse_role(request.role or Role.STUDENT.value)
        if role not in SELF_REGISTER_ROLES:
            raise InvalidInputError("Admin accounts cannot be self-registered")

        if await self.users.find_by_email(request.email) is not None:
            raise DuplicateError("User with this email already exists")

        try:
            user = await self.users.create(
                email=request.email,
                password_hash=get_password_hash(request.password),
                role=role,
            )
            await self.profiles.create(user.id, request.first_name, request.last_name)
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateError("User with this email already exists")

        await self.db.commit()
        logger.info(f"Registered {role.value} {user.id}")
        return await self.users.find_by_id(user.id, with_profile=True)

    async def login(self, email: str, password: str) -> Tuple[User, str]:
        """Check credentials and issue an access token."""
        user = await self.users.find_by_email(email)
        if user is None or not verify_password(password, user.password_hash):
            raise AuthenticationError("Incorrect email or password")

        token = create_access_token(user.id, Role(user.role), email=user.email)
        logger.info(f"User {user.id} logged in")
        return await self.users.find_by_id(user.id, with_profile=True), token

    async def get_profile(self, actor: Optional[CurrentUser]) -> Profile:
        require(actor, Action.PROFILE_READ)
        profile = await self.profiles.find_by_user_id(actor.id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def update_profile(self, actor: Optional[CurrentUser], data: ProfileUpdate) -> Profile:
        """Partial update of the caller's own profile."""
        require(actor, Action.PROFILE_UPDATE)
        profile = await self.profiles.find_by_user_id(actor.id)
        if profile is None:
            raise NotFoundError("Profile not found for update")

        fields = data.model_dump(exclude_unset=True)
        for required in ("first_name", "last_name", "mbti_completed"):
            if fields.get(required, ...) is None:
                fields.pop(required)
        if "mbti_type" in fields and fields["mbti_type"] is None:
            fields["mbti_completed"] = False

        await self.profiles.update(profile, **fields)
        await self.db.commit()
        return profile

    async def list_users(self, actor: Optional[CurrentUser]) -> Sequence[User]:
        require(actor, Action.USER_LIST)
        return await self.users.list_all()

    async def get_user_detail(self, user_id: UUID, actor: Optional[CurrentUser]) -> User:
        require(actor, Action.USER_READ)
        user = await self.users.find_detail(user_id)
        require(actor, Action.USER_READ, Resource("user", id=user_id, found=user is not None))
        return user

    async def change_role(
        self, user_id: UUID, role: Optional[str], actor: Optional[CurrentUser]
    ) -> User:
        """Set another user's role. Nobody can change their own role."""
        require(actor, Action.USER_CHANGE_ROLE, Resource("user", id=user_id))
        new_role = parse_role(role)

        user = await self.users.find_by_id(user_id, with_profile=True)
        require(actor, Action.USER_CHANGE_ROLE, Resource("user", id=user_id, found=user is not None))

        previous = user.role
        await self.users.update_role(user, new_role)
        await self.db.commit()
        logger.info(f"User {user_id} role {previous} -> {new_role.value} by {actor.id}")
        return user

    async def delete_user(self, user_id: UUID, actor: Optional[CurrentUser]) -> None:
        """Delete another user with their profile and applications.

        Users who still own job postings cannot be deleted; postings are
        never hard-deleted.
        """
        require(actor, Action.USER_DELETE, Resource("user", id=user_id))
        user = await self.users.find_by_id(user_id)
        require(actor, Action.USER_DELETE, Resource("user", id=user_id, found=user is not None))

        if await self.jobs.count_by_owner(user_id) > 0:
            raise ConflictError("User still owns job postings; deactivate them or reassign first")

        await self.users.delete(user_id)
        await self.db.commit()
        logger.info(f"User {user_id} deleted by {actor.id}")
