"""Entity stores: the only place that builds SQL for the portal.

Each store wraps the request's ``AsyncSession``. Writes flush but never
commit; the service that owns the unit of work decides when to commit.
"""

from datetime import datetime
from typing import Any, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.db.base import utcnow
from app.models.application import Application
from app.models.job_posting import JobPosting
from app.models.profile import Profile
from app.models.user import User
from app.utils.constants import ApplicationStatus, JobStatus, Role

# Eager loads needed to build application views (applicant profile and job)
APPLICATION_LOADERS = (
    selectinload(Application.job_posting),
    selectinload(Application.user).selectinload(User.profile),
)


class UserStore:
    """Users and their roles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, user_id: UUID, with_profile: bool = False) -> Optional[User]:
        query = select(User).where(User.id == user_id)
        if with_profile:
            query = query.options(selectinload(User.profile)).execution_options(
                populate_existing=True
            )
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def find_detail(self, user_id: UUID) -> Optional[User]:
        """User with profile and applications (each with its job posting)."""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .options(
                selectinload(User.profile),
                selectinload(User.applications).selectinload(Application.job_posting),
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> Sequence[User]:
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.profile))
            .execution_options(populate_existing=True)
            .order_by(User.created_at.desc())
        )
        return result.scalars().all()

    async def create(self, email: str, password_hash: str, role: Role) -> User:
        user = User(email=email, password_hash=password_hash, role=Role(role).value)
        self.db.add(user)
        await self.db.flush()
        return user

    async def update_role(self, user: User, role: Role) -> User:
        user.role = Role(role).value
        user.updated_at = utcnow()
        await self.db.flush()
        return user

    async def delete(self, user_id: UUID) -> None:
        """Delete a user together with their profile and applications."""
        await self.db.execute(delete(Application).where(Application.user_id == user_id))
        await self.db.execute(delete(Profile).where(Profile.user_id == user_id))
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.flush()


class ProfileStore:
    """One-to-one user profiles."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_user_id(self, user_id: UUID) -> Optional[Profile]:
        result = await self.db.execute(select(Profile).where(Profile.user_id == user_id))
        return result.scalar_one_or_none()

    async def create(self, user_id: UUID, first_name: str, last_name: str) -> Profile:
        profile = Profile(user_id=user_id, first_name=first_name, last_name=last_name)
        self.db.add(profile)
        await self.db.flush()
        return profile

    async def update(self, profile: Profile, **fields: Any) -> Profile:
        """Partial update: only the given fields change."""
        for name, value in fields.items():
            setattr(profile, name, value)
        profile.updated_at = utcnow()
        await self.db.flush()
        return profile


class JobPostingStore:
    """Job postings and their ownership."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, job_id: UUID) -> Optional[JobPosting]:
        result = await self.db.execute(select(JobPosting).where(JobPosting.id == job_id))
        return result.scalar_one_or_none()

    async def find_open_by_id(self, job_id: UUID, now: datetime) -> Optional[JobPosting]:
        """Posting that still accepts applications (ACTIVE, deadline not passed)."""
        result = await self.db.execute(
            select(JobPosting).where(
                JobPosting.id == job_id,
                JobPosting.status == JobStatus.ACTIVE.value,
                JobPosting.deadline >= now,
            )
        )
        return result.scalar_one_or_none()

    async def find_open(self, now: datetime, offset: int = 0, limit: int = 20) -> Sequence[JobPosting]:
        result = await self.db.execute(
            select(JobPosting)
            .where(JobPosting.status == JobStatus.ACTIVE.value, JobPosting.deadline >= now)
            .order_by(JobPosting.deadline.asc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all()

    async def count_open(self, now: datetime) -> int:
        result = await self.db.execute(
            select(func.count(JobPosting.id)).where(
                JobPosting.status == JobStatus.ACTIVE.value, JobPosting.deadline >= now
            )
        )
        return result.scalar() or 0

    async def find_many_by_owner(self, owner_id: Optional[UUID]) -> List[Tuple[JobPosting, int]]:
        """Postings with their application counts; ``owner_id=None`` lists all."""
        application_count = (
            select(func.count(Application.id))
            .where(Application.job_posting_id == JobPosting.id)
            .correlate(JobPosting)
            .scalar_subquery()
        )
        query = select(JobPosting, application_count).order_by(JobPosting.created_at.desc())
        if owner_id is not None:
            query = query.where(JobPosting.owner_id == owner_id)
        result = await self.db.execute(query)
        return [(job, count or 0) for job, count in result.all()]

    async def count_applications(self, job_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Application.id)).where(Application.job_posting_id == job_id)
        )
        return result.scalar() or 0

    async def count_by_owner(self, owner_id: UUID, status: Optional[JobStatus] = None) -> int:
        query = select(func.count(JobPosting.id)).where(JobPosting.owner_id == owner_id)
        if status is not None:
            query = query.where(JobPosting.status == JobStatus(status).value)
        result = await self.db.execute(query)
        return result.scalar() or 0

    async def create(self, owner_id: UUID, **fields: Any) -> JobPosting:
        job = JobPosting(owner_id=owner_id, status=JobStatus.ACTIVE.value, **fields)
        self.db.add(job)
        await self.db.flush()
        return job

    async def update(self, job: JobPosting, **fields: Any) -> JobPosting:
        for name, value in fields.items():
            setattr(job, name, value)
        job.updated_at = utcnow()
        await self.db.flush()
        return job


class ApplicationStore:
    """Applications; the (user, job) unique constraint lives in the table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_by_id(self, application_id: UUID) -> Optional[Application]:
        """Application with its job posting and applicant profile loaded."""
        result = await self.db.execute(
            select(Application)
            .where(Application.id == application_id)
            .options(*APPLICATION_LOADERS)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def find_by_user_and_job(self, user_id: UUID, job_posting_id: UUID) -> Optional[Application]:
        result = await self.db.execute(
            select(Application).where(
                Application.user_id == user_id,
                Application.job_posting_id == job_posting_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_many_by_job(self, job_posting_id: UUID) -> Sequence[Application]:
        result = await self.db.execute(
            select(Application)
            .where(Application.job_posting_id == job_posting_id)
            .options(*APPLICATION_LOADERS)
            .execution_options(populate_existing=True)
            .order_by(Application.updated_at.desc())
        )
        return result.scalars().all()

    async def find_many_by_user(self, user_id: UUID) -> Sequence[Application]:
        result = await self.db.execute(
            select(Application)
            .where(Application.user_id == user_id)
            .options(*APPLICATION_LOADERS)
            .execution_options(populate_existing=True)
            .order_by(Application.created_at.desc())
        )
        return result.scalars().all()

    async def find_all(self) -> Sequence[Application]:
        result = await self.db.execute(
            select(Application)
            .options(*APPLICATION_LOADERS)
            .execution_options(populate_existing=True)
            .order_by(Application.created_at.desc())
        )
        return result.scalars().all()

    async def create(self, user_id: UUID, job_posting_id: UUID, now: datetime) -> Application:
        """Insert a PENDING application.

        Raises ``sqlalchemy.exc.IntegrityError`` when the (user, job) pair
        already exists.
        """
        application = Application(
            user_id=user_id,
            job_posting_id=job_posting_id,
            status=ApplicationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(application)
        await self.db.flush()
        return application

    async def update(
        self,
        application: Application,
        status: ApplicationStatus,
        notes: Optional[str],
        now: datetime,
    ) -> Application:
        application.status = ApplicationStatus(status).value
        if notes:
            application.notes = notes
        application.updated_at = now
        await self.db.flush()
        return application

    async def delete(self, application: Application) -> None:
        await self.db.execute(delete(Application).where(Application.id == application.id))
        await self.db.flush()

    async def count(
        self,
        status: Optional[ApplicationStatus] = None,
        owner_id: Optional[UUID] = None,
    ) -> int:
        """Tally for dashboards, optionally by status and by job owner."""
        query = select(func.count(Application.id))
        if owner_id is not None:
            query = query.join(JobPosting, Application.job_posting_id == JobPosting.id).where(
                JobPosting.owner_id == owner_id
            )
        if status is not None:
            query = query.where(Application.status == ApplicationStatus(status).value)
        result = await self.db.execute(query)
        return result.scalar() or 0
