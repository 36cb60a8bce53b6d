"""Job posting management for employers and admins."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInputError
from app.core.identity import CurrentUser
from app.core.permissions import Action, Resource, require
from app.db.base import utcnow
from app.db.repositories import JobPostingStore
from app.models.job_posting import JobPosting
from app.schemas.job import JobPostingCreate, JobPostingUpdate
from app.utils.constants import JOB_STATUSES, JobStatus

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "company", "location", "description", "requirements", "deadline")
OPTIONAL_FIELDS = ("salary", "responsibilities", "benefits", "employment_type", "mbti_types")


def parse_job_status(value: Optional[str]) -> JobStatus:
    try:
        return JobStatus(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid status. Must be " + " or ".join(JOB_STATUSES),
            allowed_statuses=JOB_STATUSES,
        )


def job_resource(job: Optional[JobPosting], job_id: UUID) -> Resource:
    if job is None:
        return Resource.missing("job", job_id)
    return Resource(kind="job", id=job.id, owner_id=job.owner_id)


class JobService:
    """Create, edit and list job postings under the ownership rules."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.jobs = JobPostingStore(db)

    async def list_open(
        self, actor: Optional[CurrentUser], page: int = 1, page_size: int = 20
    ) -> Tuple[Sequence[JobPosting], int]:
        """One page of postings still accepting applications, soonest deadline
        first, with the number of open postings across all pages."""
        require(actor, Action.JOB_LIST_OPEN)
        now = self.clock()
        jobs = await self.jobs.find_open(now, offset=(page - 1) * page_size, limit=page_size)
        return jobs, await self.jobs.count_open(now)

    async def list_mine(self, actor: Optional[CurrentUser]) -> List[Tuple[JobPosting, int]]:
        """The caller's own postings with application counts."""
        require(actor, Action.JOB_READ)
        return await self.jobs.find_many_by_owner(actor.id)

    async def list_all(self, actor: Optional[CurrentUser]) -> List[Tuple[JobPosting, int]]:
        require(actor, Action.JOB_LIST_ALL)
        return await self.jobs.find_many_by_owner(None)

    async def create(self, actor: Optional[CurrentUser], data: JobPostingCreate) -> JobPosting:
        require(actor, Action.JOB_CREATE)
        job = await self.jobs.create(owner_id=actor.id, **data.model_dump())
        await self.db.commit()
        logger.info(f"Job {job.id} created by {actor.id}")
        return job

    async def get(self, job_id: UUID, actor: Optional[CurrentUser]) -> Tuple[JobPosting, int]:
        """One posting with its application count, for its owner or an admin."""
        require(actor, Action.JOB_READ)
        job = await self.jobs.find_by_id(job_id)
        require(actor, Action.JOB_READ, job_resource(job, job_id))
        return job, await self.jobs.count_applications(job.id)

    async def update(
        self, job_id: UUID, data: JobPostingUpdate, actor: Optional[CurrentUser]
    ) -> JobPosting:
        """Replace the required fields; optional fields only when sent."""
        require(actor, Action.JOB_UPDATE)
        job = await self.jobs.find_by_id(job_id)
        require(actor, Action.JOB_UPDATE, job_resource(job, job_id))

        fields = {name: getattr(data, name) for name in REQUIRED_FIELDS}
        for name in OPTIONAL_FIELDS:
            if name in data.model_fields_set:
                fields[name] = getattr(data, name)
        if data.status is not None:
            fields["status"] = parse_job_status(data.status).value

        await self.jobs.update(job, **fields)
        await self.db.commit()
        logger.info(f"Job {job.id} updated by {actor.id}")
        return job

    async def set_status(
        self, job_id: UUID, status: Optional[str], actor: Optional[CurrentUser]
    ) -> JobPosting:
        """Toggle a posting between ACTIVE and INACTIVE."""
        require(actor, Action.JOB_UPDATE)
        new_status = parse_job_status(status)
        job = await self.jobs.find_by_id(job_id)
        require(actor, Action.JOB_UPDATE, job_resource(job, job_id))

        await self.jobs.update(job, status=new_status.value)
        await self.db.commit()
        logger.info(f"Job {job.id} status set to {new_status.value} by {actor.id}")
        return job

    async def count_active(self, actor: Optional[CurrentUser]) -> int:
        """ACTIVE postings owned by the caller, for the dashboard card."""
        require(actor, Action.DASHBOARD_COUNTS)
        return await self.jobs.count_by_owner(actor.id, status=JobStatus.ACTIVE)
