"""
Application lifecycle: submission, status changes, cancellation.

States: PENDING, INTERVIEWING, ACCEPTED, REJECTED. Creation enters PENDING.
The conventional flow is PENDING -> INTERVIEWING -> ACCEPTED/REJECTED, but an
authorized owner or admin may set any of the four labels at any time,
including resetting a decided application back to PENDING. Only the caller
and the label are checked, never the (from, to) pair.
"""

from datetime import datetime
from typing import Callable, List, Optional, Sequence
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateError,
    InvalidInputError,
    MissingDocumentsError,
    NotFoundError,
)
from app.core.identity import CurrentUser
from app.core.permissions import Action, Resource, require
from app.db.base import utcnow
from app.db.repositories import ApplicationStore, JobPostingStore, ProfileStore
from app.models.application import Application
from app.models.profile import Profile
from app.schemas.application import (
    ApplicantBrief,
    ApplicationView,
    CompatibilityResponse,
    JobBrief,
)
from app.services.matching_service import check_mbti_compatibility
from app.utils.constants import APPLICATION_STATUSES, REQUIRED_DOCUMENTS, ApplicationStatus

logger = structlog.get_logger(__name__)

# Conventional progression plus the reset edges owners use to correct mistakes
TRANSITIONS = {
    ApplicationStatus.PENDING: {ApplicationStatus.INTERVIEWING, ApplicationStatus.REJECTED},
    ApplicationStatus.INTERVIEWING: {ApplicationStatus.ACCEPTED, ApplicationStatus.REJECTED},
    ApplicationStatus.ACCEPTED: {ApplicationStatus.PENDING},
    ApplicationStatus.REJECTED: {ApplicationStatus.PENDING},
}


def is_conventional_transition(current: ApplicationStatus, new: ApplicationStatus) -> bool:
    """True for edges of the usual flow (and for no-op updates). Informational."""
    return current == new or new in TRANSITIONS.get(current, set())


def parse_status(value: Optional[str]) -> ApplicationStatus:
    """Map a label onto the closed status set or raise VALIDATION."""
    try:
        return ApplicationStatus(value)
    except ValueError:
        raise InvalidInputError(
            "Invalid status. Must be one of: " + ", ".join(APPLICATION_STATUSES),
            allowed_statuses=APPLICATION_STATUSES,
        )


def missing_documents(profile: Optional[Profile]) -> List[str]:
    """Names of the required documents the profile lacks (all of them if no profile)."""
    return [
        label
        for field, label in REQUIRED_DOCUMENTS.items()
        if profile is None or not getattr(profile, field)
    ]


def application_resource(application: Optional[Application], application_id: UUID) -> Resource:
    """Authorization view of an application; ownership comes from its job posting."""
    if application is None:
        return Resource.missing("application", application_id)
    return Resource(
        kind="application",
        id=application.id,
        owner_id=application.job_posting.owner_id if application.job_posting else None,
        user_id=application.user_id,
    )


def build_application_view(application: Application) -> ApplicationView:
    """Application plus applicant, job and the advisory MBTI compatibility.

    Expects ``user.profile`` and ``job_posting`` to be loaded.
    """
    user = application.user
    profile = user.profile if user is not None else None
    job = application.job_posting

    applicant = None
    if user is not None:
        applicant = ApplicantBrief(
            id=user.id,
            email=user.email,
            name=profile.full_name if profile else "Unknown Applicant",
            phone=profile.phone if profile else None,
            mbti_type=profile.mbti_type if profile else None,
            resume_url=profile.resume_url if profile else None,
            certificate_url=profile.certificate_url if profile else None,
        )

    compatibility = None
    if job is not None:
        result = check_mbti_compatibility(profile.mbti_type if profile else None, job.mbti_types)
        compatibility = CompatibilityResponse(**result.to_dict())

    return ApplicationView(
        id=application.id,
        user_id=application.user_id,
        job_posting_id=application.job_posting_id,
        status=application.status,
        notes=application.notes,
        created_at=application.created_at,
        updated_at=application.updated_at,
        applicant=applicant,
        job=JobBrief.model_validate(job) if job is not None else None,
        compatibility=compatibility,
    )


class ApplicationService:
    """Owns the application state machine and its preconditions."""

    def __init__(self, db: AsyncSession, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.applications = ApplicationStore(db)
        self.jobs = JobPostingStore(db)
        self.profiles = ProfileStore(db)

    async def create(self, applicant: Optional[CurrentUser], job_posting_id: UUID) -> Application:
        """
        Submit an application for the current user.

        Preconditions, first failure wins:
        1. resume and certificate uploaded (MISSING_DOCUMENTS)
        2. job exists, is ACTIVE and its deadline has not passed (NOT_FOUND)
        3. no earlier application to the same job (DUPLICATE)

        The duplicate lookup is only a fast path; the unique constraint on
        (user_id, job_posting_id) decides concurrent submissions.
        """
        require(
            applicant,
            Action.APPLICATION_CREATE,
            Resource("application", user_id=applicant.id if applicant else None),
        )
        now = self.clock()

        profile = await self.profiles.find_by_user_id(applicant.id)
        missing = missing_documents(profile)
        if missing:
            raise MissingDocumentsError(missing)

        job = await self.jobs.find_open_by_id(job_posting_id, now)
        if job is None:
            raise NotFoundError("Job not found or no longer active")

        existing = await self.applications.find_by_user_and_job(applicant.id, job_posting_id)
        if existing is not None:
            raise DuplicateError("You have already applied for this position")

        try:
            application = await self.applications.create(applicant.id, job_posting_id, now)
        except IntegrityError:
            await self.db.rollback()
            logger.info(
                "application_duplicate_race",
                user_id=str(applicant.id),
                job_posting_id=str(job_posting_id),
            )
            raise DuplicateError("You have already applied for this position")

        await self.db.commit()
        logger.info(
            "application_created",
            application_id=str(application.id),
            user_id=str(applicant.id),
            job_posting_id=str(job_posting_id),
        )
        return application

    async def update_status(
        self,
        application_id: UUID,
        new_status: Optional[str],
        notes: Optional[str],
        actor: Optional[CurrentUser],
    ) -> Application:
        """
        Set an application's status (and optionally its notes).

        Allowed for the owner of the application's job posting and for admins.
        Any of the four labels is accepted from any state; repeating the
        current label just refreshes ``updated_at``. Empty notes leave the
        stored notes untouched.
        """
        require(actor, Action.APPLICATION_UPDATE_STATUS)
        status = parse_status(new_status)

        application = await self.applications.find_by_id(application_id)
        resource = application_resource(application, application_id)
        require(actor, Action.APPLICATION_UPDATE_STATUS, resource)

        previous = ApplicationStatus(application.status)
        if not is_conventional_transition(previous, status):
            logger.info(
                "application_unusual_transition",
                application_id=str(application.id),
                from_status=previous.value,
                to_status=status.value,
                actor_id=str(actor.id),
            )

        await self.applications.update(application, status, notes, self.clock())
        await self.db.commit()
        logger.info(
            "application_status_updated",
            application_id=str(application.id),
            from_status=previous.value,
            to_status=status.value,
        )
        return application

    async def cancel(self, application_id: UUID, actor: Optional[CurrentUser]) -> None:
        """Withdraw an application. Only the applicant may do this, in any status."""
        require(actor, Action.APPLICATION_CANCEL)

        application = await self.applications.find_by_id(application_id)
        require(actor, Action.APPLICATION_CANCEL, application_resource(application, application_id))

        await self.applications.delete(application)
        await self.db.commit()
        logger.info(
            "application_cancelled", application_id=str(application_id), actor_id=str(actor.id)
        )

    async def get(self, application_id: UUID, actor: Optional[CurrentUser]) -> Application:
        """Read one application as its applicant, the job owner or an admin."""
        require(actor, Action.APPLICATION_READ)
        application = await self.applications.find_by_id(application_id)
        require(actor, Action.APPLICATION_READ, application_resource(application, application_id))
        return application

    async def list_own(self, actor: Optional[CurrentUser]) -> Sequence[Application]:
        own = Resource("application", user_id=actor.id if actor else None)
        require(actor, Action.APPLICATION_LIST_OWN, own)
        return await self.applications.find_many_by_user(actor.id)

    async def list_for_job(
        self, job_posting_id: UUID, actor: Optional[CurrentUser]
    ) -> Sequence[Application]:
        """Applications to one posting, for its owner or an admin."""
        require(actor, Action.JOB_LIST_APPLICATIONS)
        job = await self.jobs.find_by_id(job_posting_id)
        resource = (
            Resource("job", id=job.id, owner_id=job.owner_id)
            if job is not None
            else Resource.missing("job", job_posting_id)
        )
        require(actor, Action.JOB_LIST_APPLICATIONS, resource)
        return await self.applications.find_many_by_job(job_posting_id)

    async def list_all(self, actor: Optional[CurrentUser]) -> Sequence[Application]:
        require(actor, Action.APPLICATION_LIST_ALL)
        return await self.applications.find_all()

    async def count_pending(self, actor: Optional[CurrentUser]) -> int:
        """PENDING applications on the caller's postings (all postings for admins)."""
        require(actor, Action.DASHBOARD_COUNTS)
        owner_id = None if actor.is_admin else actor.id
        return await self.applications.count(status=ApplicationStatus.PENDING, owner_id=owner_id)
