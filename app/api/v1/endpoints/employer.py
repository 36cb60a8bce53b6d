"""
Employer API
Job posting management and applicant review for employers (and admins)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_application_service, get_current_user, get_job_service
from app.api.v1.jobs import job_response, job_summary
from app.core.identity import CurrentUser
from app.schemas.application import (
    ApplicationListResponse,
    ApplicationStatusUpdate,
    ApplicationUpdatedResponse,
    ApplicationView,
    CountResponse,
)
from app.schemas.job import (
    JobListResponse,
    JobMessageResponse,
    JobPostingCreate,
    JobPostingResponse,
    JobPostingUpdate,
    JobStatusUpdate,
)
from app.services.application_service import ApplicationService, build_application_view
from app.services.job_service import JobService

router = APIRouter()


# ==================== Job Postings ====================

@router.get("/jobs", response_model=JobListResponse)
async def list_my_jobs(
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    List the current employer's postings

    Each row carries the number of applications received.
    """
    rows = await service.list_mine(current_user)
    return JobListResponse(jobs=[job_summary(job, count) for job, count in rows], total=len(rows))


@router.post("/jobs", response_model=JobMessageResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    job_data: JobPostingCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Create a job posting owned by the current user. New postings are ACTIVE."""
    job = await service.create(current_user, job_data)
    return JobMessageResponse(message="Job posting created successfully", job=job_response(job, 0))


@router.get("/jobs/count", response_model=CountResponse)
async def count_active_jobs(
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Number of ACTIVE postings owned by the current user."""
    return CountResponse(count=await service.count_active(current_user))


@router.get("/jobs/{job_id}", response_model=JobPostingResponse)
async def get_job(
    job_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Get one of your postings with its application count."""
    job, count = await service.get(job_id, current_user)
    return job_response(job, count)


@router.patch("/jobs/{job_id}", response_model=JobMessageResponse)
async def update_job(
    job_id: UUID,
    job_data: JobPostingUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    Update a posting

    Required fields are replaced; optional fields change only when present
    in the body. `status` (ACTIVE/INACTIVE) may be sent as well.
    """
    job = await service.update(job_id, job_data, current_user)
    return JobMessageResponse(message="Job posting updated successfully", job=job_response(job))


@router.patch("/jobs/{job_id}/status", response_model=JobMessageResponse)
async def set_job_status(
    job_id: UUID,
    status_data: JobStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Activate or deactivate a posting. Inactive postings stop accepting applications."""
    job = await service.set_status(job_id, status_data.status, current_user)
    return JobMessageResponse(
        message=f"Job posting status set to {job.status}", job=job_response(job)
    )


@router.get("/jobs/{job_id}/applications", response_model=ApplicationListResponse)
async def list_job_applications(
    job_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Applications received by a posting, with applicant documents and MBTI match."""
    applications = await service.list_for_job(job_id, current_user)
    return ApplicationListResponse(
        applications=[build_application_view(a) for a in applications],
        total=len(applications),
    )


# ==================== Applications ====================

@router.get("/applications/count", response_model=CountResponse)
async def count_pending_applications(
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """PENDING applications across your postings (all postings for admins)."""
    return CountResponse(count=await service.count_pending(current_user))


@router.get("/applications/{application_id}", response_model=ApplicationView)
async def get_application(
    application_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    application = await service.get(application_id, current_user)
    return build_application_view(application)


@router.patch("/applications/{application_id}/status", response_model=ApplicationUpdatedResponse)
async def update_application_status(
    application_id: UUID,
    status_data: ApplicationStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """
    Move an application to PENDING, INTERVIEWING, ACCEPTED or REJECTED

    Any label may be set from any state. Empty `notes` keep the stored notes.
    """
    application = await service.update_status(
        application_id, status_data.status, status_data.notes, current_user
    )
    return ApplicationUpdatedResponse(
        message="Application status updated successfully",
        application=build_application_view(application),
    )
