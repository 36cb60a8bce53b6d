"""Job endpoints - Browse postings that still accept applications."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user, get_job_service
from app.config import settings
from app.core.identity import CurrentUser
from app.models.job_posting import JobPosting
from app.schemas.job import JobPostingResponse, JobPostingSummary, OpenJobListResponse
from app.services.job_service import JobService

router = APIRouter()


def job_response(job: JobPosting, application_count: Optional[int] = None) -> JobPostingResponse:
    response = JobPostingResponse.model_validate(job)
    response.application_count = application_count
    return response


def job_summary(job: JobPosting, application_count: int) -> JobPostingSummary:
    return JobPostingSummary(
        id=job.id,
        title=job.title,
        company=job.company,
        location=job.location,
        deadline=job.deadline,
        status=job.status,
        applications=application_count,
    )


@router.get("/open", response_model=OpenJobListResponse)
async def list_open_jobs(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(
        settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE, description="Items per page"
    ),
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """
    Get paginated list of open jobs

    A job is open while its status is ACTIVE and its deadline has not
    passed. Sorted by deadline, soonest first.

    **Examples:**
    ```
    GET /api/v1/jobs/open?page=1&page_size=20
    ```
    """
    jobs, total = await service.list_open(current_user, page=page, page_size=page_size)
    return OpenJobListResponse(
        jobs=[job_response(job) for job in jobs],
        total=total,
        page=page,
        page_size=page_size,
    )
