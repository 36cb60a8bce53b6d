"""Application endpoints for students: apply, track, withdraw."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.api.deps import get_application_service, get_current_user
from app.core.identity import CurrentUser
from app.schemas.application import (
    ApplicationCreate,
    ApplicationCreatedResponse,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationView,
)
from app.schemas.auth import MessageResponse
from app.services.application_service import ApplicationService, build_application_view

router = APIRouter()


@router.post("", response_model=ApplicationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def apply_to_job(
    request: ApplicationCreate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """
    Apply to an open job posting

    **Errors:**
    - 400 `MISSING_DOCUMENTS`: resume and/or certificate not uploaded yet
    - 404 `NOT_FOUND`: job missing, inactive or past its deadline
    - 409 `DUPLICATE`: already applied to this job
    """
    application = await service.create(current_user, request.job_posting_id)
    return ApplicationCreatedResponse(
        message="Application submitted successfully",
        application_id=application.id,
        application=ApplicationResponse.model_validate(application),
    )


@router.get("/my", response_model=ApplicationListResponse)
async def list_my_applications(
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Applications submitted by the current student, newest first."""
    applications = await service.list_own(current_user)
    return ApplicationListResponse(
        applications=[build_application_view(a) for a in applications],
        total=len(applications),
    )


@router.get("/{application_id}", response_model=ApplicationView)
async def get_application(
    application_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """One application, visible to its applicant, the job owner and admins."""
    application = await service.get(application_id, current_user)
    return build_application_view(application)


@router.delete("/{application_id}", response_model=MessageResponse)
async def cancel_application(
    application_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Withdraw one of your own applications, whatever its status."""
    await service.cancel(application_id, current_user)
    return MessageResponse(message="Application cancelled successfully")
