"""Admin API endpoints: user management and platform-wide oversight."""

from uuid import UUID

from fastapi import APIRouter, Depends

from app.api.deps import get_application_service, get_current_user, get_job_service, get_user_service
from app.api.v1.jobs import job_summary
from app.core.identity import CurrentUser
from app.schemas.admin import (
    DeleteResponse,
    RoleUpdate,
    UserDetail,
    UserDetailResponse,
    UserListItem,
    UserListResponse,
    UserUpdatedResponse,
)
from app.schemas.application import (
    AdminApplicationStatusUpdate,
    ApplicationListResponse,
    ApplicationUpdatedResponse,
)
from app.schemas.job import JobListResponse
from app.services.application_service import ApplicationService, build_application_view
from app.services.job_service import JobService
from app.services.user_service import UserService

router = APIRouter()


# ==================== Users ====================

@router.get("/users", response_model=UserListResponse)
async def list_users(
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """All users with their profile summary, newest first."""
    users = await service.list_users(current_user)
    return UserListResponse(
        users=[UserListItem.model_validate(user) for user in users],
        total=len(users),
    )


@router.get("/users/{user_id}", response_model=UserDetailResponse)
async def get_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """One user with profile and applications."""
    user = await service.get_user_detail(user_id, current_user)
    return UserDetailResponse(user=UserDetail.model_validate(user))


@router.patch("/users/{user_id}", response_model=UserUpdatedResponse)
async def change_user_role(
    user_id: UUID,
    role_data: RoleUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Change another user's role. Admins cannot change their own role."""
    user = await service.change_role(user_id, role_data.role, current_user)
    return UserUpdatedResponse(user=UserListItem.model_validate(user))


@router.delete("/users/{user_id}", response_model=DeleteResponse)
async def delete_user(
    user_id: UUID,
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Delete another user with their profile and applications."""
    await service.delete_user(user_id, current_user)
    return DeleteResponse(success=True)


# ==================== Applications ====================

@router.get("/applications", response_model=ApplicationListResponse)
async def list_all_applications(
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    applications = await service.list_all(current_user)
    return ApplicationListResponse(
        applications=[build_application_view(a) for a in applications],
        total=len(applications),
    )


@router.post("/applications/status", response_model=ApplicationUpdatedResponse)
async def update_application_status(
    status_data: AdminApplicationStatusUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: ApplicationService = Depends(get_application_service),
):
    """Set any application's status."""
    application = await service.update_status(
        status_data.application_id, status_data.status, status_data.notes, current_user
    )
    return ApplicationUpdatedResponse(
        message="Application status updated successfully",
        application=build_application_view(application),
    )


# ==================== Jobs ====================

@router.get("/jobs", response_model=JobListResponse)
async def list_all_jobs(
    current_user: CurrentUser = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Every posting on the platform with its application count."""
    rows = await service.list_all(current_user)
    return JobListResponse(jobs=[job_summary(job, count) for job, count in rows], total=len(rows))
