"""
Profile API
Every user reads and edits only their own profile
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_current_user, get_user_service
from app.core.identity import CurrentUser
from app.schemas.profile import ProfileEnvelope, ProfileResponse, ProfileUpdate, UserBrief
from app.services.user_service import UserService

router = APIRouter()


@router.get("", response_model=ProfileEnvelope)
async def get_my_profile(
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """
    Get the current user's profile

    **Auth**: Any role (cookie or Bearer token)
    """
    profile = await service.get_profile(current_user)
    return ProfileEnvelope(
        profile=ProfileResponse.model_validate(profile),
        user=UserBrief(id=current_user.id, email=current_user.email, role=current_user.role.value),
    )


@router.put("", response_model=ProfileEnvelope)
async def update_my_profile(
    profile_update: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """
    Update the current user's profile

    **Auth**: Any role (cookie or Bearer token)

    Only the fields present in the body change. `resume_url` and
    `certificate_url` record uploaded documents; sending `null` clears them.
    """
    profile = await service.update_profile(current_user, profile_update)
    return ProfileEnvelope(
        profile=ProfileResponse.model_validate(profile),
        user=UserBrief(id=current_user.id, email=current_user.email, role=current_user.role.value),
    )
