"""Admin console schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.schemas.profile import ProfileResponse


class RoleUpdate(BaseModel):
    """Role change request; the label is validated against the Role enum."""

    role: str


class ProfileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    first_name: str
    last_name: str
    mbti_type: Optional[str] = None
    mbti_completed: bool = False


class UserListItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str
    created_at: datetime
    profile: Optional[ProfileSummary] = None


class UserListResponse(BaseModel):
    users: List[UserListItem]
    total: int


class AppliedJobBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str


class UserApplicationBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    status: str
    created_at: datetime
    updated_at: datetime
    job_posting: Optional[AppliedJobBrief] = None


class UserDetail(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str
    created_at: datetime
    updated_at: datetime
    profile: Optional[ProfileResponse] = None
    applications: List[UserApplicationBrief] = []


class UserDetailResponse(BaseModel):
    user: UserDetail


class UserUpdatedResponse(BaseModel):
    user: UserListItem


class DeleteResponse(BaseModel):
    success: bool
