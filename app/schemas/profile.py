"""Profile schemas."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileResponse(BaseModel):
    """Profile response schema."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID
    user_id: UUID
    first_name: str
    last_name: str
    phone: Optional[str] = None
    mbti_type: Optional[str] = None
    mbti_completed: bool = False
    resume_url: Optional[str] = None
    certificate_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(BaseModel):
    """Partial profile update. Omitted fields are left untouched, explicit
    nulls clear the field."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    mbti_type: Optional[str] = Field(None, pattern=r"^[EI][SN][TF][JP]$")
    mbti_completed: Optional[bool] = None
    resume_url: Optional[str] = Field(None, max_length=500)
    certificate_url: Optional[str] = Field(None, max_length=500)

    @field_validator("phone", "mbti_type", "resume_url", "certificate_url", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        """Blank strings mean "absent", never an empty value."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ProfileEnvelope(BaseModel):
    """Own profile plus the minimal account fields."""

    profile: ProfileResponse
    user: "UserBrief"


class UserBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    role: str


ProfileEnvelope.model_rebuild()
