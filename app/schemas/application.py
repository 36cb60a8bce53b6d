"""Application schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ApplicationCreate(BaseModel):
    """Apply to a job posting as the current user."""

    job_posting_id: UUID


class ApplicationStatusUpdate(BaseModel):
    """Status change by the job owner or an admin.

    ``status`` is validated by the lifecycle engine so an unknown label is
    reported as a VALIDATION error. Empty ``notes`` keep the previous notes.
    """

    status: str = Field(..., description="PENDING, INTERVIEWING, ACCEPTED or REJECTED")
    notes: Optional[str] = Field(None, max_length=5000)


class AdminApplicationStatusUpdate(ApplicationStatusUpdate):
    """Admin console variant, the application id travels in the body."""

    application_id: UUID


class CompatibilityResponse(BaseModel):
    compatible: bool
    reason: str


class ApplicantBrief(BaseModel):
    """Applicant details shown to the job owner."""

    id: UUID
    email: str
    name: str
    phone: Optional[str] = None
    mbti_type: Optional[str] = None
    resume_url: Optional[str] = None
    certificate_url: Optional[str] = None


class JobBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    location: str
    status: str
    deadline: datetime
    mbti_types: Optional[str] = None


class ApplicationResponse(BaseModel):
    """Application response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    job_posting_id: UUID
    status: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ApplicationView(ApplicationResponse):
    """Application with the applicant, the job and the advisory MBTI match."""

    applicant: Optional[ApplicantBrief] = None
    job: Optional[JobBrief] = None
    compatibility: Optional[CompatibilityResponse] = None


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationView]
    total: int


class ApplicationCreatedResponse(BaseModel):
    message: str
    application_id: UUID
    application: ApplicationResponse


class ApplicationUpdatedResponse(BaseModel):
    message: str
    application: ApplicationView


class CountResponse(BaseModel):
    count: int
