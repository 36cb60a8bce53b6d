"""Job posting schemas."""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobPostingBase(BaseModel):
    """Fields an employer fills in for a posting."""

    title: str = Field(..., min_length=1, max_length=255)
    company: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    requirements: str = Field(..., min_length=1)
    deadline: datetime = Field(..., description="ISO date or datetime, e.g. 2026-12-31")

    salary: Optional[str] = Field(None, max_length=100)
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    employment_type: Optional[str] = Field(None, max_length=50)
    mbti_types: Optional[str] = Field(None, max_length=255, description="Comma-separated, e.g. INTJ,ENTP")

    @field_validator("deadline")
    @classmethod
    def naive_utc(cls, v: datetime) -> datetime:
        """Store deadlines as naive UTC like every other timestamp."""
        if v.tzinfo is not None:
            v = v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @field_validator(
        "salary", "responsibilities", "benefits", "employment_type", "mbti_types", mode="before"
    )
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class JobPostingCreate(JobPostingBase):
    """Create request; new postings always start ACTIVE."""


class JobPostingUpdate(JobPostingBase):
    """Full update of the required fields; optional fields change only when
    sent. ``status`` may be toggled at the same time."""

    status: Optional[str] = None


class JobStatusUpdate(BaseModel):
    status: str = Field(..., description="ACTIVE or INACTIVE")


class JobPostingResponse(BaseModel):
    """Job posting response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    company: str
    location: str
    description: str
    requirements: str
    salary: Optional[str] = None
    responsibilities: Optional[str] = None
    benefits: Optional[str] = None
    employment_type: Optional[str] = None
    mbti_types: Optional[str] = None
    deadline: datetime
    status: str
    owner_id: UUID
    created_at: datetime
    updated_at: datetime
    application_count: Optional[int] = None


class JobPostingSummary(BaseModel):
    """Row of the employer's job list."""

    id: UUID
    title: str
    company: str
    location: str
    deadline: datetime
    status: str
    applications: int


class JobListResponse(BaseModel):
    jobs: List[JobPostingSummary]
    total: int


class OpenJobListResponse(BaseModel):
    jobs: List[JobPostingResponse]
    total: int
    page: int
    page_size: int


class JobMessageResponse(BaseModel):
    message: str
    job: JobPostingResponse
