"""Common constants."""

from enum import Enum


class Role(str, Enum):
    """User roles."""

    STUDENT = "STUDENT"
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"


class JobStatus(str, Enum):
    """Job posting statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ApplicationStatus(str, Enum):
    """Application statuses."""

    PENDING = "PENDING"
    INTERVIEWING = "INTERVIEWING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# Plain value lists, used in validation messages
USER_ROLES = [role.value for role in Role]
JOB_STATUSES = [s.value for s in JobStatus]
APPLICATION_STATUSES = [s.value for s in ApplicationStatus]

# Documents an applicant must upload before applying, keyed by profile field
REQUIRED_DOCUMENTS = {
    "resume_url": "resume",
    "certificate_url": "certificate",
}
