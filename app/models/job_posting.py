"""Job posting model."""

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import JobStatus


class JobPosting(Base):
    """Job posting owned by the employer (or admin) who created it."""

    __tablename__ = "job_postings"

    title = Column(String(255), nullable=False, index=True)
    company = Column(String(255), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)

    # Optional details
    salary = Column(String(100))
    responsibilities = Column(Text)
    benefits = Column(Text)
    employment_type = Column(String(50))  # Full-time, Part-time, Contract, ...
    mbti_types = Column(String(255))  # "INTJ,ENTJ,INTP", free-form

    deadline = Column(DateTime, nullable=False, index=True)
    status = Column(String(20), nullable=False, default=JobStatus.ACTIVE.value, index=True)

    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="job_postings")
    applications = relationship(
        "Application", back_populates="job_posting", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<JobPosting {self.title} at {self.company}>"
