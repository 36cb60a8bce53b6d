"""Application model."""

from sqlalchemy import Column, ForeignKey, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import ApplicationStatus


class Application(Base):
    """Job application model."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("user_id", "job_posting_id", name="unique_user_job_application"),
    )

    user_id = Column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_posting_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("job_postings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Status tracking
    status = Column(String(20), nullable=False, default=ApplicationStatus.PENDING.value, index=True)
    notes = Column(Text)  # Written by the job owner or an admin

    # Relationships
    user = relationship("User", back_populates="applications")
    job_posting = relationship("JobPosting", back_populates="applications")

    def __repr__(self):
        return f"<Application {self.user_id} -> {self.job_posting_id} ({self.status})>"
