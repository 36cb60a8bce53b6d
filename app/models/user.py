"""User model."""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.utils.constants import Role


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=Role.STUDENT.value)

    # Relationships
    profile = relationship(
        "Profile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    applications = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )
    job_postings = relationship("JobPosting", back_populates="owner")

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
