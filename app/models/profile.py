"""Profile model."""

from sqlalchemy import Boolean, Column, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class Profile(Base):
    """One-to-one personal profile of a user.

    ``resume_url`` and ``certificate_url`` are only read as presence flags by
    the application gate; NULL means the document was never uploaded.
    """

    __tablename__ = "profiles"

    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone = Column(String(20))

    # Personality assessment
    mbti_type = Column(String(4))  # e.g. "INTJ", NULL until assessed
    mbti_completed = Column(Boolean, default=False, nullable=False)

    # Documents
    resume_url = Column(String(500))
    certificate_url = Column(String(500))

    # Relationships
    user = relationship("User", back_populates="profile")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self):
        return f"<Profile {self.full_name}>"
