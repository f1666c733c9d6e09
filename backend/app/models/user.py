from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.orm import relationship

from app.core.security import get_password_hash, verify_password
from app.db.base import Base

JOBSEEKER = "jobseeker"
EMPLOYER = "employer"
ROLES = (JOBSEEKER, EMPLOYER)


class User(Base):
    """Registered account, either a job seeker or an employer."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=JOBSEEKER)  # 'jobseeker' | 'employer'

    # Only the sub-record matching the role is kept, the other stays NULL
    # profile: {"resume", "skills", "experience", "education", "phone", "location"}
    profile = Column(JSON, nullable=True)
    # company: {"name", "description", "website", "location"}
    company = Column(JSON, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    jobs = relationship("Job", back_populates="employer")
    applications = relationship("Application", back_populates="applicant")

    def set_password(self, password: str) -> None:
        self.hashed_password = get_password_hash(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    @property
    def details(self) -> dict | None:
        """The role-appropriate sub-record."""
        if self.role == EMPLOYER:
            return self.company
        return self.profile

    def __repr__(self):
        return f"<User {self.id} {self.email} ({self.role})>"
