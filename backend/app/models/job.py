from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.db.base import Base

JOB_TYPES = ("full-time", "part-time", "contract", "internship")
EXPERIENCE_LEVELS = ("entry", "mid", "senior", "executive")
APPLICATION_STATUSES = ("pending", "reviewed", "shortlisted", "rejected")


class Job(Base):
    """
    A job posting.

    Owns its applications: they are created through ``Job.applications`` and
    go away only with the posting itself. "Deleting" a posting flips
    ``is_active`` instead of removing the row.
    """

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    company = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)

    # Salary range
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String, nullable=False, default="INR")

    # Classification
    location = Column(String, nullable=False)
    type = Column(String, nullable=False, default="full-time")
    category = Column(String, nullable=False)
    skills = Column(JSON, default=list)
    experience = Column(String, nullable=False, default="entry")
    remote = Column(Boolean, nullable=False, default=False)

    employer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    deadline = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    employer = relationship("User", back_populates="jobs")
    applications = relationship(
        "Application",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="Application.applied_at",
    )

    @property
    def salary(self) -> dict:
        return {
            "min": self.salary_min,
            "max": self.salary_max,
            "currency": self.salary_currency or "INR",
        }

    def application_for(self, user_id: int):
        """Return the application submitted by ``user_id``, if any."""
        for application in self.applications:
            if application.applicant_id == user_id:
                return application
        return None

    def status_counts(self) -> dict[str, int]:
        stats = {"total": len(self.applications)}
        for status in APPLICATION_STATUSES:
            stats[status] = sum(1 for a in self.applications if a.status == status)
        return stats

    def __repr__(self):
        return f"<Job {self.id} {self.title!r}>"


class Application(Base):
    """A job seeker's application to one posting."""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_application_job_applicant"),
    )

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    applicant_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    cover_letter = Column(Text, nullable=True)
    applied_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    status = Column(String, nullable=False, default="pending")  # see APPLICATION_STATUSES

    # Relationships
    job = relationship("Job", back_populates="applications")
    applicant = relationship("User", back_populates="applications")

    def __repr__(self):
        return f"<Application {self.applicant_id} -> {self.job_id} [{self.status}]>"
