"""
Pydantic schemas shared by the services and the API layer.
"""

import re
from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

JobType = Literal["full-time", "part-time", "contract", "internship"]
ExperienceLevel = Literal["entry", "mid", "senior", "executive"]
ApplicationStatus = Literal["pending", "reviewed", "shortlisted", "rejected"]
SortOption = Literal["date", "salary", "title"]

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"

# Largest value a SQLite INTEGER column can hold
MAX_DB_INT = 2**63 - 1


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Stored datetimes are naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============== User Schemas ==============


class ProfileData(BaseModel):
    """Job seeker profile sub-record."""

    resume: Optional[str] = None  # URL to resume file
    skills: list[str] = []
    experience: Optional[str] = None
    education: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None


class CompanyData(BaseModel):
    """Employer company sub-record."""

    name: Optional[str] = None
    description: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None


class UserRegister(BaseModel):
    """Schema for user registration."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    role: str = "jobseeker"  # 'jobseeker' | 'employer'
    profile: Optional[ProfileData] = None
    company: Optional[CompanyData] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        """Validate email format."""
        if v is None or not v.strip():
            return None
        v = v.strip()
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError("Invalid email format")
        return v.lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        return v.strip() if v else v


class UserLogin(BaseModel):
    email: str = ""
    password: str = ""


class ProfileUpdate(BaseModel):
    """Partial profile update. ``role`` is accepted but never applied."""

    name: Optional[str] = None
    role: Optional[str] = None
    profile: Optional[ProfileData] = None
    company: Optional[CompanyData] = None


class UserPublic(BaseModel):
    """Schema for user response (without password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    role: str
    profile: Optional[ProfileData] = None
    company: Optional[CompanyData] = None
    created_at: Optional[datetime] = None


class EmployerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    company: Optional[CompanyData] = None


class ApplicantSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    profile: Optional[ProfileData] = None


# ============== Job Schemas ==============


class SalaryRange(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    min: Optional[int] = Field(None, le=MAX_DB_INT)
    max: Optional[int] = Field(None, le=MAX_DB_INT)
    currency: str = "INR"


class JobCreate(BaseModel):
    """Schema for creating a job posting. Required text fields are checked by the service."""

    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    salary: Optional[SalaryRange] = None
    type: JobType = "full-time"
    skills: list[str] = []
    experience: ExperienceLevel = "entry"
    remote: bool = False
    deadline: Optional[datetime] = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(v)


class JobUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    salary: Optional[SalaryRange] = None
    type: Optional[JobType] = None
    skills: Optional[list[str]] = None
    experience: Optional[ExperienceLevel] = None
    remote: Optional[bool] = None
    deadline: Optional[datetime] = None
    is_active: Optional[bool] = None

    @field_validator("deadline")
    @classmethod
    def normalize_deadline(cls, v: Optional[datetime]) -> Optional[datetime]:
        return _to_naive_utc(v)


class JobFilters(BaseModel):
    """Query parameters accepted by the public job search."""

    search: Optional[str] = None
    location: Optional[str] = None
    type: Optional[JobType] = None
    category: Optional[str] = None
    remote: Optional[bool] = None
    experience: Optional[ExperienceLevel] = None
    min_salary: Optional[int] = Field(None, le=MAX_DB_INT)
    max_salary: Optional[int] = Field(None, le=MAX_DB_INT)
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
    sort_by: SortOption = "date"


class ApplicationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    applicant_id: int
    applicant: Optional[ApplicantSummary] = None
    cover_letter: Optional[str] = None
    applied_at: datetime
    status: ApplicationStatus


class JobListItem(BaseModel):
    """Job as shown in listings, without applications."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    company: str
    description: str
    requirements: str
    salary: SalaryRange
    location: str
    type: str
    category: str
    skills: list[str] = []
    experience: str
    remote: bool
    employer_id: int
    employer: Optional[EmployerSummary] = None
    is_active: bool
    deadline: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class JobOut(JobListItem):
    applications: list[ApplicationOut] = []

    @classmethod
    def from_job(cls, job, applications=None) -> "JobOut":
        """Build the view, replacing the application list when one is given."""
        out = cls.model_validate(job)
        if applications is not None:
            out.applications = [ApplicationOut.model_validate(a) for a in applications]
        return out


class ApplicationStats(BaseModel):
    total: int = 0
    pending: int = 0
    reviewed: int = 0
    shortlisted: int = 0
    rejected: int = 0


class EmployerJobOut(JobOut):
    application_stats: ApplicationStats


class JobPage(BaseModel):
    """One page of search results."""

    items: list[JobListItem]
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_prev: bool


# ============== Application Schemas ==============


class ApplicationSubmit(BaseModel):
    cover_letter: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    """Schema for updating an application's status. Checked by the service."""

    status: str


class ApplicationReceipt(BaseModel):
    job_id: int
    application_id: int
    title: str
    company: str
    applied_at: datetime
    status: ApplicationStatus


class AppliedJobSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    company: str
    location: str
    type: str
    salary: SalaryRange


class MyApplicationOut(BaseModel):
    """One application as seen by the job seeker who submitted it."""

    id: int
    job: AppliedJobSummary
    employer: Optional[EmployerSummary] = None
    applied_at: datetime
    status: ApplicationStatus
    cover_letter: Optional[str] = None

    @classmethod
    def from_application(cls, application) -> "MyApplicationOut":
        return cls(
            id=application.id,
            job=AppliedJobSummary.model_validate(application.job),
            employer=(
                EmployerSummary.model_validate(application.job.employer)
                if application.job.employer
                else None
            ),
            applied_at=application.applied_at,
            status=application.status,
            cover_letter=application.cover_letter,
        )
