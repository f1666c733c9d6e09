"""
Job postings: creation, public search, owner-only updates and soft delete.
"""

import logging
import math
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError, ValidationError
from app.db.session import commit_or_fail
from app.models import Application, Job, User
from app.models.user import EMPLOYER
from app.schemas import JobCreate, JobFilters, JobListItem, JobPage, JobUpdate
from app.services import policy

logger = logging.getLogger("jobs")

REQUIRED_FIELDS = ("title", "company", "description", "requirements", "location", "category")
NOT_OWNED_MESSAGE = "Job not found or you are not authorized to modify it"

SORT_OPTIONS = {
    "date": (Job.created_at.desc(), Job.id.desc()),
    "salary": (Job.salary_min.desc().nulls_last(), Job.created_at.desc()),
    "title": (Job.title.asc(), Job.id.asc()),
}


def _apply_salary(job: Job, salary) -> None:
    if salary is None:
        job.salary_min = None
        job.salary_max = None
        job.salary_currency = "INR"
        return
    job.salary_min = salary.min
    job.salary_max = salary.max
    job.salary_currency = salary.currency or "INR"


def _load_job(db: Session, job_id: int) -> Optional[Job]:
    return (
        db.query(Job)
        .options(
            selectinload(Job.employer),
            selectinload(Job.applications).selectinload(Application.applicant),
        )
        .filter(Job.id == job_id)
        .first()
    )


def get_owned_job(db: Session, actor: User, job_id: int) -> Job:
    """Fetch a job the actor owns; absence and foreign ownership look the same."""
    job = _load_job(db, job_id)
    if job is None or not policy.owns_job(actor, job):
        raise NotFoundError(NOT_OWNED_MESSAGE)
    return job


def create_job(db: Session, actor: User, data: JobCreate) -> Job:
    policy.require_role(actor, EMPLOYER, "Only employers can create job postings")

    values = data.model_dump(exclude={"salary"})
    missing = [f for f in REQUIRED_FIELDS if not (values.get(f) or "").strip()]
    if missing:
        raise ValidationError(
            "Please provide all required fields: " + ", ".join(REQUIRED_FIELDS)
        )
    for field in REQUIRED_FIELDS:
        values[field] = values[field].strip()

    job = Job(**values, employer_id=actor.id, is_active=True)
    _apply_salary(job, data.salary)

    db.add(job)
    commit_or_fail(db, "Server error creating job")
    db.refresh(job)

    logger.info(f"Employer {actor.id} created job {job.id}: {job.title}")
    return job


def search_jobs(db: Session, filters: JobFilters) -> JobPage:
    """
    Public search over active postings.

    Every provided filter narrows the result; salary bounds exclude postings
    that lack the bounded value.
    """
    query = db.query(Job).filter(Job.is_active.is_(True))

    # Filter text is matched literally; % and _ are escaped
    if filters.search:
        term = filters.search.strip()
        query = query.filter(
            or_(
                Job.title.icontains(term, autoescape=True),
                Job.description.icontains(term, autoescape=True),
                Job.company.icontains(term, autoescape=True),
            )
        )

    if filters.location:
        query = query.filter(Job.location.icontains(filters.location.strip(), autoescape=True))

    if filters.type:
        query = query.filter(Job.type == filters.type)

    if filters.category:
        query = query.filter(Job.category.icontains(filters.category.strip(), autoescape=True))

    if filters.remote:
        query = query.filter(Job.remote.is_(True))

    if filters.experience:
        query = query.filter(Job.experience == filters.experience)

    if filters.min_salary is not None:
        query = query.filter(Job.salary_min.isnot(None), Job.salary_min >= filters.min_salary)

    if filters.max_salary is not None:
        query = query.filter(Job.salary_max.isnot(None), Job.salary_max <= filters.max_salary)

    total = query.count()

    jobs = (
        query.options(selectinload(Job.employer))
        .order_by(*SORT_OPTIONS.get(filters.sort_by, SORT_OPTIONS["date"]))
        .offset((filters.page - 1) * filters.limit)
        .limit(filters.limit)
        .all()
    )

    total_pages = math.ceil(total / filters.limit)
    return JobPage(
        items=[JobListItem.model_validate(job) for job in jobs],
        total=total,
        page=filters.page,
        limit=filters.limit,
        total_pages=total_pages,
        has_next=filters.page < total_pages,
        has_prev=filters.page > 1,
    )


def get_job(db: Session, job_id: int, actor: Optional[User] = None) -> tuple[Job, list[Application]]:
    """
    Return a job and the applications the actor is allowed to see.

    The owner sees every application, anyone else only their own, and an
    anonymous caller none.
    """
    job = _load_job(db, job_id)
    if job is None or not policy.can_view_job(actor, job):
        raise NotFoundError("Job not found")
    return job, policy.visible_applications(actor, job)


def update_job(db: Session, actor: User, job_id: int, patch: JobUpdate) -> Job:
    job = get_owned_job(db, actor, job_id)

    changes = patch.model_dump(exclude_unset=True)
    for field in REQUIRED_FIELDS:
        if field in changes:
            value = (changes[field] or "").strip()
            if not value:
                raise ValidationError(f"{field} cannot be empty")
            changes[field] = value

    for field in ("type", "experience", "remote", "is_active"):
        if field in changes and changes[field] is None:
            raise ValidationError(f"{field} cannot be null")

    if "salary" in changes:
        _apply_salary(job, patch.salary)
        del changes["salary"]

    if "skills" in changes and changes["skills"] is None:
        changes["skills"] = []

    for field, value in changes.items():
        setattr(job, field, value)

    commit_or_fail(db, "Server error updating job")
    db.refresh(job)

    logger.info(f"Employer {actor.id} updated job {job.id}: {sorted(patch.model_fields_set)}")
    return job


def delete_job(db: Session, actor: User, job_id: int) -> Job:
    """Soft delete: the posting is deactivated, never removed."""
    job = get_owned_job(db, actor, job_id)

    if job.is_active:
        job.is_active = False
        commit_or_fail(db, "Server error deleting job")
        logger.info(f"Employer {actor.id} deactivated job {job.id}")

    return job


def list_my_jobs(db: Session, actor: User) -> list[Job]:
    """All postings owned by an employer, active or not, newest first."""
    policy.require_role(actor, EMPLOYER, "Only employers can view their job postings")

    return (
        db.query(Job)
        .options(
            selectinload(Job.employer),
            selectinload(Job.applications).selectinload(Application.applicant),
        )
        .filter(Job.employer_id == actor.id)
        .order_by(Job.created_at.desc(), Job.id.desc())
        .all()
    )
