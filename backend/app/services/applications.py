"""
Application workflow.

Applications live inside their job posting. A job seeker submits once per
posting; the owning employer moves the status between any of the four
values (pending, reviewed, shortlisted, rejected). There is no terminal
status.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import (
    AuthorizationError,
    DeadlinePassedError,
    DuplicateApplicationError,
    InactivePostingError,
    NotFoundError,
    ValidationError,
)
from app.db.session import commit_or_fail
from app.models import Application, Job, User
from app.models.job import APPLICATION_STATUSES
from app.models.user import EMPLOYER, JOBSEEKER
from app.schemas import ApplicationReceipt
from app.services import policy

logger = logging.getLogger("applications")


def submit_application(
    db: Session,
    actor: User,
    job_id: int,
    cover_letter: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ApplicationReceipt:
    """
    Apply to a job posting.

    The duplicate check here is a read before the write; the unique
    constraint on (job_id, applicant_id) catches the concurrent case.
    """
    policy.require_role(actor, JOBSEEKER, "Only job seekers can apply for jobs")
    now = now or datetime.utcnow()

    job = db.query(Job).options(selectinload(Job.applications)).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError("Job not found")

    if not job.is_active:
        raise InactivePostingError()

    if job.deadline is not None and now > job.deadline:
        raise DeadlinePassedError()

    if policy.has_applied(actor, job):
        raise DuplicateApplicationError()

    application = Application(
        applicant_id=actor.id,
        cover_letter=cover_letter or "",
        applied_at=now,
        status="pending",
    )
    job.applications.append(application)

    try:
        commit_or_fail(db, "Server error submitting application")
    except IntegrityError as e:
        raise DuplicateApplicationError() from e

    logger.info(f"User {actor.id} applied to job {job.id} (application {application.id})")

    return ApplicationReceipt(
        job_id=job.id,
        application_id=application.id,
        title=job.title,
        company=job.company,
        applied_at=application.applied_at,
        status=application.status,
    )


def list_my_applications(db: Session, actor: User) -> tuple[list[Application], dict[str, int]]:
    """
    Every application the job seeker has submitted, newest first, together
    with a count per status.
    """
    policy.require_role(actor, JOBSEEKER, "Only job seekers can view their applications")

    applications = (
        db.query(Application)
        .options(selectinload(Application.job).selectinload(Job.employer))
        .filter(Application.applicant_id == actor.id)
        .order_by(Application.applied_at.desc(), Application.id.desc())
        .all()
    )

    breakdown = {status: 0 for status in APPLICATION_STATUSES}
    for application in applications:
        breakdown[application.status] = breakdown.get(application.status, 0) + 1

    return applications, breakdown


def update_application_status(
    db: Session,
    actor: User,
    job_id: int,
    application_id: int,
    status: str,
) -> Application:
    """
    Set the status of one application on a posting the employer owns.

    Any status may follow any other.
    """
    policy.require_role(actor, EMPLOYER, "Only employers can update application status")

    if status not in APPLICATION_STATUSES:
        raise ValidationError(
            "Invalid status. Must be: pending, reviewed, shortlisted, or rejected"
        )

    job = db.query(Job).options(selectinload(Job.applications)).filter(Job.id == job_id).first()
    if job is None:
        raise NotFoundError("Job not found")

    if not policy.owns_job(actor, job):
        raise AuthorizationError("You are not authorized to modify applications for this job")

    application = next((a for a in job.applications if a.id == application_id), None)
    if application is None:
        raise NotFoundError("Application not found")

    previous = application.status
    application.status = status
    commit_or_fail(db, "Server error updating application status")
    db.refresh(application)

    logger.info(
        f"Employer {actor.id} moved application {application.id} on job {job.id}: "
        f"{previous} -> {status}"
    )
    return application
