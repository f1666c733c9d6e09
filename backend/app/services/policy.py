"""
Authorization policy.

Pure checks over (actor, job). An actor is a ``User`` or ``None`` for
anonymous callers. Ownership is always decided by comparing identifiers.
"""

from typing import Optional

from app.core.exceptions import AuthorizationError
from app.models import Application, Job, User
from app.models.user import EMPLOYER, JOBSEEKER


def is_employer(actor: Optional[User]) -> bool:
    return actor is not None and actor.role == EMPLOYER


def is_jobseeker(actor: Optional[User]) -> bool:
    return actor is not None and actor.role == JOBSEEKER


def require_role(actor: Optional[User], role: str, message: str) -> User:
    """Return the actor, or raise AuthorizationError if it does not hold ``role``."""
    if actor is None or actor.role != role:
        raise AuthorizationError(message)
    return actor


def owns_job(actor: Optional[User], job: Job) -> bool:
    return is_employer(actor) and actor.id == job.employer_id


def has_applied(actor: Optional[User], job: Job) -> bool:
    return actor is not None and job.application_for(actor.id) is not None


def can_view_job(actor: Optional[User], job: Job) -> bool:
    """Inactive postings stay reachable for their owner and existing applicants only."""
    if job.is_active:
        return True
    return owns_job(actor, job) or has_applied(actor, job)


def visible_applications(actor: Optional[User], job: Job) -> list[Application]:
    """Applications the actor may see: all for the owner, their own otherwise."""
    if owns_job(actor, job):
        return list(job.applications)
    if actor is None:
        return []
    return [a for a in job.applications if a.applicant_id == actor.id]
