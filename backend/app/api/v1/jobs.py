"""
Job API endpoints.

Public browsing and job detail, employer posting management, job seeker
applications and the employer's application review.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.models import User
from app.api.v1.auth import get_current_user, get_optional_user
from app.schemas import (
    MAX_DB_INT,
    ApplicationOut,
    ApplicationStats,
    ApplicationSubmit,
    EmployerJobOut,
    ExperienceLevel,
    JobCreate,
    JobFilters,
    JobOut,
    JobType,
    JobUpdate,
    MyApplicationOut,
    SortOption,
    StatusUpdateRequest,
)
from app.services import applications as application_service
from app.services import jobs as job_service

router = APIRouter()


# ============== Public ==============


@router.get("")
def list_jobs(
    search: Optional[str] = None,
    location: Optional[str] = None,
    type: Optional[JobType] = None,
    category: Optional[str] = None,
    remote: Optional[bool] = None,
    experience: Optional[ExperienceLevel] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", le=MAX_DB_INT),
    max_salary: Optional[int] = Query(None, alias="maxSalary", le=MAX_DB_INT),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: SortOption = Query("date", alias="sortBy"),
    db: Session = Depends(get_db),
):
    """
    Browse active jobs.

    Optional filters (combined with AND):
    - search: text in title, description or company
    - location / category: case-insensitive partial match
    - type / experience: exact match
    - remote: only remote jobs when true
    - minSalary / maxSalary: salary range bounds
    - page / limit / sortBy (date, salary, title)
    """
    filters = JobFilters(
        search=search,
        location=location,
        type=type,
        category=category,
        remote=remote,
        experience=experience,
        min_salary=min_salary,
        max_salary=max_salary,
        page=page,
        limit=limit,
        sort_by=sort_by,
    )
    result = job_service.search_jobs(db, filters)

    return {
        "success": True,
        "jobs": result.items,
        "pagination": {
            "currentPage": result.page,
            "totalPages": result.total_pages,
            "totalJobs": result.total,
            "hasNextPage": result.has_next,
            "hasPrevPage": result.has_prev,
            "limit": result.limit,
        },
        "filters": filters.model_dump(exclude={"page", "limit", "sort_by"}, exclude_none=True),
    }


# ============== Employer / Job Seeker Dashboards ==============
# Declared before /{job_id} so "my" is never parsed as an id


@router.get("/my/posted")
def my_posted_jobs(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Jobs posted by the current employer, with per-status application counts."""
    jobs = job_service.list_my_jobs(db, current_user)

    return {
        "success": True,
        "jobs": [
            EmployerJobOut(
                **JobOut.from_job(job).model_dump(),
                application_stats=ApplicationStats(**job.status_counts()),
            )
            for job in jobs
        ],
        "totalJobs": len(jobs),
    }


@router.get("/my/applications")
def my_applications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Applications submitted by the current job seeker, newest first."""
    applications, breakdown = application_service.list_my_applications(db, current_user)

    return {
        "success": True,
        "applications": [MyApplicationOut.from_application(a) for a in applications],
        "totalApplications": len(applications),
        "statusBreakdown": breakdown,
    }


# ============== Jobs ==============


@router.post("", status_code=status.HTTP_201_CREATED)
def create_job(
    job_data: JobCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    job = job_service.create_job(db, current_user, job_data)

    return {
        "success": True,
        "message": "Job created successfully",
        "job": JobOut.from_job(job, applications=[]),
    }


@router.get("/{job_id}")
def get_job(
    job_id: int = Path(..., le=MAX_DB_INT),
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """
    Job detail.

    The posting's employer sees every application; anyone else sees only
    their own application, if any.
    """
    job, visible = job_service.get_job(db, job_id, current_user)

    return {"success": True, "job": JobOut.from_job(job, applications=visible)}


@router.put("/{job_id}")
def update_job(
    patch: JobUpdate,
    job_id: int = Path(..., le=MAX_DB_INT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    job = job_service.update_job(db, current_user, job_id, patch)

    return {
        "success": True,
        "message": "Job updated successfully",
        "job": JobOut.from_job(job),
    }


@router.delete("/{job_id}")
def delete_job(
    job_id: int = Path(..., le=MAX_DB_INT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Soft delete: the job is deactivated and drops out of public listings."""
    job_service.delete_job(db, current_user, job_id)

    return {"success": True, "message": "Job deleted successfully"}


# ============== Applications ==============


@router.post("/{job_id}/apply")
def apply_for_job(
    job_id: int = Path(..., le=MAX_DB_INT),
    payload: Optional[ApplicationSubmit] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    receipt = application_service.submit_application(
        db,
        current_user,
        job_id,
        cover_letter=payload.cover_letter if payload else None,
    )

    return {
        "success": True,
        "message": "Application submitted successfully",
        "application": receipt,
    }


@router.put("/{job_id}/applications/{application_id}/status")
def update_application_status(
    request: StatusUpdateRequest,
    job_id: int = Path(..., le=MAX_DB_INT),
    application_id: int = Path(..., le=MAX_DB_INT),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    application = application_service.update_application_status(
        db, current_user, job_id, application_id, request.status
    )

    return {
        "success": True,
        "message": f"Application status updated to {application.status}",
        "application": ApplicationOut.model_validate(application),
    }
