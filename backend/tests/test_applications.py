from datetime import datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    AuthorizationError,
    DeadlinePassedError,
    DuplicateApplicationError,
    InactivePostingError,
    NotFoundError,
    StoreError,
)
from app.db.session import SessionLocal
from app.models import Application, Job, User
from app.services import applications as application_service


def _apply(client, job_id, who, cover_letter=None):
    payload = {} if cover_letter is None else {"cover_letter": cover_letter}
    return client.post(f"/api/v1/jobs/{job_id}/apply", json=payload, headers=who["headers"])


def _set_status(client, job_id, application_id, who, status):
    return client.put(
        f"/api/v1/jobs/{job_id}/applications/{application_id}/status",
        json={"status": status},
        headers=who["headers"],
    )


def test_end_to_end_shortlisting(client, employer, jobseeker, create_job):
    job = create_job(
        employer, title="Backend Engineer", category="Technology", location="Remote"
    )
    assert job["is_active"] is True

    applied = _apply(client, job["id"], jobseeker, cover_letter="Interested")
    assert applied.status_code == 200
    receipt = applied.json()["application"]
    assert receipt["status"] == "pending"
    assert receipt["job_id"] == job["id"]
    assert receipt["title"] == "Backend Engineer"

    mine = client.get("/api/v1/jobs/my/applications", headers=jobseeker["headers"]).json()
    assert mine["totalApplications"] == 1
    entry = mine["applications"][0]
    assert entry["status"] == "pending"
    assert entry["cover_letter"] == "Interested"
    assert entry["job"]["id"] == job["id"]
    assert entry["employer"]["id"] == employer["user"]["id"]

    updated = _set_status(client, job["id"], entry["id"], employer, "shortlisted")
    assert updated.status_code == 200
    assert updated.json()["application"]["status"] == "shortlisted"

    mine = client.get("/api/v1/jobs/my/applications", headers=jobseeker["headers"]).json()
    assert mine["applications"][0]["status"] == "shortlisted"
    assert mine["statusBreakdown"] == {
        "pending": 0,
        "reviewed": 0,
        "shortlisted": 1,
        "rejected": 0,
    }


def test_duplicate_application_is_rejected(client, employer, jobseeker, create_job):
    job = create_job(employer)

    first = _apply(client, job["id"], jobseeker)
    second = _apply(client, job["id"], jobseeker)

    assert first.status_code == 200
    assert first.json()["application"]["status"] == "pending"
    assert second.status_code == 409
    assert second.json()["message"] == "You have already applied for this job"


def test_cannot_apply_to_inactive_job(client, employer, jobseeker, create_job):
    job = create_job(employer)
    client.delete(f"/api/v1/jobs/{job['id']}", headers=employer["headers"])

    response = _apply(client, job["id"], jobseeker)

    assert response.status_code == 400
    assert response.json()["message"] == "This job posting is no longer active"


def test_cannot_apply_after_deadline(client, employer, jobseeker, create_job):
    past = (datetime.utcnow() - timedelta(days=1)).isoformat()
    job = create_job(employer, deadline=past)

    response = _apply(client, job["id"], jobseeker)

    assert response.status_code == 400
    assert response.json()["message"] == "Application deadline has passed"


def test_can_apply_before_deadline(client, employer, jobseeker, create_job):
    future = (datetime.utcnow() + timedelta(days=1)).isoformat() + "Z"
    job = create_job(employer, deadline=future)

    assert _apply(client, job["id"], jobseeker).status_code == 200


def test_employer_cannot_apply(client, employer, other_employer, create_job):
    job = create_job(employer)

    response = _apply(client, job["id"], other_employer)

    assert response.status_code == 403


def test_apply_to_missing_job(client, jobseeker):
    assert _apply(client, 9999, jobseeker).status_code == 404


def test_apply_requires_authentication(client, employer, create_job):
    job = create_job(employer)

    response = client.post(f"/api/v1/jobs/{job['id']}/apply", json={})

    assert response.status_code == 401


def test_non_owner_cannot_update_status(client, employer, other_employer, jobseeker, create_job):
    job = create_job(employer)
    _apply(client, job["id"], jobseeker)
    application_id = client.get(
        f"/api/v1/jobs/{job['id']}", headers=employer["headers"]
    ).json()["job"]["applications"][0]["id"]

    response = _set_status(client, job["id"], application_id, other_employer, "rejected")

    assert response.status_code == 403
    detail = client.get(f"/api/v1/jobs/{job['id']}", headers=employer["headers"]).json()
    assert detail["job"]["applications"][0]["status"] == "pending"


def test_jobseeker_cannot_update_status(client, employer, jobseeker, create_job):
    job = create_job(employer)
    application_id = _apply(client, job["id"], jobseeker).json()["application"]["application_id"]

    response = _set_status(client, job["id"], application_id, jobseeker, "shortlisted")

    assert response.status_code == 403


def test_update_status_rejects_unknown_status(client, employer, jobseeker, create_job):
    job = create_job(employer)
    application_id = _apply(client, job["id"], jobseeker).json()["application"]["application_id"]

    response = _set_status(client, job["id"], application_id, employer, "hired")

    assert response.status_code == 400


def test_update_status_unknown_application(client, employer, jobseeker, other_employer, create_job):
    job = create_job(employer)
    other_job = create_job(other_employer)
    application_id = _apply(client, other_job["id"], jobseeker).json()["application"]["application_id"]

    missing = _set_status(client, job["id"], 9999, employer, "reviewed")
    # Application exists, but on someone else's posting
    elsewhere = _set_status(client, job["id"], application_id, employer, "reviewed")

    assert missing.status_code == 404
    assert elsewhere.status_code == 404


def test_update_status_missing_job(client, employer):
    assert _set_status(client, 9999, 1, employer, "reviewed").status_code == 404


@pytest.mark.parametrize(
    "path",
    [
        ["rejected", "pending"],
        ["shortlisted", "reviewed", "rejected", "shortlisted"],
    ],
)
def test_any_status_can_follow_any_other(client, employer, jobseeker, create_job, path):
    job = create_job(employer)
    application_id = _apply(client, job["id"], jobseeker).json()["application"]["application_id"]

    for status in path:
        response = _set_status(client, job["id"], application_id, employer, status)
        assert response.status_code == 200
        assert response.json()["application"]["status"] == status


def test_job_detail_shows_only_own_application(
    client, employer, jobseeker, other_jobseeker, create_job
):
    job = create_job(employer)
    _apply(client, job["id"], jobseeker)
    _apply(client, job["id"], other_jobseeker)

    own = client.get(f"/api/v1/jobs/{job['id']}", headers=jobseeker["headers"]).json()["job"]
    owner = client.get(f"/api/v1/jobs/{job['id']}", headers=employer["headers"]).json()["job"]
    anonymous = client.get(f"/api/v1/jobs/{job['id']}").json()["job"]

    assert len(own["applications"]) == 1
    assert own["applications"][0]["applicant_id"] == jobseeker["user"]["id"]
    assert len(owner["applications"]) == 2
    assert owner["applications"][0]["applicant"]["email"] == "jay@seeker.com"
    assert anonymous["applications"] == []


def test_job_detail_for_non_applicant_has_no_applications(
    client, employer, other_employer, jobseeker, create_job
):
    job = create_job(employer)
    _apply(client, job["id"], jobseeker)

    seen = client.get(f"/api/v1/jobs/{job['id']}", headers=other_employer["headers"]).json()

    assert seen["job"]["applications"] == []


def test_my_applications_newest_first(client, employer, jobseeker, create_job):
    first = create_job(employer, title="First")
    second = create_job(employer, title="Second")
    _apply(client, first["id"], jobseeker)
    _apply(client, second["id"], jobseeker)

    mine = client.get("/api/v1/jobs/my/applications", headers=jobseeker["headers"]).json()

    assert [a["job"]["title"] for a in mine["applications"]] == ["Second", "First"]
    assert mine["statusBreakdown"]["pending"] == 2


def test_my_applications_requires_jobseeker(client, employer):
    response = client.get("/api/v1/jobs/my/applications", headers=employer["headers"])

    assert response.status_code == 403


# ============== Service level ==============


def _make_user(db, email, role):
    user = User(name=email, email=email, role=role)
    user.set_password("secret123")
    db.add(user)
    db.commit()
    return user


def _make_job(db, employer, **overrides):
    values = dict(
        title="Backend Engineer",
        company="Acme",
        description="Build APIs",
        requirements="Python",
        location="Remote",
        category="Technology",
        employer_id=employer.id,
    )
    values.update(overrides)
    job = Job(**values)
    db.add(job)
    db.commit()
    return job


def test_submit_uses_supplied_clock_for_deadline(db):
    employer = _make_user(db, "e@x.com", "employer")
    seeker = _make_user(db, "s@x.com", "jobseeker")
    job = _make_job(db, employer, deadline=datetime(2030, 1, 1))

    with pytest.raises(DeadlinePassedError):
        application_service.submit_application(db, seeker, job.id, now=datetime(2030, 1, 2))

    receipt = application_service.submit_application(db, seeker, job.id, now=datetime(2029, 12, 31))
    assert receipt.applied_at == datetime(2029, 12, 31)


def test_submit_checks_role_before_posting_state(db):
    employer = _make_user(db, "e@x.com", "employer")
    job = _make_job(db, employer, is_active=False)

    with pytest.raises(AuthorizationError):
        application_service.submit_application(db, employer, job.id)


def test_submit_inactive_posting(db):
    employer = _make_user(db, "e@x.com", "employer")
    seeker = _make_user(db, "s@x.com", "jobseeker")
    job = _make_job(db, employer, is_active=False)

    with pytest.raises(InactivePostingError):
        application_service.submit_application(db, seeker, job.id)


def test_store_constraint_catches_duplicate_missed_by_read_check(db, monkeypatch):
    employer = _make_user(db, "e@x.com", "employer")
    seeker = _make_user(db, "s@x.com", "jobseeker")
    job = _make_job(db, employer)
    db.add(Application(job_id=job.id, applicant_id=seeker.id))
    db.commit()

    # Simulate a concurrent submission that slipped past the read check
    monkeypatch.setattr(application_service.policy, "has_applied", lambda actor, job: False)

    with pytest.raises(DuplicateApplicationError):
        application_service.submit_application(db, seeker, job.id)

    db.expire_all()
    assert db.query(Application).filter(Application.job_id == job.id).count() == 1


def test_update_status_missing_application_in_owned_job(db):
    employer = _make_user(db, "e@x.com", "employer")
    job = _make_job(db, employer)

    with pytest.raises(NotFoundError):
        application_service.update_application_status(db, employer, job.id, 12345, "reviewed")


def test_store_failure_surfaces_as_store_error(db, monkeypatch):
    employer = _make_user(db, "e@x.com", "employer")
    seeker = _make_user(db, "s@x.com", "jobseeker")
    job = _make_job(db, employer)

    def failing_commit():
        raise OperationalError("INSERT INTO applications", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", failing_commit)

    with pytest.raises(StoreError):
        application_service.submit_application(db, seeker, job.id)


def test_concurrent_status_updates_last_writer_wins(db):
    employer = _make_user(db, "e@x.com", "employer")
    seeker = _make_user(db, "s@x.com", "jobseeker")
    job = _make_job(db, employer)
    application = Application(job_id=job.id, applicant_id=seeker.id)
    db.add(application)
    db.commit()

    first, second = SessionLocal(), SessionLocal()
    try:
        # Both reviewers load the application before either one writes
        assert first.get(Application, application.id).status == "pending"
        assert second.get(Application, application.id).status == "pending"

        application_service.update_application_status(
            first, first.get(User, employer.id), job.id, application.id, "shortlisted"
        )
        application_service.update_application_status(
            second, second.get(User, employer.id), job.id, application.id, "rejected"
        )
    finally:
        first.close()
        second.close()

    db.expire_all()
    assert db.get(Application, application.id).status == "rejected"
