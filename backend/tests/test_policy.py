import pytest

from app.core.exceptions import AuthorizationError
from app.models import Application, Job, User
from app.services import policy


def _user(user_id, role):
    return User(id=user_id, name=f"user{user_id}", email=f"u{user_id}@x.com", role=role)


def _job(employer_id=1, is_active=True, applicant_ids=()):
    return Job(
        id=10,
        employer_id=employer_id,
        is_active=is_active,
        applications=[Application(id=100 + i, applicant_id=i) for i in applicant_ids],
    )


EMPLOYER = _user(1, "employer")
OTHER_EMPLOYER = _user(2, "employer")
SEEKER = _user(3, "jobseeker")
OTHER_SEEKER = _user(4, "jobseeker")


def test_require_role():
    assert policy.require_role(SEEKER, "jobseeker", "nope") is SEEKER
    with pytest.raises(AuthorizationError, match="nope"):
        policy.require_role(EMPLOYER, "jobseeker", "nope")
    with pytest.raises(AuthorizationError):
        policy.require_role(None, "employer", "nope")


def test_ownership_compares_ids():
    job = _job(employer_id=1)
    twin = _user(1, "employer")

    assert policy.owns_job(EMPLOYER, job)
    assert policy.owns_job(twin, job)
    assert not policy.owns_job(OTHER_EMPLOYER, job)
    assert not policy.owns_job(None, job)


def test_jobseeker_sharing_employer_id_does_not_own_job():
    assert not policy.owns_job(_user(1, "jobseeker"), _job(employer_id=1))


def test_visible_applications():
    job = _job(applicant_ids=(3, 4))

    assert [a.applicant_id for a in policy.visible_applications(EMPLOYER, job)] == [3, 4]
    assert [a.applicant_id for a in policy.visible_applications(SEEKER, job)] == [3]
    assert policy.visible_applications(OTHER_EMPLOYER, job) == []
    assert policy.visible_applications(None, job) == []


def test_can_view_inactive_job():
    job = _job(is_active=False, applicant_ids=(3,))

    assert policy.can_view_job(EMPLOYER, job)
    assert policy.can_view_job(SEEKER, job)
    assert not policy.can_view_job(OTHER_SEEKER, job)
    assert not policy.can_view_job(None, job)
    assert policy.can_view_job(None, _job())
