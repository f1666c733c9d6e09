import os
import sys
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_talenthub.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.main import app


@pytest.fixture(autouse=True)
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def settings():
    return get_settings()


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user through the API and return (token, user_json)."""

    def _register(email, role="jobseeker", name=None, password="secret123", **extra):
        response = client.post(
            "/api/v1/auth/register",
            json={
                "name": name or email.split("@")[0].title(),
                "email": email,
                "password": password,
                "role": role,
                **extra,
            },
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["user"]

    return _register


@pytest.fixture
def employer(register):
    token, user = register(
        "employer@acme.com",
        role="employer",
        name="Eve Employer",
        company={"name": "Acme", "website": "https://acme.example.com"},
    )
    return {"token": token, "user": user, "headers": auth_header(token)}


@pytest.fixture
def other_employer(register):
    token, user = register("boss@globex.com", role="employer", name="Greta Globex")
    return {"token": token, "user": user, "headers": auth_header(token)}


@pytest.fixture
def jobseeker(register):
    token, user = register(
        "jay@seeker.com",
        name="Jay Seeker",
        profile={"skills": ["Python"], "location": "Pune"},
    )
    return {"token": token, "user": user, "headers": auth_header(token)}


@pytest.fixture
def other_jobseeker(register):
    token, user = register("kim@seeker.com", name="Kim Seeker")
    return {"token": token, "user": user, "headers": auth_header(token)}


JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "company": "Acme",
    "description": "Build APIs",
    "requirements": "Python",
    "location": "Remote",
    "category": "Technology",
}


@pytest.fixture
def create_job(client):
    """Create a job as the given employer and return the job json."""

    def _create(employer, **overrides):
        response = client.post(
            "/api/v1/jobs",
            json={**JOB_PAYLOAD, **overrides},
            headers=employer["headers"],
        )
        assert response.status_code == 201, response.text
        return response.json()["job"]

    return _create
