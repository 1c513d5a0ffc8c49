from __future__ import annotations

import os

# Settings are read at import time; the secret must exist before pharminc loads.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from pharminc.db.base import Base
from pharminc.db.session import create_db_engine, get_db
from pharminc.main import app


@pytest.fixture
def engine(tmp_path: Path):
    test_engine = create_db_engine(f"sqlite:///{tmp_path / 'pharminc.sqlite3'}")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def user_profile(**overrides: Any) -> dict[str, Any]:
    profile = {
        "name": "Jane Doe",
        "location": "Mumbai",
        "specialty": "Cardiology",
        "gender": "Female",
        "role": "DOCTOR",
    }
    profile.update(overrides)
    return profile


def institute_profile(**overrides: Any) -> dict[str, Any]:
    profile = {
        "name": "City General Hospital",
        "location": "Mumbai",
        "contact_email": "hr@citygeneral.example",
        "contact_number": "+91-22-5550-1000",
        "role": "HOSPITAL",
    }
    profile.update(overrides)
    return profile


def job_payload(**overrides: Any) -> dict[str, Any]:
    payload = {
        "title": "Consultant Cardiologist",
        "description": "Run the cardiac outpatient clinic.",
        "job_type": "Full-time",
        "work_location": "Onsite",
        "experience_level": "Senior",
        "requirements": "DM Cardiology",
        "salary_min": 100000,
        "salary_max": 150000,
    }
    payload.update(overrides)
    return payload


def signup_and_signin(
    client: TestClient,
    email: str,
    role: str,
    profile: dict[str, Any],
    password: str = "secret123",
) -> tuple[dict[str, Any], str]:
    signup = client.post(
        "/v1/auth/signup",
        json={"email": email, "password": password, "role": role, "profile": profile},
    )
    assert signup.status_code == 201, signup.text
    signin = client.post("/v1/auth/signin", json={"email": email, "password": password})
    assert signin.status_code == 200, signin.text
    return signup.json(), signin.json()["access_token"]


@pytest.fixture
def user_account(client: TestClient) -> tuple[dict[str, Any], str]:
    return signup_and_signin(client, "jane@example.com", "USER", user_profile())


@pytest.fixture
def institute_account(client: TestClient) -> tuple[dict[str, Any], str]:
    return signup_and_signin(client, "hr@citygeneral.example", "INSTITUTE", institute_profile())


@pytest.fixture
def posted_job(client: TestClient, institute_account) -> dict[str, Any]:
    _, token = institute_account
    response = client.post(
        "/v1/jobs",
        headers=auth_header(token),
        json=job_payload(specialties=[{"name": "Cardiology"}]),
    )
    assert response.status_code == 201, response.text
    return response.json()
