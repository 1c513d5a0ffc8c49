from __future__ import annotations

import pytest
from conftest import auth_header, institute_profile, job_payload, signup_and_signin
from fastapi.testclient import TestClient

from pharminc.models import Application, Job, JobView

pytestmark = pytest.mark.integration


@pytest.fixture
def other_institute(client: TestClient):
    return signup_and_signin(
        client,
        "jobs@sunrise.example",
        "INSTITUTE",
        institute_profile(name="Sunrise Clinic", contact_email="jobs@sunrise.example"),
    )


def test_create_job_binds_it_to_the_token_institute(client: TestClient, institute_account, posted_job) -> None:
    profile, _ = institute_account

    assert posted_job["institute_id"] == profile["id"]
    assert posted_job["institute"]["name"] == "City General Hospital"
    assert posted_job["status"] == "active"
    assert [s["name"] for s in posted_job["specialties"]] == ["cardiology"]


def test_create_job_requires_institute_token(client: TestClient, user_account) -> None:
    _, user_token = user_account

    anonymous = client.post("/v1/jobs", json=job_payload())
    as_user = client.post("/v1/jobs", headers=auth_header(user_token), json=job_payload())

    assert anonymous.status_code == 401
    assert as_user.status_code == 403


def test_create_job_rejects_inverted_salary(client: TestClient, institute_account) -> None:
    _, token = institute_account

    response = client.post(
        "/v1/jobs", headers=auth_header(token), json=job_payload(salary_min=200, salary_max=100)
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid input"}


def test_get_job_includes_institute_and_specialties(client: TestClient, posted_job) -> None:
    response = client.get(f"/v1/jobs/{posted_job['id']}")

    assert response.status_code == 200
    assert response.json()["institute"]["id"] == posted_job["institute_id"]
    assert client.get("/v1/jobs/missing-id").status_code == 404


def test_list_jobs_filters(client: TestClient, institute_account, posted_job) -> None:
    _, token = institute_account
    client.post(
        "/v1/jobs",
        headers=auth_header(token),
        json=job_payload(
            title="Staff Nurse",
            job_type="Part-time",
            experience_level="Entry",
            specialties=[{"name": "Emergency Medicine"}],
        ),
    )

    part_time = client.get("/v1/jobs", params={"jobType": "Part-time"})
    senior = client.get("/v1/jobs", params={"experienceLevel": "Senior"})
    cardiology = client.get("/v1/jobs", params={"specialty": "cardiology,oncology"})
    closed = client.get("/v1/jobs", params={"status": "closed"})
    first_page = client.get("/v1/jobs", params={"pageSize": 1})

    assert [j["title"] for j in part_time.json()["items"]] == ["Staff Nurse"]
    assert [j["title"] for j in senior.json()["items"]] == ["Consultant Cardiologist"]
    assert [j["title"] for j in cardiology.json()["items"]] == ["Consultant Cardiologist"]
    assert closed.json()["total"] == 0
    assert first_page.json()["total"] == 2
    assert len(first_page.json()["items"]) == 1


def test_search_jobs_by_text_and_specialty_id(client: TestClient, posted_job) -> None:
    specialty_id = posted_job["specialties"][0]["id"]

    by_text = client.get("/v1/jobs/search", params={"q": "outpatient"})
    by_specialty = client.get("/v1/jobs/search", params={"specialtyId": specialty_id})
    no_match = client.get("/v1/jobs/search", params={"q": "radiology"})

    assert by_text.json()["total"] == 1
    assert by_specialty.json()["total"] == 1
    assert no_match.json()["total"] == 0


def test_list_jobs_by_institution(client: TestClient, institute_account, other_institute, posted_job) -> None:
    profile, _ = institute_account
    other_profile, _ = other_institute

    mine = client.get(f"/v1/jobs/institution/{profile['id']}")
    theirs = client.get(f"/v1/jobs/institution/{other_profile['id']}")

    assert [j["id"] for j in mine.json()["items"]] == [posted_job["id"]]
    assert theirs.json()["total"] == 0


def test_invalid_page_is_bad_request(client: TestClient) -> None:
    assert client.get("/v1/jobs", params={"page": 0}).status_code == 400


def test_update_job_replaces_specialties(client: TestClient, institute_account, posted_job) -> None:
    _, token = institute_account

    response = client.put(
        f"/v1/jobs/{posted_job['id']}",
        headers=auth_header(token),
        json={"status": "closed", "specialties": [{"name": "Neurology"}, {"name": " neurology "}]},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "closed"
    assert body["title"] == "Consultant Cardiologist"
    assert [s["name"] for s in body["specialties"]] == ["neurology"]


def test_update_job_salary_below_stored_minimum_is_bad_request(
    client: TestClient, institute_account, posted_job
) -> None:
    _, token = institute_account

    response = client.put(
        f"/v1/jobs/{posted_job['id']}", headers=auth_header(token), json={"salary_max": 10}
    )

    assert response.status_code == 400
    assert client.get(f"/v1/jobs/{posted_job['id']}").json()["salary_max"] == 150000


def test_update_job_rejects_unknown_status(client: TestClient, institute_account, posted_job) -> None:
    _, token = institute_account

    response = client.put(
        f"/v1/jobs/{posted_job['id']}", headers=auth_header(token), json={"status": "archived"}
    )

    assert response.status_code == 400


def test_job_mutation_permission_matrix(
    client: TestClient, user_account, other_institute, institute_account, posted_job
) -> None:
    _, user_token = user_account
    _, other_token = other_institute
    _, owner_token = institute_account
    url = f"/v1/jobs/{posted_job['id']}"

    assert client.put(url, json={"title": "x"}).status_code == 401
    assert client.put(url, headers=auth_header(user_token), json={"title": "x"}).status_code == 403
    assert client.put(url, headers=auth_header(other_token), json={"title": "x"}).status_code == 403
    assert client.delete(url, headers=auth_header(other_token)).status_code == 403
    assert client.put("/v1/jobs/missing-id", headers=auth_header(owner_token), json={"title": "x"}).status_code == 404
    assert client.delete("/v1/jobs/missing-id", headers=auth_header(owner_token)).status_code == 404


def test_delete_job_cascades(client: TestClient, db_session, institute_account, user_account, posted_job) -> None:
    _, owner_token = institute_account
    _, user_token = user_account
    client.get(f"/v1/jobs/{posted_job['id']}")
    client.post(
        "/v1/applications",
        headers=auth_header(user_token),
        json={"job_id": posted_job["id"], "resume_url": "https://cdn.example/cv.pdf"},
    )

    response = client.delete(f"/v1/jobs/{posted_job['id']}", headers=auth_header(owner_token))

    assert response.status_code == 204
    assert response.content == b""
    assert db_session.query(Job).count() == 0
    assert db_session.query(Application).count() == 0
    assert db_session.query(JobView).count() == 0
