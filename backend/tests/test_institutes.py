from __future__ import annotations

import pytest
from conftest import auth_header, institute_profile, signup_and_signin
from fastapi.testclient import TestClient

pytestmark = pytest.mark.integration


@pytest.fixture
def other_institute(client: TestClient):
    return signup_and_signin(
        client,
        "jobs@sunrise.example",
        "INSTITUTE",
        institute_profile(
            name="Sunrise Clinic",
            location="Pune",
            contact_email="jobs@sunrise.example",
            role="CLINIC",
            specialties=[{"name": "Pediatrics"}],
        ),
    )


def test_me_returns_own_institute(client: TestClient, institute_account) -> None:
    profile, token = institute_account

    response = client.get("/v1/institutes/me", headers=auth_header(token))

    assert response.status_code == 200
    assert response.json()["id"] == profile["id"]
    assert response.json()["name"] == "City General Hospital"


def test_list_and_search_institutes(client: TestClient, institute_account, other_institute) -> None:
    clinics = client.get("/v1/institutes", params={"role": "clinic"})
    pediatric = client.get("/v1/institutes", params={"specialty": "Pediatrics"})
    unverified = client.get("/v1/institutes", params={"verified": "false"})
    search = client.get("/v1/institutes/search", params={"q": "general"})

    assert [i["name"] for i in clinics.json()["items"]] == ["Sunrise Clinic"]
    assert [i["name"] for i in pediatric.json()["items"]] == ["Sunrise Clinic"]
    assert unverified.json()["total"] == 2
    assert [i["name"] for i in search.json()["items"]] == ["City General Hospital"]


def test_rename_to_taken_name_is_conflict(client: TestClient, institute_account, other_institute) -> None:
    _, token = other_institute
    profile, _ = other_institute

    response = client.put(
        f"/v1/institutes/{profile['id']}",
        headers=auth_header(token),
        json={"name": "City General Hospital"},
    )

    assert response.status_code == 409


def test_update_own_institute(client: TestClient, institute_account) -> None:
    profile, token = institute_account

    response = client.put(
        f"/v1/institutes/{profile['id']}",
        headers=auth_header(token),
        json={"headline": "Tertiary care", "year_established": 1962},
    )

    assert response.status_code == 200
    assert response.json()["headline"] == "Tertiary care"
    assert response.json()["year_established"] == 1962
    assert response.json()["name"] == "City General Hospital"


def test_cannot_touch_another_institute(client: TestClient, institute_account, other_institute) -> None:
    profile, _ = institute_account
    _, other_token = other_institute

    update = client.put(
        f"/v1/institutes/{profile['id']}", headers=auth_header(other_token), json={"headline": "x"}
    )
    delete = client.delete(f"/v1/institutes/{profile['id']}", headers=auth_header(other_token))

    assert update.status_code == 403
    assert delete.status_code == 403


def test_user_account_cannot_create_institute(client: TestClient, user_account) -> None:
    _, token = user_account

    response = client.post("/v1/institutes", headers=auth_header(token), json=institute_profile(name="New"))

    assert response.status_code == 403


def test_delete_institute_removes_its_jobs(client: TestClient, institute_account, posted_job) -> None:
    profile, token = institute_account

    response = client.delete(f"/v1/institutes/{profile['id']}", headers=auth_header(token))

    assert response.status_code == 204
    assert client.get(f"/v1/institutes/{profile['id']}").status_code == 404
    assert client.get(f"/v1/jobs/{posted_job['id']}").status_code == 404


def test_rename_race_on_unique_name_is_conflict(
    client: TestClient, institute_account, other_institute, monkeypatch
) -> None:
    profile, token = other_institute
    monkeypatch.setattr("pharminc.api.v1.institute.name_taken", lambda *args, **kwargs: False)

    response = client.put(
        f"/v1/institutes/{profile['id']}",
        headers=auth_header(token),
        json={"name": "City General Hospital"},
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Institute already exists"}
    assert client.get(f"/v1/institutes/{profile['id']}").json()["name"] == "Sunrise Clinic"
