from __future__ import annotations

from datetime import timedelta

import pytest
from conftest import auth_header
from fastapi.testclient import TestClient

from pharminc.db.base import utcnow
from pharminc.models import JobView
from pharminc.services.view_tracker import VIEW_DEDUP_WINDOW, record_job_view


def test_window_is_ten_minutes() -> None:
    assert VIEW_DEDUP_WINDOW == timedelta(minutes=10)


@pytest.mark.integration
def test_repeat_view_inside_window_is_ignored(db_session, user_account, posted_job) -> None:
    profile, _ = user_account
    start = utcnow()

    assert record_job_view(db_session, posted_job["id"], profile["id"], now=start)
    assert not record_job_view(db_session, posted_job["id"], profile["id"], now=start + timedelta(minutes=9))
    assert record_job_view(db_session, posted_job["id"], profile["id"], now=start + timedelta(minutes=11))
    assert db_session.query(JobView).count() == 2


@pytest.mark.integration
def test_anonymous_viewers_share_one_bucket(db_session, user_account, posted_job) -> None:
    profile, _ = user_account
    start = utcnow()

    assert record_job_view(db_session, posted_job["id"], None, now=start)
    assert not record_job_view(db_session, posted_job["id"], None, now=start + timedelta(minutes=1))
    assert record_job_view(db_session, posted_job["id"], profile["id"], now=start + timedelta(minutes=1))

    anonymous = db_session.query(JobView).filter(JobView.user_id.is_(None)).count()
    assert anonymous == 1


@pytest.mark.integration
def test_get_job_records_one_view_per_viewer(
    client: TestClient, db_session, user_account, posted_job
) -> None:
    profile, token = user_account
    url = f"/v1/jobs/{posted_job['id']}"

    client.get(url)
    client.get(url)
    client.get(url, headers=auth_header(token))
    client.get(url, headers=auth_header(token))

    views = db_session.query(JobView).order_by(JobView.id).all()
    assert [v.user_id for v in views] == [None, profile["id"]]


@pytest.mark.integration
def test_list_and_search_do_not_record_views(client: TestClient, db_session, posted_job) -> None:
    client.get("/v1/jobs")
    client.get("/v1/jobs/search", params={"q": "cardio"})
    client.get(f"/v1/jobs/institution/{posted_job['institute_id']}")

    assert db_session.query(JobView).count() == 0


@pytest.mark.integration
def test_view_of_missing_job_is_dropped_and_route_still_answers(client: TestClient, db_session) -> None:
    response = client.get("/v1/jobs/missing-id")

    assert response.status_code == 404
    assert db_session.query(JobView).count() == 0
