"""
Per-job engagement statistics.

Rows are loaded once and reduced in memory; volumes per job are small.
"""

from collections import Counter
from datetime import datetime, timedelta
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from pharminc.db.base import utcnow
from pharminc.models import Application, Job, JobView

VIEW_WINDOW_DAYS = 7
APPLICATION_WINDOW_DAYS = 30
TREND_DAYS = 7
ENGAGEMENT_WEEKS = 4


def _rate(numerator: int, denominator: int) -> float:
    if denominator == 0:
        return 0.0
    return round(numerator / denominator * 100, 2)


def compute_job_stats(
    job_id: str,
    views: Iterable[JobView],
    applications: Iterable[Application],
    now: datetime,
) -> dict:
    """
    Reduce raw view and application rows into the stats payload.

    Args:
        job_id: Job the rows belong to
        views: JobView rows from the trailing view window
        applications: Application rows from the trailing application window
        now: Reference time (naive UTC)

    Returns:
        Dict matching JobStatsOut
    """
    views = list(views)
    applications = list(applications)

    responses = [a for a in applications if a.status != "pending"]
    conversions = [a for a in applications if a.status == "accepted"]

    total_views = len(views)
    total_responses = len(responses)
    total_conversions = len(conversions)

    if applications:
        elapsed_hours = [
            (a.updated_at - a.created_at).total_seconds() / 3600 for a in applications
        ]
        average_response_time_hours = round(sum(elapsed_hours) / len(elapsed_hours), 2)
    else:
        average_response_time_hours = 0.0

    # Daily trend: one point per calendar day, oldest first, today last
    today = now.date()
    trend_days = [today - timedelta(days=offset) for offset in range(TREND_DAYS - 1, -1, -1)]
    views_per_day = Counter(v.viewed_at.date() for v in views)
    responses_per_day = Counter(a.updated_at.date() for a in responses)
    daily_trend = [
        {"date": day, "views": views_per_day.get(day, 0), "responses": responses_per_day.get(day, 0)}
        for day in trend_days
    ]

    # Weekly engagement: applications per 7-calendar-day bucket, today in the last one
    buckets = [0] * ENGAGEMENT_WEEKS
    for a in applications:
        age_days = (today - a.created_at.date()).days
        if 0 <= age_days < ENGAGEMENT_WEEKS * 7:
            buckets[ENGAGEMENT_WEEKS - 1 - age_days // 7] += 1
    weekly_engagement = [
        {
            "week_start": today - timedelta(days=(ENGAGEMENT_WEEKS - index) * 7 - 1),
            "applications": count,
        }
        for index, count in enumerate(buckets)
    ]

    status_distribution = dict(sorted(Counter(a.status for a in applications).items()))

    return {
        "job_id": job_id,
        "total_views": total_views,
        "total_responses": total_responses,
        "total_conversions": total_conversions,
        "response_rate": _rate(total_responses, total_views),
        "conversion_rate": _rate(total_conversions, total_responses),
        "average_response_time_hours": average_response_time_hours,
        "daily_trend": daily_trend,
        "weekly_engagement": weekly_engagement,
        "status_distribution": status_distribution,
    }


def get_job_stats(db: Session, job: Job, now: Optional[datetime] = None) -> dict:
    """Load the trailing windows for a job and reduce them."""
    now = now or utcnow()

    views = (
        db.query(JobView)
        .filter(
            JobView.job_id == job.id,
            JobView.viewed_at >= now - timedelta(days=VIEW_WINDOW_DAYS),
        )
        .all()
    )
    applications = (
        db.query(Application)
        .filter(
            Application.job_id == job.id,
            Application.created_at >= now - timedelta(days=APPLICATION_WINDOW_DAYS),
        )
        .all()
    )

    return compute_job_stats(job.id, views, applications, now)
