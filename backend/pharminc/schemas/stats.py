import datetime as dt

from pydantic import BaseModel


class DailyTrendPoint(BaseModel):
    date: dt.date
    views: int
    responses: int


class WeeklyEngagementPoint(BaseModel):
    week_start: dt.date
    applications: int


class JobStatsOut(BaseModel):
    """Engagement figures for one job (trailing 7 days of views, 30 of applications)."""

    job_id: str
    total_views: int
    total_responses: int
    total_conversions: int
    response_rate: float
    conversion_rate: float
    average_response_time_hours: float
    daily_trend: list[DailyTrendPoint]
    weekly_engagement: list[WeeklyEngagementPoint]
    status_distribution: dict[str, int]
