"""
Job view tracking.

At most one JobView per (job, viewer) per 10-minute window for a
sequential caller. Anonymous viewers share the NULL-user bucket.
The lookup and the insert are separate statements, so concurrent
requests from one viewer can both insert; counts are best-effort.
"""

from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pharminc.api.deps import get_optional_identity
from pharminc.core.logger import get_service_logger
from pharminc.db.base import utcnow
from pharminc.db.session import get_db
from pharminc.models import JobView
from pharminc.schemas.auth import Identity

logger = get_service_logger("ViewTracker")

VIEW_DEDUP_WINDOW = timedelta(minutes=10)


def record_job_view(
    db: Session,
    job_id: str,
    user_id: Optional[str],
    now: Optional[datetime] = None,
) -> bool:
    """
    Insert a JobView unless one exists for the same viewer inside the window.

    Returns True when a row was written.
    """
    now = now or utcnow()
    since = now - VIEW_DEDUP_WINDOW

    query = db.query(JobView).filter(JobView.job_id == job_id, JobView.viewed_at >= since)
    if user_id is None:
        query = query.filter(JobView.user_id.is_(None))
    else:
        query = query.filter(JobView.user_id == user_id)

    if query.first() is not None:
        return False

    db.add(JobView(job_id=job_id, user_id=user_id, viewed_at=now))
    db.commit()
    return True


def track_job_view(
    request: Request,
    db: Session = Depends(get_db),
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> None:
    """
    Router dependency: log a view for any request with a job_id path parameter.

    Failures never reach the client; the route runs regardless.
    """
    job_id = request.path_params.get("job_id")
    if not job_id:
        return

    user_id = identity.id if identity else None
    try:
        if record_job_view(db, job_id, user_id):
            logger.info(f"Recorded view job_id={job_id} user_id={user_id}")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error tracking job view job_id={job_id}")
