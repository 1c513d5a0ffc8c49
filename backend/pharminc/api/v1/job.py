"""
Job API endpoints.

Public: list, search and fetch postings (fetch-by-id is view-tracked).
Private: institutes post, edit and remove their own jobs and read
per-job engagement statistics.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Query as OrmQuery
from sqlalchemy.orm import Session

from pharminc.api.deps import Pagination, get_current_identity, get_pagination, split_csv
from pharminc.core.errors import BadRequestError, ForbiddenError, NotFoundError
from pharminc.core.logger import get_service_logger
from pharminc.core.permissions import can_mutate, ensure_role
from pharminc.db.guard import store_operation
from pharminc.db.session import get_db
from pharminc.models import Institute, Job, Specialty
from pharminc.schemas.auth import Identity
from pharminc.schemas.common import Page
from pharminc.schemas.job import JobCreate, JobOut, JobUpdate
from pharminc.schemas.stats import JobStatsOut
from pharminc.services.job_stats import get_job_stats
from pharminc.services.specialties import upsert_specialties
from pharminc.services.view_tracker import track_job_view

logger = get_service_logger("Job")

# Every public route with a job_id path parameter records a view
router = APIRouter(dependencies=[Depends(track_job_view)])
private_router = APIRouter()


# ============== Helper Functions ==============


def apply_job_filters(
    query: OrmQuery,
    job_type: Optional[str] = None,
    location: Optional[str] = None,
    experience_level: Optional[str] = None,
    status_filter: Optional[str] = None,
    specialty: Optional[str] = None,
    specialty_id: Optional[str] = None,
) -> OrmQuery:
    if job_type:
        query = query.filter(Job.job_type == job_type)
    if location:
        query = query.filter(func.lower(Job.work_location) == location.strip().lower())
    if experience_level:
        query = query.filter(Job.experience_level == experience_level)
    if status_filter:
        query = query.filter(Job.status == status_filter)
    specialty_names = split_csv(specialty)
    if specialty_names:
        query = query.filter(Job.specialties.any(Specialty.name.in_(specialty_names)))
    if specialty_id:
        query = query.filter(Job.specialties.any(Specialty.id == specialty_id))
    return query


def paginate_jobs(query: OrmQuery, pagination: Pagination) -> dict:
    total = query.count()
    jobs = (
        query.order_by(Job.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
        .all()
    )
    return {
        "items": [JobOut.model_validate(job) for job in jobs],
        "page": pagination.page,
        "page_size": pagination.page_size,
        "total": total,
    }


def get_owned_job(db: Session, id: str, identity: Identity, action: str) -> Job:
    """Load a job the caller may mutate: 404 when missing, 403 when not theirs."""
    job = db.get(Job, id)
    if not job:
        logger.warning(f"Job not found for {action} job_id={id}")
        raise NotFoundError("Job not found")
    if not can_mutate(identity, job.institute_id, "INSTITUTE"):
        logger.warning(
            f"Institute tried to {action} another institute's job institute_id={identity.id} job_id={id}"
        )
        raise ForbiddenError(f"Forbidden: cannot {action} another institute's job")
    return job


# ============== Public Endpoints ==============


@router.get("", response_model=Page[JobOut])
def list_jobs(
    job_type: Optional[str] = Query(None, alias="jobType"),
    location: Optional[str] = Query(None, description="Work location (case-insensitive)"),
    experience_level: Optional[str] = Query(None, alias="experienceLevel"),
    status_filter: Optional[str] = Query(None, alias="status", description="active or closed"),
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """List jobs with optional filters, newest first."""
    with store_operation(db, logger, "list_jobs"):
        query = apply_job_filters(
            db.query(Job), job_type, location, experience_level, status_filter, specialty
        )
        result = paginate_jobs(query, pagination)

    logger.info(f"Fetched jobs list page={pagination.page} total={result['total']}")
    return result


@router.get("/search", response_model=Page[JobOut])
def search_jobs(
    q: Optional[str] = Query(None, description="Matches title, description or requirements"),
    location: Optional[str] = None,
    job_type: Optional[str] = Query(None, alias="jobType"),
    experience_level: Optional[str] = Query(None, alias="experienceLevel"),
    specialty_id: Optional[str] = Query(None, alias="specialtyId"),
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Free-text job search plus the list filters."""
    with store_operation(db, logger, "search_jobs"):
        query = db.query(Job)
        if q:
            query = query.filter(
                or_(
                    Job.title.icontains(q, autoescape=True),
                    Job.description.icontains(q, autoescape=True),
                    Job.requirements.icontains(q, autoescape=True),
                )
            )
        query = apply_job_filters(
            query,
            job_type=job_type,
            location=location,
            experience_level=experience_level,
            specialty=specialty,
            specialty_id=specialty_id,
        )
        result = paginate_jobs(query, pagination)

    logger.info(f"Fetched job search results q={q} total={result['total']}")
    return result


@router.get("/institution/{institute_id}", response_model=Page[JobOut])
def list_jobs_by_institute(
    institute_id: str,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """All jobs posted by one institute, newest first."""
    with store_operation(db, logger, "list_jobs_by_institute"):
        query = db.query(Job).filter(Job.institute_id == institute_id)
        result = paginate_jobs(query, pagination)

    logger.info(f"Fetched jobs by institution institute_id={institute_id} total={result['total']}")
    return result


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: str, db: Session = Depends(get_db)):
    """Get a job with its institute and specialties."""
    with store_operation(db, logger, "get_job"):
        job = db.get(Job, job_id)
        if not job:
            logger.warning(f"Job not found job_id={job_id}")
            raise NotFoundError("Job not found")
        return JobOut.model_validate(job)


# ============== Private Endpoints ==============


@private_router.post("", response_model=JobOut, status_code=status.HTTP_201_CREATED)
def create_job(
    data: JobCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Post a job.

    Only INSTITUTE accounts may post; the job is bound to the institute id
    in the token, never to a client-supplied id.
    """
    ensure_role(identity, "INSTITUTE", "Forbidden: only institutes may create jobs")

    with store_operation(db, logger, "create_job"):
        if not db.get(Institute, identity.id):
            logger.warning(f"Job creation without institute profile institute_id={identity.id}")
            raise NotFoundError("Institute not found")

        job = Job(institute_id=identity.id, **data.model_dump(exclude={"specialties"}))
        if data.specialties:
            job.specialties = upsert_specialties(db, data.specialties)
        db.add(job)
        db.commit()
        db.refresh(job)

        logger.info(f"Job created institute_id={identity.id} job_id={job.id}")
        return JobOut.model_validate(job)


@private_router.put("/{id}", response_model=JobOut)
def update_job(
    id: str,
    data: JobUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Update one of the caller's jobs. Specialties, when sent, replace the old set."""
    ensure_role(identity, "INSTITUTE", "Forbidden: only institutes may update jobs")

    with store_operation(db, logger, "update_job"):
        job = get_owned_job(db, id, identity, "update")

        changes = data.model_dump(exclude_unset=True, exclude={"specialties"})
        for field, value in changes.items():
            setattr(job, field, value)
        if job.salary_max < job.salary_min:
            db.rollback()
            logger.warning(f"Job update with inverted salary range job_id={id}")
            raise BadRequestError()
        if data.specialties is not None:
            job.specialties = upsert_specialties(db, data.specialties)

        db.commit()
        db.refresh(job)

        logger.info(f"Job updated institute_id={identity.id} job_id={id}")
        return JobOut.model_validate(job)


@private_router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_job(
    id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Delete one of the caller's jobs with its applications and view log."""
    ensure_role(identity, "INSTITUTE", "Forbidden: only institutes may delete jobs")

    with store_operation(db, logger, "delete_job"):
        job = get_owned_job(db, id, identity, "delete")
        db.delete(job)
        db.commit()

    logger.info(f"Job deleted institute_id={identity.id} job_id={id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@private_router.get("/{id}/stats", response_model=JobStatsOut)
def get_job_statistics(
    id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Engagement statistics for one of the caller's jobs.

    Views over the last 7 days, applications over the last 30. A job owned
    by someone else is reported exactly like a missing one.
    """
    ensure_role(identity, "INSTITUTE", "Forbidden: only institutes may view job statistics")

    with store_operation(db, logger, "get_job_statistics"):
        job = db.get(Job, id)
        if not job or not can_mutate(identity, job.institute_id, "INSTITUTE"):
            logger.warning(f"Stats requested for missing or foreign job institute_id={identity.id} job_id={id}")
            raise NotFoundError("Job not found or access denied")

        stats = get_job_stats(db, job)

    logger.info(f"Computed job stats job_id={id} total_views={stats['total_views']}")
    return stats
