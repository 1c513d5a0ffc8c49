"""
Application API endpoints (all require a token).

Users apply to jobs and manage their own applications; the institute
owning a job reads its applications and decides on them.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from pharminc.api.deps import get_current_identity
from pharminc.core.errors import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from pharminc.core.logger import get_service_logger
from pharminc.core.permissions import can_mutate, ensure_can_mutate, ensure_role
from pharminc.db.base import utcnow
from pharminc.db.guard import store_operation
from pharminc.db.session import get_db
from pharminc.models import Application, Job, User
from pharminc.schemas.application import (
    ApplicationCreate,
    ApplicationOut,
    ApplicationStatusUpdate,
    ApplicationUpdate,
)
from pharminc.schemas.auth import Identity

logger = get_service_logger("Application")

private_router = APIRouter()


# ============== Helper Functions ==============


def get_application_or_404(db: Session, application_id: str) -> Application:
    application = db.get(Application, application_id)
    if not application:
        logger.warning(f"Application not found application_id={application_id}")
        raise NotFoundError("Application not found")
    return application


def can_read_application(identity: Identity, application: Application) -> bool:
    """The applicant or the institute that owns the job."""
    return can_mutate(identity, application.user_id) or can_mutate(
        identity, application.job.institute_id, "INSTITUTE"
    )


# ============== API Endpoints ==============


@private_router.get("/job/{job_id}", response_model=list[ApplicationOut])
def list_applications_for_job(
    job_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """All applications to a job; only the owning institute may read them."""
    ensure_role(identity, "INSTITUTE", "Forbidden: only institutes may list job applications")

    with store_operation(db, logger, "list_applications_for_job"):
        job = db.get(Job, job_id)
        if not job:
            raise NotFoundError("Job not found")
        ensure_can_mutate(identity, job.institute_id, "INSTITUTE")

        applications = (
            db.query(Application)
            .filter(Application.job_id == job_id)
            .order_by(Application.created_at.desc())
            .all()
        )
        logger.info(f"Fetched applications for job job_id={job_id} count={len(applications)}")
        return [ApplicationOut.model_validate(a) for a in applications]


@private_router.get("/user/{user_id}", response_model=list[ApplicationOut])
def list_applications_for_user(
    user_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """A user's applications; readable by that user or any institute."""
    if not can_mutate(identity, user_id) and identity.role != "INSTITUTE":
        raise ForbiddenError()

    with store_operation(db, logger, "list_applications_for_user"):
        applications = (
            db.query(Application)
            .filter(Application.user_id == user_id)
            .order_by(Application.created_at.desc())
            .all()
        )
        return [ApplicationOut.model_validate(a) for a in applications]


@private_router.get("/user/{user_id}/job/{job_id}", response_model=ApplicationOut)
def get_user_application_for_job(
    user_id: str,
    job_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """A user's application to one job; readable by that user or any institute."""
    if not can_mutate(identity, user_id) and identity.role != "INSTITUTE":
        raise ForbiddenError()

    with store_operation(db, logger, "get_user_application_for_job"):
        application = (
            db.query(Application)
            .filter(Application.user_id == user_id, Application.job_id == job_id)
            .first()
        )
        if not application:
            raise NotFoundError("Application not found")
        return ApplicationOut.model_validate(application)


@private_router.get("/{application_id}", response_model=ApplicationOut)
def get_application(
    application_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    with store_operation(db, logger, "get_application"):
        application = get_application_or_404(db, application_id)
        if not can_read_application(identity, application):
            raise ForbiddenError()
        return ApplicationOut.model_validate(application)


@private_router.post("", response_model=ApplicationOut, status_code=status.HTTP_201_CREATED)
def create_application(
    data: ApplicationCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """
    Apply to a job.

    The applicant is the token's user; status always starts as pending and
    a user may apply to a given job only once.
    """
    ensure_role(identity, "USER", "Forbidden: only users may apply to jobs")

    with store_operation(db, logger, "create_application", "Already applied to this job"):
        if not db.get(User, identity.id):
            raise NotFoundError("User not found")

        job = db.get(Job, data.job_id)
        if not job:
            logger.warning(f"Application to missing job job_id={data.job_id}")
            raise NotFoundError("Job not found")
        if job.status != "active":
            logger.warning(f"Application to closed job job_id={data.job_id}")
            raise BadRequestError("Job is not accepting applications")

        duplicate = (
            db.query(Application)
            .filter(Application.user_id == identity.id, Application.job_id == data.job_id)
            .first()
        )
        if duplicate:
            raise ConflictError("Already applied to this job")

        fields = data.model_dump(exclude={"applied_date"})
        application = Application(
            user_id=identity.id,
            applied_date=data.applied_date or utcnow(),
            **fields,
        )
        db.add(application)
        db.commit()
        db.refresh(application)

        logger.info(f"Application created application_id={application.id} job_id={job.id}")
        return ApplicationOut.model_validate(application)


@private_router.put("/{application_id}", response_model=ApplicationOut)
def update_application(
    application_id: str,
    data: ApplicationUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Edit an application; only the applicant may do so."""
    with store_operation(db, logger, "update_application"):
        application = get_application_or_404(db, application_id)
        ensure_can_mutate(identity, application.user_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(application, field, value)
        db.commit()
        db.refresh(application)

        logger.info(f"Application updated application_id={application_id}")
        return ApplicationOut.model_validate(application)


@private_router.patch("/{application_id}/status", response_model=ApplicationOut)
def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Accept or reject an application; only the institute owning the job."""
    with store_operation(db, logger, "update_application_status"):
        application = get_application_or_404(db, application_id)
        ensure_can_mutate(identity, application.job.institute_id, "INSTITUTE")

        application.status = data.status
        db.commit()
        db.refresh(application)

        logger.info(f"Application status set application_id={application_id} status={data.status}")
        return ApplicationOut.model_validate(application)


@private_router.delete(
    "/{application_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response
)
def delete_application(
    application_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Withdraw an application; only the applicant may do so."""
    with store_operation(db, logger, "delete_application"):
        application = get_application_or_404(db, application_id)
        ensure_can_mutate(identity, application.user_id)
        db.delete(application)
        db.commit()

    logger.info(f"Application deleted application_id={application_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
