"""
Institute API endpoints.

Public: list, search and fetch institutes.
Private: institute accounts manage their own profile.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import func, or_
from sqlalchemy.orm import Query as OrmQuery
from sqlalchemy.orm import Session

from pharminc.api.deps import (
    Pagination,
    get_current_identity,
    get_pagination,
    parse_bool,
    split_csv,
)
from pharminc.core.errors import ConflictError, NotFoundError
from pharminc.core.logger import get_service_logger
from pharminc.core.permissions import ensure_can_mutate
from pharminc.db.guard import store_operation
from pharminc.db.session import get_db
from pharminc.models import Institute, Specialty
from pharminc.schemas.auth import Identity
from pharminc.schemas.common import Page
from pharminc.schemas.institute import InstituteOut, InstituteProfileCreate, InstituteUpdate
from pharminc.services.specialties import upsert_specialties

logger = get_service_logger("Institute")

router = APIRouter()
private_router = APIRouter()


# ============== Helper Functions ==============


def apply_institute_filters(
    query: OrmQuery,
    specialty: Optional[str] = None,
    location: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = None,
    name: Optional[str] = None,
) -> OrmQuery:
    specialty_names = split_csv(specialty)
    if specialty_names:
        query = query.filter(Institute.specialties.any(Specialty.name.in_(specialty_names)))
    if location:
        query = query.filter(func.lower(Institute.location) == location.strip().lower())
    if role:
        query = query.filter(Institute.role == role.upper())
    verified_flag = parse_bool(verified)
    if verified_flag is not None:
        query = query.filter(Institute.verified == verified_flag)
    if name:
        query = query.filter(Institute.name.icontains(name, autoescape=True))
    return query


def paginate_institutes(query: OrmQuery, pagination: Pagination) -> dict:
    total = query.count()
    institutes = (
        query.order_by(Institute.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
        .all()
    )
    return {
        "items": [InstituteOut.model_validate(institute) for institute in institutes],
        "page": pagination.page,
        "page_size": pagination.page_size,
        "total": total,
    }


def name_taken(db: Session, name: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(Institute).filter(Institute.name == name)
    if exclude_id:
        query = query.filter(Institute.id != exclude_id)
    return query.first() is not None


# ============== Public Endpoints ==============


@router.get("", response_model=Page[InstituteOut])
def list_institutes(
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    location: Optional[str] = None,
    role: Optional[str] = Query(None, description="HOSPITAL, CLINIC, LAB or PHARMACY"),
    verified: Optional[str] = Query(None, description="true/false"),
    name: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """List institutes with optional filters, newest first."""
    with store_operation(db, logger, "list_institutes"):
        query = apply_institute_filters(db.query(Institute), specialty, location, role, verified, name)
        result = paginate_institutes(query, pagination)

    logger.info(f"Fetched institutes list page={pagination.page} total={result['total']}")
    return result


@router.get("/search", response_model=Page[InstituteOut])
def search_institutes(
    q: Optional[str] = Query(None, description="Matches name, location or headline"),
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    location: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = None,
    name: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Free-text search over institutes plus the list filters."""
    with store_operation(db, logger, "search_institutes"):
        query = db.query(Institute)
        if q:
            query = query.filter(
                or_(
                    Institute.name.icontains(q, autoescape=True),
                    Institute.location.icontains(q, autoescape=True),
                    Institute.headline.icontains(q, autoescape=True),
                )
            )
        query = apply_institute_filters(query, specialty, location, role, verified, name)
        result = paginate_institutes(query, pagination)

    logger.info(f"Fetched institutes search results q={q} total={result['total']}")
    return result


@router.get("/{id}", response_model=InstituteOut)
def get_institute(id: str, db: Session = Depends(get_db)):
    """Get an institute by id, with its specialties."""
    with store_operation(db, logger, "get_institute"):
        institute = db.get(Institute, id)
        if not institute:
            logger.warning(f"Institute not found id={id}")
            raise NotFoundError("Institute not found")
        return InstituteOut.model_validate(institute)


# ============== Private Endpoints ==============


@private_router.get("/me", response_model=InstituteOut)
def get_my_institute(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """The caller's own institute; the id comes from the token only."""
    with store_operation(db, logger, "get_my_institute"):
        institute = db.get(Institute, identity.id)
        if not institute:
            raise NotFoundError("Institute not found")
        return InstituteOut.model_validate(institute)


@private_router.post("", response_model=InstituteOut, status_code=status.HTTP_201_CREATED)
def create_institute(
    data: InstituteProfileCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Create the institute profile for an INSTITUTE auth record that has none yet."""
    ensure_can_mutate(
        identity, identity.id, "INSTITUTE", "Forbidden: only institute accounts may create an institute"
    )

    with store_operation(db, logger, "create_institute", "Institute already exists"):
        if db.get(Institute, identity.id):
            logger.warning(f"Attempt to create second institute id={identity.id}")
            raise ConflictError("Institute already exists")
        if name_taken(db, data.name):
            logger.warning(f"Attempt to create duplicate institute name={data.name}")
            raise ConflictError("Institute already exists")

        institute = Institute(id=identity.id, **data.model_dump(exclude={"specialties"}))
        if data.specialties:
            institute.specialties = upsert_specialties(db, data.specialties)
        db.add(institute)
        db.commit()
        db.refresh(institute)

        logger.info(f"Institute created id={institute.id}")
        return InstituteOut.model_validate(institute)


@private_router.put("/{id}", response_model=InstituteOut)
def update_institute(
    id: str,
    data: InstituteUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Update the caller's own institute. Specialties, when sent, replace the old set."""
    ensure_can_mutate(identity, id, "INSTITUTE", "Forbidden: cannot update another institute")

    with store_operation(db, logger, "update_institute", "Institute already exists"):
        institute = db.get(Institute, id)
        if not institute:
            logger.warning(f"Institute not found during update id={id}")
            raise NotFoundError("Institute not found")
        if data.name is not None and name_taken(db, data.name, exclude_id=id):
            logger.warning(f"Institute rename conflicts id={id} name={data.name}")
            raise ConflictError("Institute already exists")

        changes = data.model_dump(exclude_unset=True, exclude={"specialties"})
        for field, value in changes.items():
            setattr(institute, field, value)
        if data.specialties is not None:
            institute.specialties = upsert_specialties(db, data.specialties)

        db.commit()
        db.refresh(institute)

        logger.info(f"Institute updated id={id}")
        return InstituteOut.model_validate(institute)


@private_router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_institute(
    id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Delete the caller's own institute together with its jobs."""
    ensure_can_mutate(identity, id, "INSTITUTE", "Forbidden: cannot delete another institute")

    with store_operation(db, logger, "delete_institute"):
        institute = db.get(Institute, id)
        if not institute:
            logger.warning(f"Institute not found during deletion id={id}")
            raise NotFoundError("Institute not found")
        db.delete(institute)
        db.commit()

    logger.info(f"Institute deleted id={id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
