"""
Specialty API endpoints.

Names are stored lower-cased so search and tagging are case-insensitive.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from pharminc.api.deps import Pagination, get_current_identity, get_pagination
from pharminc.core.errors import BadRequestError, ConflictError, NotFoundError
from pharminc.core.logger import get_service_logger
from pharminc.db.guard import store_operation
from pharminc.db.session import get_db
from pharminc.models import Specialty
from pharminc.schemas.auth import Identity
from pharminc.schemas.common import Page
from pharminc.schemas.specialty import SpecialtyCreate, SpecialtyOut
from pharminc.services.specialties import normalize_specialty_name

logger = get_service_logger("Specialty")

router = APIRouter()
private_router = APIRouter()


@router.get("/search", response_model=Page[SpecialtyOut])
def search_specialties(
    q: Optional[str] = Query(None, description="Part of a specialty name"),
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Specialties whose name contains q, alphabetical."""
    term = (q or "").strip().lower()

    with store_operation(db, logger, "search_specialties"):
        query = db.query(Specialty).filter(Specialty.name.contains(term, autoescape=True))
        total = query.count()
        specialties = (
            query.order_by(Specialty.name.asc())
            .offset(pagination.offset)
            .limit(pagination.page_size)
            .all()
        )

    logger.info(f"Fetched specialties search results q={term} total={total}")
    return {
        "items": [SpecialtyOut.model_validate(s) for s in specialties],
        "page": pagination.page,
        "page_size": pagination.page_size,
        "total": total,
    }


@router.get("/{id}", response_model=SpecialtyOut)
def get_specialty(id: str, db: Session = Depends(get_db)):
    with store_operation(db, logger, "get_specialty"):
        specialty = db.get(Specialty, id)
        if not specialty:
            raise NotFoundError("Specialty not found")
        return SpecialtyOut.model_validate(specialty)


@private_router.post("", response_model=SpecialtyOut, status_code=status.HTTP_201_CREATED)
def create_specialty(
    data: SpecialtyCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Add a specialty to the taxonomy; duplicates (any case) are rejected."""
    name = normalize_specialty_name(data.name)
    if not name:
        raise BadRequestError()

    with store_operation(db, logger, "create_specialty", "Specialty already exists"):
        if db.query(Specialty).filter(Specialty.name == name).first():
            logger.warning(f"Specialty already exists name={name}")
            raise ConflictError("Specialty already exists")

        specialty = Specialty(name=name)
        db.add(specialty)
        db.commit()
        db.refresh(specialty)

    logger.info(f"Specialty created id={specialty.id} name={name} by={identity.id}")
    return SpecialtyOut.model_validate(specialty)
