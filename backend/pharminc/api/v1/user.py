"""
User API endpoints.

Public: list, search and fetch job-seeker profiles.
Private: create, read, update and delete the caller's own profile.
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
from pharminc.models import Specialty, User
from pharminc.schemas.auth import Identity
from pharminc.schemas.common import Page
from pharminc.schemas.user import UserOut, UserProfileCreate, UserUpdate
from pharminc.services.specialties import upsert_specialties

logger = get_service_logger("User")

router = APIRouter()
private_router = APIRouter()


# ============== Helper Functions ==============


def apply_user_filters(
    query: OrmQuery,
    specialty: Optional[str] = None,
    location: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = None,
    gender: Optional[str] = None,
    name: Optional[str] = None,
) -> OrmQuery:
    """Equality/contains filters shared by list and search."""
    specialty_names = split_csv(specialty)
    if specialty_names:
        query = query.filter(
            or_(
                func.lower(User.specialty).in_(specialty_names),
                User.specialties.any(Specialty.name.in_(specialty_names)),
            )
        )
    if location:
        query = query.filter(func.lower(User.location) == location.strip().lower())
    if role:
        query = query.filter(User.role == role.upper())
    verified_flag = parse_bool(verified)
    if verified_flag is not None:
        query = query.filter(User.verified == verified_flag)
    if gender:
        query = query.filter(func.lower(User.gender) == gender.strip().lower())
    if name:
        query = query.filter(User.name.icontains(name, autoescape=True))
    return query


def paginate_users(db: Session, query: OrmQuery, pagination: Pagination) -> dict:
    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset(pagination.offset)
        .limit(pagination.page_size)
        .all()
    )
    return {
        "items": [UserOut.model_validate(user) for user in users],
        "page": pagination.page,
        "page_size": pagination.page_size,
        "total": total,
    }


# ============== Public Endpoints ==============


@router.get("", response_model=Page[UserOut])
def list_users(
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    location: Optional[str] = None,
    role: Optional[str] = Query(None, description="DOCTOR or NURSE"),
    verified: Optional[str] = Query(None, description="true/false"),
    gender: Optional[str] = None,
    name: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """List users with optional filters, newest first."""
    with store_operation(db, logger, "list_users"):
        query = apply_user_filters(db.query(User), specialty, location, role, verified, gender, name)
        result = paginate_users(db, query, pagination)

    logger.info(f"Fetched users list page={pagination.page} total={result['total']}")
    return result


@router.get("/search", response_model=Page[UserOut])
def search_users(
    q: Optional[str] = Query(None, description="Matches name, specialty, location or headline"),
    specialty: Optional[str] = Query(None, description="Comma-separated specialty names"),
    location: Optional[str] = None,
    role: Optional[str] = None,
    verified: Optional[str] = None,
    gender: Optional[str] = None,
    pagination: Pagination = Depends(get_pagination),
    db: Session = Depends(get_db),
):
    """Free-text search over users plus the list filters."""
    with store_operation(db, logger, "search_users"):
        query = db.query(User)
        if q:
            query = query.filter(
                or_(
                    User.name.icontains(q, autoescape=True),
                    User.specialty.icontains(q, autoescape=True),
                    User.location.icontains(q, autoescape=True),
                    User.headline.icontains(q, autoescape=True),
                )
            )
        query = apply_user_filters(query, specialty, location, role, verified, gender)
        result = paginate_users(db, query, pagination)

    logger.info(f"Fetched users search results q={q} total={result['total']}")
    return result


@router.get("/{id}", response_model=UserOut)
def get_user(id: str, db: Session = Depends(get_db)):
    """Get a user profile by id."""
    with store_operation(db, logger, "get_user"):
        user = db.get(User, id)
        if not user:
            logger.warning(f"User not found id={id}")
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)


# ============== Private Endpoints ==============


@private_router.get("/me", response_model=UserOut)
def get_my_user(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """The caller's own profile; the id comes from the token only."""
    with store_operation(db, logger, "get_my_user"):
        user = db.get(User, identity.id)
        if not user:
            raise NotFoundError("User not found")
        return UserOut.model_validate(user)


@private_router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserProfileCreate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Create the profile for an auth record that has none yet."""
    ensure_can_mutate(identity, identity.id, "USER", "Forbidden: only user accounts may create a user profile")

    with store_operation(db, logger, "create_user", "User already exists"):
        if db.get(User, identity.id):
            logger.warning(f"Attempt to create duplicate user id={identity.id}")
            raise ConflictError("User already exists")

        user = User(id=identity.id, **data.model_dump(exclude={"specialties"}))
        if data.specialties:
            user.specialties = upsert_specialties(db, data.specialties)
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"User created id={user.id}")
        return UserOut.model_validate(user)


@private_router.put("/{id}", response_model=UserOut)
def update_user(
    id: str,
    data: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Update the caller's own profile. Specialties, when sent, replace the old set."""
    ensure_can_mutate(identity, id, "USER", "Forbidden: cannot update another user")

    with store_operation(db, logger, "update_user"):
        user = db.get(User, id)
        if not user:
            logger.warning(f"User not found during update id={id}")
            raise NotFoundError("User not found")

        changes = data.model_dump(exclude_unset=True, exclude={"specialties"})
        for field, value in changes.items():
            setattr(user, field, value)
        if data.specialties is not None:
            user.specialties = upsert_specialties(db, data.specialties)

        db.commit()
        db.refresh(user)

        logger.info(f"User updated id={id}")
        return UserOut.model_validate(user)


@private_router.delete("/{id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
def delete_user(
    id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    """Delete the caller's own profile (and, by cascade, their applications)."""
    ensure_can_mutate(identity, id, "USER", "Forbidden: cannot delete another user")

    with store_operation(db, logger, "delete_user"):
        user = db.get(User, id)
        if not user:
            logger.warning(f"User not found during deletion id={id}")
            raise NotFoundError("User not found")
        db.delete(user)
        db.commit()

    logger.info(f"User deleted id={id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
