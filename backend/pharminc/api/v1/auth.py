"""
Authentication API endpoints.

Handles account registration and signin with JWT token generation.
"""

from typing import Optional, Union

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from pharminc.api.deps import get_current_identity
from pharminc.core.errors import ConflictError, ForbiddenError, NotFoundError, StoreError
from pharminc.core.logger import get_service_logger
from pharminc.core.security import create_access_token, get_password_hash, verify_password
from pharminc.db.session import get_db
from pharminc.models import Auth, Institute, User
from pharminc.schemas.auth import Identity, SigninRequest, SignupRequest, Token
from pharminc.schemas.institute import InstituteOut
from pharminc.schemas.user import UserOut
from pharminc.services.specialties import upsert_specialties

logger = get_service_logger("Auth")

router = APIRouter()


# ============== Helper Functions ==============


def get_auth_by_email(db: Session, email: str) -> Optional[Auth]:
    """Get an auth record by email address."""
    return db.query(Auth).filter(Auth.email == email).first()


def institute_name_taken(db: Session, name: str) -> bool:
    return db.query(Institute).filter(Institute.name == name).first() is not None


def signup_conflict_detail(db: Session, data: SignupRequest) -> str:
    """Name the unique field a concurrent signup claimed first."""
    if data.role == "INSTITUTE" and not get_auth_by_email(db, data.email):
        return "Institute already exists"
    return "Email already registered"


def build_profile(db: Session, auth: Auth, data: SignupRequest) -> Union[User, Institute]:
    """Create the profile row that shares the auth id."""
    fields = data.profile.model_dump(exclude={"specialties"})
    model = Institute if auth.role == "INSTITUTE" else User
    profile = model(id=auth.id, **fields)
    if data.profile.specialties:
        profile.specialties = upsert_specialties(db, data.profile.specialties)
    db.add(profile)
    return profile


# ============== API Endpoints ==============


@router.post(
    "/signup",
    response_model=Union[UserOut, InstituteOut],
    status_code=status.HTTP_201_CREATED,
)
def signup(data: SignupRequest, db: Session = Depends(get_db)):
    """
    Register a new account.

    Creates the auth record and the matching user or institute profile in
    one transaction; both share the same id. The password is never returned.
    """
    if get_auth_by_email(db, data.email):
        logger.warning(f"Signup failed: email already registered email={data.email}")
        raise ConflictError("Email already registered")

    if data.role == "INSTITUTE":
        if institute_name_taken(db, data.profile.name):
            logger.warning(f"Signup failed: institute name taken name={data.profile.name}")
            raise ConflictError("Institute already exists")

    try:
        auth = Auth(
            email=data.email,
            password=get_password_hash(data.password),
            role=data.role,
        )
        db.add(auth)
        db.flush()

        profile = build_profile(db, auth, data)
        db.commit()
        db.refresh(profile)
    except IntegrityError:
        db.rollback()
        detail = signup_conflict_detail(db, data)
        logger.warning(f"Signup conflict on unique field email={data.email} detail={detail}")
        raise ConflictError(detail)
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Database error during signup email={data.email}")
        raise StoreError()

    logger.info(f"Signup successful email={data.email} id={profile.id} role={data.role}")
    if data.role == "INSTITUTE":
        return InstituteOut.model_validate(profile)
    return UserOut.model_validate(profile)


@router.post("/signin", response_model=Token)
def signin(credentials: SigninRequest, db: Session = Depends(get_db)):
    """
    Sign in and get a JWT access token.

    Unknown email -> 404, wrong password -> 403. The token carries
    {id, role, iat, exp} and is valid for one hour.
    """
    try:
        auth = get_auth_by_email(db, credentials.email)
    except SQLAlchemyError:
        logger.exception("Signin error")
        raise StoreError()

    if not auth:
        logger.warning(f"Signin failed: auth not found email={credentials.email}")
        raise NotFoundError("Auth not found")

    if not verify_password(credentials.password, auth.password):
        logger.warning(f"Signin failed: invalid password email={credentials.email}")
        raise ForbiddenError("Invalid password")

    access_token = create_access_token(auth.id, auth.role)

    logger.info(f"Signin successful email={credentials.email} id={auth.id}")
    return Token(access_token=access_token)


@router.get("/me", response_model=Identity)
def get_me(identity: Identity = Depends(get_current_identity)):
    """Identity carried by the caller's token."""
    return identity
