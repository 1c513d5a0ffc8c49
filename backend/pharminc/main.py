from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pharminc.core.config import settings
from pharminc.core.logger import get_service_logger
from pharminc.db.base import Base
from pharminc.db.session import engine

# Import all models so SQLAlchemy can discover them for table creation
from pharminc.models import Application, Auth, Institute, Job, JobView, Specialty, User  # noqa: F401

# Import API router
from pharminc.api.api import api_router

logger = get_service_logger("App")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create database tables on startup."""
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description="Job marketplace connecting medical professionals with hiring institutes",
    version="0.0.1",
    lifespan=lifespan,
    openapi_url="/openapi.json",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS Middleware - allowlist from env (comma-separated, "*" permits all)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials="*" not in settings.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed body, query or path: 400 without field-level detail."""
    logger.warning(f"Validation failed {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid input"},
    )


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Include API router with /v1 prefix
app.include_router(api_router, prefix="/v1")
