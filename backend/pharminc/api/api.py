"""
API Router Aggregator.

Combines all v1 API routers into a single router for the main app.
Private routers are included before public ones so fixed paths such as
/me are matched ahead of /{id}.
"""

from fastapi import APIRouter

from pharminc.api.v1 import application, auth, institute, job, specialty, user

api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Auth"],
)

api_router.include_router(user.private_router, prefix="/users", tags=["User"])
api_router.include_router(user.router, prefix="/users", tags=["User"])

api_router.include_router(institute.private_router, prefix="/institutes", tags=["Institute"])
api_router.include_router(institute.router, prefix="/institutes", tags=["Institute"])

api_router.include_router(job.private_router, prefix="/jobs", tags=["Job"])
api_router.include_router(job.router, prefix="/jobs", tags=["Job"])

api_router.include_router(
    application.private_router,
    prefix="/applications",
    tags=["Application"],
)

api_router.include_router(specialty.private_router, prefix="/specialties", tags=["Specialty"])
api_router.include_router(specialty.router, prefix="/specialties", tags=["Specialty"])
