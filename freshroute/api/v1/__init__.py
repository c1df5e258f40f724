"""
API v1 router aggregation.
"""
from fastapi import APIRouter

from freshroute.api.v1.endpoints import dispatch, jobs

api_router = APIRouter()

api_router.include_router(
    dispatch.router,
    prefix="/dispatch",
    tags=["Dispatch"],
)

api_router.include_router(
    jobs.router,
    prefix="/jobs",
    tags=["Transport Jobs"],
)
