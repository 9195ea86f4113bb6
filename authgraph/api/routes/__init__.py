"""
API routes aggregation.
"""

from fastapi import APIRouter

from .authz import router as authz_router

router = APIRouter()

router.include_router(authz_router, prefix="/authz", tags=["authz"])
