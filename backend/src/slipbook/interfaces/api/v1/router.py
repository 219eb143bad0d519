"""Aggregate all v1 routers."""
from fastapi import APIRouter

from .routers.slips import router as slips_router

v1_router = APIRouter(prefix="/api/v1")
v1_router.include_router(slips_router)
