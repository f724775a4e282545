"""API v1 routes."""

from fastapi import APIRouter

from permitflow.api.v1 import auth, health, permits, reports, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(permits.router, prefix="/permits", tags=["permits"])
router.include_router(reports.router, prefix="/reports", tags=["reports"])
