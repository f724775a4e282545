"""Pydantic request/response schemas."""

from permitflow.schemas.auth import CurrentUser, LoginRequest, LoginResponse
from permitflow.schemas.health import HealthResponse
from permitflow.schemas.permit import (
    PermitCreate,
    PermitDecision,
    PermitFilter,
    PermitRead,
    PermitStatistics,
)
from permitflow.schemas.report import ReportExportRequest, ReportExportResponse
from permitflow.schemas.user import NotificationTokenUpdate, UserCreate, UserRead

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "NotificationTokenUpdate",
    "PermitCreate",
    "PermitDecision",
    "PermitFilter",
    "PermitRead",
    "PermitStatistics",
    "ReportExportRequest",
    "ReportExportResponse",
    "UserCreate",
    "UserRead",
]
