"""Liveness plus permit store connectivity, for load balancers and monitoring."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from permitflow.api.v1.permits import current_time, get_push_gateway
from permitflow.core.config import get_settings
from permitflow.core.database import check_db_connected, get_db
from permitflow.schemas.health import HealthResponse
from permitflow.services.notifications import PushGateway

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    now: Annotated[datetime, Depends(current_time)],
    gateway: Annotated[PushGateway, Depends(get_push_gateway)],
) -> HealthResponse:
    """Always 200 while the process is up; database reports whether SELECT 1 succeeded."""
    settings = get_settings()
    return HealthResponse(
        environment=settings.APP_ENV,
        timezone=settings.APP_TIMEZONE,
        timestamp=now,
        database="connected" if check_db_connected(db) else "disconnected",
        push_notifications=gateway.is_configured,
    )
