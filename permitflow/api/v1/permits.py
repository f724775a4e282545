"""Permit endpoints: create, read, HR decision queue and decisions, filtered queries, statistics."""

import logging
from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from permitflow.api.v1.auth import get_current_user, require
from permitflow.api.v1.errors import raise_http, raise_unprocessable
from permitflow.core.config import get_settings
from permitflow.core.database import get_db
from permitflow.models import DateRange, PermitStatus
from permitflow.schemas.auth import CurrentUser
from permitflow.schemas.permit import (
    PermitCreate,
    PermitDecision,
    PermitFilter,
    PermitRead,
    PermitStatistics,
)
from permitflow.services import permits as permit_service
from permitflow.services.access import Action, ensure_self_or_allowed
from permitflow.services.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from permitflow.services.notifications import PushGateway, build_decision_message

logger = logging.getLogger(__name__)
router = APIRouter()


def current_time() -> datetime:
    """Aware "now" in APP_TIMEZONE; overridable in tests."""
    return datetime.now(get_settings().timezone)


def get_push_gateway() -> PushGateway:
    return PushGateway.from_settings(get_settings())


def permit_filter(
    filter: Annotated[DateRange | None, Query(description="Named created-at range")] = None,
    start_date: Annotated[date | None, Query(description="Custom range start (inclusive)")] = None,
    end_date: Annotated[date | None, Query(description="Custom range end (inclusive)")] = None,
    status: Annotated[PermitStatus | None, Query()] = None,
    user_id: Annotated[int | None, Query(ge=1)] = None,
) -> PermitFilter:
    """Build a PermitFilter from query parameters; 422 when a Custom range is incomplete."""
    try:
        return PermitFilter(
            filter=filter,
            start_date=start_date,
            end_date=end_date,
            status=status,
            user_id=user_id,
        )
    except PydanticValidationError as e:
        raise_unprocessable(e)


@router.post("", response_model=PermitRead, status_code=201)
def create_permit(
    body: PermitCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PermitRead:
    """
    Submit a vehicle permit request; it starts as Pending.

    The return date must be a later day than the departure date. Employees may
    only submit for themselves.
    """
    try:
        ensure_self_or_allowed(current_user, body.user_id, Action.CREATE_PERMIT_FOR_OTHERS)
        permit = permit_service.create_permit(db, body)
    except (AuthorizationError, ValidationError, NotFoundError) as e:
        raise_http(e)
    return PermitRead.model_validate(permit)


@router.get("", response_model=list[PermitRead])
def query_permits(
    filters: Annotated[PermitFilter, Depends(permit_filter)],
    db: Annotated[Session, Depends(get_db)],
    now: Annotated[datetime, Depends(current_time)],
    _user: Annotated[CurrentUser, Depends(require(Action.QUERY_PERMITS))],
) -> list[PermitRead]:
    """
    Monitor permits with optional filters, newest first.

    - **filter**: Today, ThisWeek (Monday-Sunday), ThisMonth or Custom (needs start_date and end_date)
    - **status**: Pending, Approved or Rejected
    - **user_id**: owner
    """
    try:
        permits = permit_service.query_permits(db, filters, now)
    except ValidationError as e:
        raise_http(e)
    return [PermitRead.model_validate(p) for p in permits]


@router.get("/pending", response_model=list[PermitRead])
def get_pending_permits(
    db: Annotated[Session, Depends(get_db)],
    _user: Annotated[CurrentUser, Depends(require(Action.LIST_PENDING))],
) -> list[PermitRead]:
    """Decision queue: Pending permits, oldest first."""
    return [PermitRead.model_validate(p) for p in permit_service.get_pending_permits(db)]


@router.get("/statistics", response_model=PermitStatistics)
def get_permit_statistics(
    filters: Annotated[PermitFilter, Depends(permit_filter)],
    db: Annotated[Session, Depends(get_db)],
    now: Annotated[datetime, Depends(current_time)],
    _user: Annotated[CurrentUser, Depends(require(Action.VIEW_STATISTICS))],
) -> PermitStatistics:
    """Total, pending, approved and rejected counts under the same filters as GET /permits."""
    try:
        return permit_service.permit_statistics(db, filters, now)
    except ValidationError as e:
        raise_http(e)


@router.get("/{permit_id}", response_model=PermitRead)
def get_permit(
    permit_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> PermitRead:
    """One permit; visible to its owner, HR and Admin."""
    permit = permit_service.get_permit(db, permit_id)
    if permit is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Permit not found")
    try:
        ensure_self_or_allowed(current_user, permit.user_id, Action.READ_ANY_PERMIT)
    except AuthorizationError as e:
        raise_http(e)
    return PermitRead.model_validate(permit)


@router.post("/{permit_id}/decision", response_model=PermitRead)
def decide_permit(
    permit_id: int,
    body: PermitDecision,
    background_tasks: BackgroundTasks,
    db: Annotated[Session, Depends(get_db)],
    gateway: Annotated[PushGateway, Depends(get_push_gateway)],
    _hr: Annotated[CurrentUser, Depends(require(Action.DECIDE_PERMIT))],
) -> PermitRead:
    """
    Approve or reject a permit (HR only).

    The owner is notified after the response is sent when they have a push
    token; delivery problems never change the outcome of the decision.
    """
    try:
        permit = permit_service.decide_permit(
            db,
            permit_id,
            body,
            allow_redecision=get_settings().ALLOW_REDECISION,
        )
    except (ValidationError, NotFoundError, ConflictError) as e:
        raise_http(e)

    message = build_decision_message(permit, permit.user.notification_token)
    if message is not None:
        background_tasks.add_task(gateway.deliver, message)
    else:
        logger.info("No push token for permit owner", extra={"permit_id": permit.id})
    return PermitRead.model_validate(permit)
