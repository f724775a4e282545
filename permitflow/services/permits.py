"""Permit lifecycle: creation, HR decisions, filtered queries and statistics.

Every function works on one session and commits at most once; store errors propagate.
"""

import logging
from datetime import datetime

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from permitflow.models import Permit, PermitStatus, User
from permitflow.schemas.permit import (
    PermitCreate,
    PermitDecision,
    PermitFilter,
    PermitStatistics,
)
from permitflow.services.date_ranges import resolve_date_range
from permitflow.services.errors import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def create_permit(session: Session, body: PermitCreate) -> Permit:
    """
    Persist a new Pending permit for an existing user.

    Raises ValidationError unless return_date is a later calendar day than
    departure_date (times of day are not compared), then NotFoundError if the
    owning user does not exist.
    """
    if body.return_date <= body.departure_date:
        raise ValidationError("Return date must be after departure date.")
    if session.get(User, body.user_id) is None:
        raise NotFoundError(f"User {body.user_id} not found.")

    permit = Permit(
        requester_name=body.requester_name,
        national_id=body.national_id,
        driver_name=body.driver_name,
        plate_number=body.plate_number,
        destination=body.destination,
        departure_date=body.departure_date,
        departure_time=body.departure_time,
        return_date=body.return_date,
        return_time=body.return_time,
        note=body.note,
        status=PermitStatus.PENDING,
        approval_date=None,
        approval_time=None,
        user_id=body.user_id,
    )
    session.add(permit)
    session.commit()
    session.refresh(permit)
    logger.info(
        "Permit created",
        extra={"permit_id": permit.id, "user_id": permit.user_id},
    )
    return permit


def get_permit(session: Session, permit_id: int) -> Permit | None:
    """Return the permit or None."""
    return session.get(Permit, permit_id)


def get_user_permits(session: Session, user_id: int) -> list[Permit]:
    """Permits owned by user_id, newest first."""
    return (
        session.query(Permit)
        .filter(Permit.user_id == user_id)
        .order_by(Permit.created_at.desc(), Permit.id.desc())
        .all()
    )


def get_pending_permits(session: Session) -> list[Permit]:
    """Undecided permits in decision-queue order (oldest first)."""
    return (
        session.query(Permit)
        .filter(Permit.status == PermitStatus.PENDING)
        .order_by(Permit.created_at.asc(), Permit.id.asc())
        .all()
    )


def decide_permit(
    session: Session,
    permit_id: int,
    decision: PermitDecision,
    allow_redecision: bool = False,
) -> Permit:
    """
    Set a terminal status and the approval date/time in a single update.

    Raises NotFoundError for an unknown id, ConflictError when the permit is
    already decided and allow_redecision is False. Without allow_redecision the
    UPDATE only matches a row that is still Pending, so of two concurrent
    decisions exactly one wins. Notifying the owner is the caller's concern and
    happens after this commit.
    """
    if not decision.status.is_terminal:
        raise ValidationError("Decision status must be Approved or Rejected.")
    permit = session.get(Permit, permit_id)
    if permit is None:
        raise NotFoundError(f"Permit {permit_id} not found.")
    if permit.status is not PermitStatus.PENDING and not allow_redecision:
        raise ConflictError(f"Permit {permit_id} is already {permit.status.value}.")

    previous = permit.status
    conditions = [Permit.id == permit_id]
    if not allow_redecision:
        conditions.append(Permit.status == PermitStatus.PENDING)
    result = session.execute(
        update(Permit)
        .where(*conditions)
        .values(
            status=decision.status,
            approval_date=decision.approval_date,
            approval_time=decision.approval_time,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        session.rollback()
        raise ConflictError(f"Permit {permit_id} has already been decided.")
    session.commit()
    session.refresh(permit)
    logger.info(
        "Permit decided",
        extra={
            "permit_id": permit.id,
            "previous_status": previous.value,
            "status": permit.status.value,
        },
    )
    return permit


def _filter_conditions(filters: PermitFilter | None, now: datetime) -> list:
    """SQL conditions for a filter; an empty list means no constraint."""
    if filters is None:
        return []
    conditions = []
    bounds = resolve_date_range(filters.filter, now, filters.start_date, filters.end_date)
    if bounds is not None:
        start, end = bounds
        conditions.append(Permit.created_at >= start)
        conditions.append(Permit.created_at <= end)
    if filters.status is not None:
        conditions.append(Permit.status == filters.status)
    if filters.user_id is not None:
        conditions.append(Permit.user_id == filters.user_id)
    return conditions


def query_permits(
    session: Session,
    filters: PermitFilter | None,
    now: datetime,
) -> list[Permit]:
    """Permits matching every active condition, newest first. now must be timezone-aware."""
    return (
        session.query(Permit)
        .filter(*_filter_conditions(filters, now))
        .order_by(Permit.created_at.desc(), Permit.id.desc())
        .all()
    )


def permit_statistics(
    session: Session,
    filters: PermitFilter | None,
    now: datetime,
) -> PermitStatistics:
    """Per-status counts over the same rows query_permits would return."""
    rows = (
        session.query(Permit.status, func.count(Permit.id))
        .filter(*_filter_conditions(filters, now))
        .group_by(Permit.status)
        .all()
    )
    counts = {status: count for status, count in rows}
    pending = counts.get(PermitStatus.PENDING, 0)
    approved = counts.get(PermitStatus.APPROVED, 0)
    rejected = counts.get(PermitStatus.REJECTED, 0)
    return PermitStatistics(
        total=pending + approved + rejected,
        pending=pending,
        approved=approved,
        rejected=rejected,
    )
