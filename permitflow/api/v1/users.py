"""User endpoints: registration (admin), profile lookup, push token, own permits."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from permitflow.api.v1.auth import get_current_user, require
from permitflow.api.v1.errors import raise_http
from permitflow.core.database import get_db
from permitflow.schemas.auth import CurrentUser
from permitflow.schemas.permit import PermitRead
from permitflow.schemas.user import NotificationTokenUpdate, UserCreate, UserRead
from permitflow.services import permits as permit_service
from permitflow.services import users as user_service
from permitflow.services.access import Action, ensure_self_or_allowed
from permitflow.services.errors import AuthorizationError, ConflictError, NotFoundError

router = APIRouter()


@router.post("", response_model=UserRead, status_code=201)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require(Action.CREATE_USERS))],
) -> UserRead:
    """Create an account (admin only). 409 when national_id or username is taken."""
    try:
        user = user_service.create_user(db, body)
    except ConflictError as e:
        raise_http(e)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserRead:
    """Return one user: yourself, or anyone for HR and Admin."""
    try:
        ensure_self_or_allowed(current_user, user_id, Action.READ_ANY_USER)
    except AuthorizationError as e:
        raise_http(e)
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.put("/{user_id}/notification-token", response_model=UserRead)
def update_notification_token(
    user_id: int,
    body: NotificationTokenUpdate,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> UserRead:
    """Replace a user's push notification token (self or Admin)."""
    try:
        ensure_self_or_allowed(current_user, user_id, Action.UPDATE_ANY_TOKEN)
        user = user_service.update_notification_token(db, user_id, body.notification_token)
    except (AuthorizationError, NotFoundError) as e:
        raise_http(e)
    return UserRead.model_validate(user)


@router.get("/{user_id}/permits", response_model=list[PermitRead])
def get_user_permits(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> list[PermitRead]:
    """Permits owned by a user, newest first."""
    try:
        ensure_self_or_allowed(current_user, user_id, Action.READ_ANY_PERMIT)
    except AuthorizationError as e:
        raise_http(e)
    permits = permit_service.get_user_permits(db, user_id)
    return [PermitRead.model_validate(p) for p in permits]
