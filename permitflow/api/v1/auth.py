"""Login endpoint and auth dependencies (get_current_user, require)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from permitflow.api.v1.errors import raise_http
from permitflow.core.database import get_db
from permitflow.schemas.auth import CurrentUser, LoginRequest, LoginResponse
from permitflow.schemas.user import UserRead
from permitflow.services import users as user_service
from permitflow.services.access import Action, ensure_allowed
from permitflow.services.errors import AuthenticationError, AuthorizationError

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns the user and a session token.
    Include the token in the Authorization header as: Bearer <token>

    Sending notification_token (even "") stores it on the account.
    """
    try:
        user, token, expires_at = user_service.login(db, body)
    except AuthenticationError as e:
        raise_http(e)
    return LoginResponse(
        user=UserRead.model_validate(user),
        token=token,
        token_type="bearer",
        expires_at=expires_at,
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Dependency: require a valid Bearer session token. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return user_service.resolve_session(db, credentials.credentials)
    except AuthenticationError as e:
        raise_http(e)


def require(action: Action) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user whose role grants action, else 403."""

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        try:
            ensure_allowed(current_user, action)
        except AuthorizationError as e:
            raise_http(e)
        return current_user

    return dependency
