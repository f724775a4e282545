"""Identity operations: registration, lookup, login and notification tokens."""

import logging
from datetime import datetime

import jwt
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from permitflow.core.security import (
    create_session_token,
    decode_session_token,
    hash_password,
    verify_password,
)
from permitflow.models import Role, User
from permitflow.schemas.auth import CurrentUser, LoginRequest
from permitflow.schemas.user import UserCreate
from permitflow.services.errors import AuthenticationError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)


def create_user(session: Session, body: UserCreate) -> User:
    """
    Register a user with a hashed password.

    Raises ConflictError when national_id or username is taken. The unique
    constraints are authoritative; a concurrent insert that slips past the
    pre-check surfaces as IntegrityError and is reported the same way.
    """
    existing = (
        session.query(User)
        .filter(or_(User.national_id == body.national_id, User.username == body.username))
        .first()
    )
    if existing is not None:
        if existing.national_id == body.national_id:
            raise ConflictError("National ID already exists.")
        raise ConflictError("Username already exists.")

    user = User(
        national_id=body.national_id,
        username=body.username,
        password_hash=hash_password(body.password),
        name=body.name,
        role=body.role,
        notification_token=body.notification_token,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise ConflictError("National ID or username already exists.") from e
    session.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
    return user


def get_user(session: Session, user_id: int) -> User | None:
    return session.get(User, user_id)


def update_notification_token(session: Session, user_id: int, token: str | None) -> User:
    """Replace the user's push token. Raises NotFoundError for an unknown user."""
    user = session.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found.")
    user.notification_token = token
    session.commit()
    session.refresh(user)
    return user


def login(session: Session, body: LoginRequest) -> tuple[User, str, datetime]:
    """
    Check credentials and issue a session token.

    Unknown user and wrong password raise the same AuthenticationError. When the
    request carries notification_token (even empty) it is stored before the
    token is issued. Returns (user, token, expires_at).
    """
    user = session.query(User).filter(User.username == body.username).first()
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login rejected", extra={"username": body.username})
        raise AuthenticationError()

    if body.has_notification_token:
        user.notification_token = body.notification_token
        session.commit()
        session.refresh(user)

    token, expires_at = create_session_token(user.id, user.username, user.role.value)
    return user, token, expires_at


def resolve_session(session: Session, token: str) -> CurrentUser:
    """
    Verify a session token and load its user.

    Raises AuthenticationError for a bad signature, expiry, malformed claims or a
    user that no longer exists.
    """
    try:
        payload = decode_session_token(token)
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid or expired token.") from e
    try:
        user_id = int(payload["sub"])
        Role(payload["role"])
    except (KeyError, TypeError, ValueError) as e:
        raise AuthenticationError("Invalid token payload.") from e

    user = session.get(User, user_id)
    if user is None:
        raise AuthenticationError("User not found.")
    # Role comes from the store, not the token.
    return CurrentUser(id=user.id, username=user.username, role=user.role)
