"""Builders shared by the service and API tests: in-memory SQLite store, users, permits."""

from datetime import date, datetime
from zoneinfo import ZoneInfo

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from permitflow.core.security import hash_password
from permitflow.models import Base, Permit, PermitStatus, Role, User
from permitflow.schemas.permit import PermitCreate

JAKARTA = ZoneInfo("Asia/Jakarta")


def make_engine() -> Engine:
    """Fresh in-memory database shared by every connection of the engine."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_user(
    session: Session,
    username: str = "alice",
    national_id: str = "1234567890123456",
    password: str = "secret1",
    name: str = "Alice",
    role: Role = Role.EMPLOYEE,
    notification_token: str | None = None,
) -> User:
    user = User(
        national_id=national_id,
        username=username,
        password_hash=hash_password(password),
        name=name,
        role=role,
        notification_token=notification_token,
        created_at=datetime(2024, 1, 1, 8, 0, tzinfo=JAKARTA),
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def add_permit(
    session: Session,
    user: User,
    created_at: datetime,
    status: PermitStatus = PermitStatus.PENDING,
    **overrides: object,
) -> Permit:
    """Insert a permit directly with a chosen created_at (bypasses the service)."""
    fields: dict[str, object] = {
        "requester_name": "Budi",
        "national_id": user.national_id,
        "driver_name": "Slamet",
        "plate_number": "B 1234 XYZ",
        "destination": "Bandung",
        "departure_date": date(2024, 1, 15),
        "departure_time": "08:00",
        "return_date": date(2024, 1, 16),
        "return_time": "17:00",
        "note": None,
    }
    if status is not PermitStatus.PENDING:
        fields["approval_date"] = date(2024, 1, 14)
        fields["approval_time"] = "09:30"
    fields.update(overrides)
    permit = Permit(user_id=user.id, status=status, created_at=created_at, **fields)
    session.add(permit)
    session.commit()
    session.refresh(permit)
    return permit


def permit_create(user_id: int, **overrides: object) -> PermitCreate:
    """Valid creation payload (departure 2024-01-15, return 2024-01-16)."""
    data: dict[str, object] = {
        "requester_name": "Budi Santoso",
        "national_id": "1234567890123456",
        "driver_name": "Slamet",
        "plate_number": "B 1234 XYZ",
        "destination": "Kantor Cabang Bandung",
        "departure_date": date(2024, 1, 15),
        "departure_time": "08:00",
        "return_date": date(2024, 1, 16),
        "return_time": "17:00",
        "note": "Site visit",
        "user_id": user_id,
    }
    data.update(overrides)
    return PermitCreate(**data)
