"""ORM model for application users (identity, credentials and role)."""

from sqlalchemy import Column, DateTime, Enum, Integer, String, func
from sqlalchemy.orm import relationship

from permitflow.models.base import Base
from permitflow.models.enums import Role


class User(Base):
    """
    User account for login, role-based access and push notifications.

    national_id and username are unique at the store level; the service pre-check
    is only a convenience and IntegrityError is still handled.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    national_id = Column(String(32), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    notification_token = Column(String(4096), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    permits = relationship("Permit", back_populates="user", lazy="select")
