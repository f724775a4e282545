"""SQLAlchemy ORM models."""

from permitflow.models.base import Base
from permitflow.models.enums import DateRange, PermitStatus, Role
from permitflow.models.permit import Permit
from permitflow.models.user import User

__all__ = ["Base", "DateRange", "Permit", "PermitStatus", "Role", "User"]
