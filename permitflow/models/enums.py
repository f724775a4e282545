"""Closed enumerations shared by ORM models, schemas and services."""

import enum


class Role(str, enum.Enum):
    """User role; fixed at account creation."""

    EMPLOYEE = "Employee"
    HR = "HR"
    ADMIN = "Admin"


class PermitStatus(str, enum.Enum):
    """Permit lifecycle: Pending, then exactly one terminal decision."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not PermitStatus.PENDING


class DateRange(str, enum.Enum):
    """Named created-at windows used by permit queries and statistics."""

    TODAY = "Today"
    THIS_WEEK = "ThisWeek"
    THIS_MONTH = "ThisMonth"
    CUSTOM = "Custom"
