"""ORM model for vehicle-use permits."""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from permitflow.models.base import Base
from permitflow.models.enums import PermitStatus


class Permit(Base):
    """
    One vehicle-use request, owned by exactly one user.

    Departure, return and approval are stored as (date, "HH:MM") pairs. Approval
    date and time are either both null (undecided) or both set.
    """

    __tablename__ = "permits"
    __table_args__ = (
        CheckConstraint(
            "(approval_date IS NULL) = (approval_time IS NULL)",
            name="ck_permits_approval_pair",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    requester_name = Column(String(255), nullable=False)
    national_id = Column(String(32), nullable=False)
    driver_name = Column(String(255), nullable=False)
    plate_number = Column(String(32), nullable=False)
    destination = Column(Text, nullable=False)
    departure_date = Column(Date, nullable=False)
    departure_time = Column(String(5), nullable=False)
    return_date = Column(Date, nullable=False)
    return_time = Column(String(5), nullable=False)
    note = Column(Text, nullable=True)
    status = Column(
        Enum(PermitStatus, name="permit_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=PermitStatus.PENDING,
        server_default=PermitStatus.PENDING.value,
        index=True,
    )
    approval_date = Column(Date, nullable=True)
    approval_time = Column(String(5), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    user = relationship("User", back_populates="permits")
