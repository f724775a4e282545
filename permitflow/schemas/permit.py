"""Pydantic schemas for permit creation, decisions, queries and statistics."""

from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from permitflow.models.enums import DateRange, PermitStatus
from permitflow.schemas.common import RequiredText, TimeOfDay


class PermitCreate(BaseModel):
    """Employee request for vehicle use. Date ordering is checked by the service."""

    requester_name: RequiredText = Field(..., max_length=255, description="Vehicle user")
    national_id: RequiredText = Field(..., max_length=32)
    driver_name: RequiredText = Field(..., max_length=255)
    plate_number: RequiredText = Field(..., max_length=32, description="Vehicle plate")
    destination: RequiredText
    departure_date: date
    departure_time: TimeOfDay
    return_date: date
    return_time: TimeOfDay
    note: str | None = None
    user_id: int = Field(..., ge=1, description="Owning user")


class PermitDecision(BaseModel):
    """HR decision; only the two terminal statuses are accepted."""

    status: PermitStatus
    approval_date: date
    approval_time: TimeOfDay

    @field_validator("status")
    @classmethod
    def validate_terminal_status(cls, v: PermitStatus) -> PermitStatus:
        if not v.is_terminal:
            raise ValueError("status must be Approved or Rejected")
        return v


class PermitRead(BaseModel):
    """Permit as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    requester_name: str
    national_id: str
    driver_name: str
    plate_number: str
    destination: str
    departure_date: date
    departure_time: str
    return_date: date
    return_time: str
    note: str | None
    status: PermitStatus
    approval_date: date | None
    approval_time: str | None
    created_at: datetime
    user_id: int


class PermitFilter(BaseModel):
    """
    Optional permit query filter. All present conditions are combined with AND.

    start_date/end_date are only read when filter is Custom, and then both are required.
    """

    filter: DateRange | None = None
    start_date: date | None = None
    end_date: date | None = None
    status: PermitStatus | None = None
    user_id: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def validate_custom_range(self) -> Self:
        if self.filter is DateRange.CUSTOM:
            if self.start_date is None or self.end_date is None:
                raise ValueError("start_date and end_date are required for a Custom range")
            if self.start_date > self.end_date:
                raise ValueError("start_date must not be after end_date")
        return self


class PermitStatistics(BaseModel):
    """Per-status counts over one query; total is always the sum of the three."""

    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
