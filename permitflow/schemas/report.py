"""Schemas for the permit report export."""

from datetime import date
from typing import Literal, Self

from pydantic import BaseModel, Field, model_validator

from permitflow.models.enums import PermitStatus

ReportFormat = Literal["csv", "xlsx"]


class ReportExportRequest(BaseModel):
    """Export window (inclusive on both days), optional status and output format."""

    start_date: date
    end_date: date
    status: PermitStatus | None = None
    format: ReportFormat = "csv"

    @model_validator(mode="after")
    def validate_period(self) -> Self:
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        return self


class ReportExportResponse(BaseModel):
    """Report file transported as base64 inside JSON."""

    data: str = Field(..., description="Base64-encoded file content")
    filename: str
    mime_type: str
    total: int = Field(..., ge=0, description="Number of permit rows in the report")
