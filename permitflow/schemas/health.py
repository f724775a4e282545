"""Health check response."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: str = Field(description="APP_ENV (dev or prod)")
    timezone: str = Field(description="Zone used for date ranges and reports")
    timestamp: datetime = Field(description="Server time in that zone")
    database: Literal["connected", "disconnected"]
    push_notifications: bool = Field(description="Whether decision notifications are sent")
