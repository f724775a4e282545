"""Request/response schemas for user accounts."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from permitflow.core.config import settings
from permitflow.core.security import PASSWORD_MAX_LEN, USERNAME_MAX_LEN
from permitflow.models.enums import Role
from permitflow.schemas.common import RequiredText


class UserCreate(BaseModel):
    """New account; national_id and username must be unused."""

    national_id: RequiredText = Field(..., max_length=32, description="National identity number (NIK)")
    username: RequiredText = Field(..., max_length=USERNAME_MAX_LEN)
    password: str = Field(..., max_length=PASSWORD_MAX_LEN)
    name: RequiredText = Field(..., max_length=255, description="Display name")
    role: Role
    notification_token: str | None = Field(default=None, description="Push notification token")

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters"
            )
        return v


class UserRead(BaseModel):
    """User as returned by the API (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    national_id: str
    username: str
    name: str
    role: Role
    notification_token: str | None
    created_at: datetime


class NotificationTokenUpdate(BaseModel):
    """Replace the push token; an empty string is a valid value."""

    notification_token: str = Field(..., max_length=4096)
