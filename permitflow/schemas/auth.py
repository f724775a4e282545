"""Request/response schemas for login and the authenticated principal."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from permitflow.models.enums import Role
from permitflow.schemas.user import UserRead


class LoginRequest(BaseModel):
    """
    Credentials for login.

    notification_token is only written when the client sends the key; an empty
    string is stored as-is and null clears the token.
    """

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")
    notification_token: str | None = Field(default=None, max_length=4096)

    @property
    def has_notification_token(self) -> bool:
        return "notification_token" in self.model_fields_set


class LoginResponse(BaseModel):
    """Authenticated user plus a signed session token."""

    user: UserRead
    token: str = Field(..., description="Signed session token (JWT)")
    token_type: str = Field(default="bearer", description="Token type")
    expires_at: datetime


class CurrentUser(BaseModel):
    """Authenticated principal decoded from the session token."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: Role
