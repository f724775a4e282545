"""Best-effort push notifications for permit decisions.

The gateway is built from settings and injected; delivery failures are logged and
never reach the caller of deliver().
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, Field

from permitflow.models import Permit, PermitStatus

if TYPE_CHECKING:
    from permitflow.core.config import Settings

logger = logging.getLogger(__name__)

DECISION_TITLES = {
    PermitStatus.APPROVED: "Permit Approved",
    PermitStatus.REJECTED: "Permit Rejected",
}


class PushMessage(BaseModel):
    """One notification addressed to a device token."""

    token: str = Field(..., min_length=1)
    title: str
    body: str
    data: dict[str, str] = Field(default_factory=dict)


class PushGatewayError(Exception):
    """Raised when the push gateway rejects a message or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class PushGateway:
    """HTTP client for a legacy-FCM style push endpoint."""

    def __init__(
        self,
        url: str,
        server_key: str | None,
        timeout: float = 10.0,
        enabled: bool = True,
    ) -> None:
        self.url = url
        self.server_key = server_key
        self.timeout = timeout
        self.enabled = enabled

    @classmethod
    def from_settings(cls, settings: Settings) -> PushGateway:
        key = settings.PUSH_SERVER_KEY.get_secret_value() if settings.PUSH_SERVER_KEY else None
        return cls(
            url=settings.PUSH_GATEWAY_URL,
            server_key=key,
            timeout=settings.PUSH_REQUEST_TIMEOUT_SEC,
            enabled=settings.PUSH_ENABLED,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.enabled and self.url and self.server_key and self.server_key.strip())

    def _payload(self, message: PushMessage) -> dict[str, Any]:
        return {
            "to": message.token,
            "notification": {"title": message.title, "body": message.body},
            "data": message.data,
        }

    async def send(self, message: PushMessage) -> None:
        """Post one message. Raises PushGatewayError on transport errors or non-2xx."""
        if not self.is_configured:
            raise PushGatewayError("Push gateway is not configured.")
        headers = {"Authorization": f"key={self.server_key}"}
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(
                    self.url,
                    json=self._payload(message),
                    headers=headers,
                    timeout=self.timeout,
                )
        except httpx.HTTPError as e:
            raise PushGatewayError(f"Push gateway unreachable: {e!s}") from e
        if resp.status_code >= 400:
            try:
                detail = json.dumps(resp.json())[:500]
            except ValueError:
                detail = resp.text[:500] if resp.text else "Unknown error"
            raise PushGatewayError(
                f"Push gateway returned {resp.status_code}: {detail}", resp.status_code
            )

    async def deliver(self, message: PushMessage) -> bool:
        """Send and swallow every failure. Returns True only when the gateway accepted it."""
        if not self.is_configured:
            logger.info("Push disabled; notification not sent", extra={"title": message.title})
            return False
        try:
            await self.send(message)
        except PushGatewayError as e:
            logger.warning(
                "Push notification failed",
                extra={"status_code": e.status_code, "reason": e.message[:200]},
            )
            return False
        except Exception:
            logger.exception("Unexpected error while sending push notification")
            return False
        logger.info("Push notification delivered", extra={"title": message.title})
        return True


def build_decision_message(permit: Permit, token: str | None) -> PushMessage | None:
    """Notification for the owner of a decided permit; None without a usable token."""
    if not token or not token.strip() or not permit.status.is_terminal:
        return None
    verdict = "approved" if permit.status is PermitStatus.APPROVED else "rejected"
    return PushMessage(
        token=token,
        title=DECISION_TITLES[permit.status],
        body=f"Your vehicle permit to {permit.destination} has been {verdict}.",
        data={"permit_id": str(permit.id), "status": permit.status.value},
    )
