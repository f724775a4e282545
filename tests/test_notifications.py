"""Unit tests for permitflow.services.notifications: payloads, gateway calls, failure handling."""

import asyncio
import unittest
from datetime import date
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from pydantic import SecretStr

from permitflow.models import Permit, PermitStatus
from permitflow.services.notifications import (
    PushGateway,
    PushGatewayError,
    PushMessage,
    build_decision_message,
)

GATEWAY_URL = "https://push.example.test/send"


def _permit(status: PermitStatus = PermitStatus.APPROVED) -> Permit:
    return Permit(
        id=17,
        destination="Bandung",
        status=status,
        approval_date=date(2024, 1, 18),
        approval_time="14:30",
        user_id=3,
    )


def _message() -> PushMessage:
    return PushMessage(token="device-1", title="Permit Approved", body="ok", data={"permit_id": "17"})


def _gateway(**overrides: object) -> PushGateway:
    kwargs: dict[str, object] = {"url": GATEWAY_URL, "server_key": "server-key", "timeout": 5.0}
    kwargs.update(overrides)
    return PushGateway(**kwargs)


def _mock_client(mock_client_class: MagicMock, post: AsyncMock) -> MagicMock:
    mock_instance = MagicMock()
    mock_instance.post = post
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_instance


def _response(status_code: int, json_body: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_body if json_body is not None else {}
    resp.text = ""
    return resp


class TestBuildDecisionMessage(unittest.TestCase):
    def test_approved(self) -> None:
        message = build_decision_message(_permit(), "device-1")
        self.assertEqual(message.token, "device-1")
        self.assertEqual(message.title, "Permit Approved")
        self.assertIn("Bandung", message.body)
        self.assertIn("approved", message.body)
        self.assertEqual(message.data, {"permit_id": "17", "status": "Approved"})

    def test_rejected(self) -> None:
        message = build_decision_message(_permit(PermitStatus.REJECTED), "device-1")
        self.assertEqual(message.title, "Permit Rejected")
        self.assertIn("rejected", message.body)

    def test_no_token(self) -> None:
        self.assertIsNone(build_decision_message(_permit(), None))
        self.assertIsNone(build_decision_message(_permit(), ""))
        self.assertIsNone(build_decision_message(_permit(), "   "))

    def test_pending_permit_has_no_message(self) -> None:
        self.assertIsNone(build_decision_message(_permit(PermitStatus.PENDING), "device-1"))


class TestPushGatewayConfig(unittest.TestCase):
    def test_is_configured(self) -> None:
        self.assertTrue(_gateway().is_configured)
        self.assertFalse(_gateway(enabled=False).is_configured)
        self.assertFalse(_gateway(server_key=None).is_configured)
        self.assertFalse(_gateway(server_key="  ").is_configured)

    def test_from_settings(self) -> None:
        settings = MagicMock()
        settings.PUSH_GATEWAY_URL = GATEWAY_URL
        settings.PUSH_SERVER_KEY = SecretStr("abc")
        settings.PUSH_REQUEST_TIMEOUT_SEC = 3.0
        settings.PUSH_ENABLED = True
        gateway = PushGateway.from_settings(settings)
        self.assertEqual(gateway.server_key, "abc")
        self.assertEqual(gateway.timeout, 3.0)
        self.assertTrue(gateway.is_configured)

    def test_from_settings_without_key(self) -> None:
        settings = MagicMock()
        settings.PUSH_GATEWAY_URL = GATEWAY_URL
        settings.PUSH_SERVER_KEY = None
        settings.PUSH_REQUEST_TIMEOUT_SEC = 3.0
        settings.PUSH_ENABLED = True
        self.assertFalse(PushGateway.from_settings(settings).is_configured)


class TestSend(unittest.TestCase):
    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_posts_payload_with_server_key(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200))
        _mock_client(mock_client_class, post)

        asyncio.run(_gateway().send(_message()))

        post.assert_awaited_once()
        args, kwargs = post.call_args
        self.assertEqual(args[0], GATEWAY_URL)
        self.assertEqual(kwargs["headers"], {"Authorization": "key=server-key"})
        self.assertEqual(kwargs["timeout"], 5.0)
        self.assertEqual(kwargs["json"]["to"], "device-1")
        self.assertEqual(kwargs["json"]["notification"], {"title": "Permit Approved", "body": "ok"})
        self.assertEqual(kwargs["json"]["data"], {"permit_id": "17"})

    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_error_status_raises(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(return_value=_response(401, {"error": "bad key"})))
        with self.assertRaises(PushGatewayError) as ctx:
            asyncio.run(_gateway().send(_message()))
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertIn("bad key", ctx.exception.message)

    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_transport_error_raises(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(side_effect=httpx.ConnectError("refused")))
        with self.assertRaises(PushGatewayError) as ctx:
            asyncio.run(_gateway().send(_message()))
        self.assertIsNone(ctx.exception.status_code)

    def test_unconfigured_send_raises(self) -> None:
        with self.assertRaises(PushGatewayError):
            asyncio.run(_gateway(enabled=False).send(_message()))


class TestDeliver(unittest.TestCase):
    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_success(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(return_value=_response(200)))
        self.assertTrue(asyncio.run(_gateway().deliver(_message())))

    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_gateway_failure_is_swallowed(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(return_value=_response(500)))
        self.assertFalse(asyncio.run(_gateway().deliver(_message())))

    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_unexpected_error_is_swallowed(self, mock_client_class: MagicMock) -> None:
        _mock_client(mock_client_class, AsyncMock(side_effect=RuntimeError("boom")))
        self.assertFalse(asyncio.run(_gateway().deliver(_message())))

    @patch("permitflow.services.notifications.httpx.AsyncClient")
    def test_disabled_gateway_makes_no_request(self, mock_client_class: MagicMock) -> None:
        self.assertFalse(asyncio.run(_gateway(enabled=False).deliver(_message())))
        mock_client_class.assert_not_called()


if __name__ == "__main__":
    unittest.main()
