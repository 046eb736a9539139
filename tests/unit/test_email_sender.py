"""
Тесты для EmailSender (Resend)
"""
import json
from unittest.mock import AsyncMock, patch

import aiohttp

from shoe_repair.presenters.email_presenter import EmailMessage
from shoe_repair.services.email_sender import DEV_MODE_MESSAGE_ID, EmailSender
from shoe_repair.utils.retry import RetryableHTTPError


MESSAGE = EmailMessage(
    to="lena.berger@example.com",
    subject="Auftragsbestätigung #000042 - kletterschuhe.de",
    html="<h2>Vielen Dank</h2><p>Auftrag &amp; KVA</p>",
)


def make_sender(api_key: str = "re_test_key") -> EmailSender:
    return EmailSender(
        api_key=api_key,
        api_url="https://api.resend.test",
        from_email="werkstatt@kletterschuhe.de",
        from_name="kletterschuhe.de",
    )


class TestDevMode:
    async def test_without_api_key_nothing_is_sent(self):
        sender = make_sender(api_key="")

        with patch.object(EmailSender, "_post", new_callable=AsyncMock) as post:
            result = await sender.send(MESSAGE)

        assert sender.dev_mode
        assert result.success
        assert result.message_id == DEV_MODE_MESSAGE_ID
        post.assert_not_called()


class TestSend:
    async def test_payload(self):
        sender = make_sender()

        with patch.object(
            EmailSender, "_post", new_callable=AsyncMock, return_value={"id": "msg_123"}
        ) as post:
            result = await sender.send(MESSAGE)

        assert result.success
        assert result.message_id == "msg_123"

        path, payload = post.call_args.args
        assert path == "/emails"
        assert payload["from"] == "kletterschuhe.de <werkstatt@kletterschuhe.de>"
        assert payload["to"] == ["lena.berger@example.com"]
        assert payload["subject"] == MESSAGE.subject
        assert payload["text"] == "Vielen Dank\nAuftrag & KVA"

    async def test_explicit_text_is_kept(self):
        sender = make_sender()
        message = EmailMessage(to="a@example.com", subject="Hi", html="<p>x</p>", text="Plain")

        with patch.object(
            EmailSender, "_post", new_callable=AsyncMock, return_value={"id": "1"}
        ) as post:
            await sender.send(message)

        assert post.call_args.args[1]["text"] == "Plain"

    async def test_rejected_by_api(self):
        sender = make_sender()

        with patch.object(
            EmailSender, "_post", new_callable=AsyncMock, return_value={"error": "Invalid `to` field"}
        ):
            result = await sender.send(MESSAGE)

        assert not result.success
        assert result.error == "Invalid `to` field"

    async def test_service_unavailable(self):
        sender = make_sender()

        with patch.object(
            EmailSender, "_post", new_callable=AsyncMock, side_effect=RetryableHTTPError(503, "down")
        ):
            result = await sender.send(MESSAGE)

        assert not result.success
        assert result.error == "HTTP 503"

    async def test_network_error_does_not_raise(self):
        sender = make_sender()

        with patch.object(
            EmailSender,
            "_post",
            new_callable=AsyncMock,
            side_effect=aiohttp.ClientConnectionError("refused"),
        ):
            result = await sender.send(MESSAGE)

        assert not result.success
        assert result.error == "Failed to send email"


class FakeResponse:
    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body

    async def text(self) -> str:
        return self.body

    async def json(self, content_type=None):
        return json.loads(self.body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    def __init__(self, response: FakeResponse):
        self.response = response

    def post(self, url, json=None, headers=None):
        return self.response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


def fake_session(status: int, body: str):
    return patch.object(aiohttp, "ClientSession", lambda **kwargs: FakeSession(FakeResponse(status, body)))


class TestResendResponses:
    async def test_success(self):
        with fake_session(200, '{"id": "msg_123"}'):
            result = await make_sender().send(MESSAGE)

        assert result.success
        assert result.message_id == "msg_123"

    async def test_validation_error_message(self):
        with fake_session(422, '{"statusCode": 422, "message": "Invalid `to` field"}'):
            result = await make_sender().send(MESSAGE)

        assert not result.success
        assert result.error == "Invalid `to` field"

    async def test_html_error_page(self):
        """HTML вместо JSON (страница прокси) - ошибка в результате, без исключения"""
        with fake_session(403, "<html><body>Forbidden</body></html>"):
            result = await make_sender().send(MESSAGE)

        assert not result.success
        assert result.error == "HTTP 403"

    async def test_broken_success_body(self):
        with fake_session(200, "<html>ok</html>"):
            result = await make_sender().send(MESSAGE)

        assert not result.success
        assert result.error == "Invalid response"

    async def test_unexpected_json_shape(self):
        with fake_session(200, "null"):
            result = await make_sender().send(MESSAGE)

        assert not result.success
        assert result.error == "Invalid response"
