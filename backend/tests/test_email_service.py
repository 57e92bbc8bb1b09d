"""
tests/test_email_service.py

Tests for recovery-code delivery through the Brevo transactional API.

Verifies:
✔ Sending is skipped when Brevo is not configured
✔ Payload carries sender, recipient, subject and the code
✔ Delivery failures raise EmailDeliveryError
"""

import json

import httpx
import pytest

from educa.email_service import EmailDeliveryError, send_recovery_code
from educa.settings import settings


@pytest.fixture
def brevo(monkeypatch):
    monkeypatch.setattr(settings, "brevo_api_key", "brevo-key")
    monkeypatch.setattr(settings, "email_sender", "no-reply@educa.test")
    monkeypatch.setattr(settings, "brevo_base_url", "http://brevo.test/v3/smtp/email")


@pytest.mark.asyncio
async def test_skipped_without_configuration(monkeypatch):
    monkeypatch.setattr(settings, "brevo_api_key", None)

    def handler(request):
        raise AssertionError("no request expected")

    assert await send_recovery_code("a@b.com", "123456", transport=httpx.MockTransport(handler)) is False


@pytest.mark.asyncio
async def test_payload(brevo):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(201, json={"messageId": "<abc@brevo>"})

    sent = await send_recovery_code("docente@example.com", "654321", transport=httpx.MockTransport(handler))

    assert sent is True
    assert seen["url"] == "http://brevo.test/v3/smtp/email"
    assert seen["key"] == "brevo-key"
    body = seen["body"]
    assert body["sender"] == {"email": "no-reply@educa.test", "name": settings.email_sender_name}
    assert body["to"] == [{"email": "docente@example.com"}]
    assert "recuperación" in body["subject"]
    assert "654321" in body["htmlContent"]
    assert f"{settings.recovery_code_ttl_minutes} minutos" in body["htmlContent"]


@pytest.mark.asyncio
async def test_delivery_failure(brevo):
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"message": "Key not found"}))
    with pytest.raises(EmailDeliveryError):
        await send_recovery_code("docente@example.com", "111111", transport=transport)
