# =============================================================================
# tests/test_notification_service.py - EmailJS Notification Tests
# =============================================================================
# The HTTP call is mocked; no request leaves the test process.
#
# Run with: pytest tests/test_notification_service.py -v
# =============================================================================

from datetime import datetime, timezone
from unittest.mock import patch

import httpx
import pytest

from app.config import settings
from app.exceptions import NotificationDeliveryError, NotificationNotConfiguredError
from core.models.contact import ContactEmailPayload
from core.services.notification_service import (
    FALLBACK_PHONE,
    FALLBACK_SUBJECT,
    NotificationService,
    build_contact_template_params,
    format_submitted_at,
)


@pytest.fixture
def emailjs_configured(monkeypatch):
    monkeypatch.setattr(settings, "EMAILJS_SERVICE_ID", "service_123")
    monkeypatch.setattr(settings, "EMAILJS_TEMPLATE_ID", "template_456")
    monkeypatch.setattr(settings, "EMAILJS_PUBLIC_KEY", "public_789")
    monkeypatch.setattr(settings, "EMAILJS_PRIVATE_KEY", None)


@pytest.fixture
def payload():
    return ContactEmailPayload(
        name="Anna Muster",
        email="anna@example.com",
        message="Hallo!",
        has_accepted_privacy=True,
        submitted_at=datetime(2026, 3, 5, 8, 4, 9, tzinfo=timezone.utc),
    )


class TestTemplateParams:

    def test_format_submitted_at_winter(self):
        assert format_submitted_at(datetime(2026, 3, 5, 8, 4, 9, tzinfo=timezone.utc)) == "5.3.2026, 09:04:09"

    def test_format_submitted_at_summer_time(self):
        assert format_submitted_at(datetime(2026, 7, 1, 22, 30, 0, tzinfo=timezone.utc)) == "2.7.2026, 00:30:00"

    def test_naive_datetime_counts_as_utc(self):
        assert format_submitted_at(datetime(2026, 3, 5, 8, 4, 9)) == "5.3.2026, 09:04:09"

    def test_fallbacks(self, payload):
        params = build_contact_template_params(payload.model_copy(update={"subject": "  ", "phone": None}))

        assert params.customer_subject == FALLBACK_SUBJECT
        assert params.customer_phone == FALLBACK_PHONE
        assert params.privacy_status == "Ja"
        assert params.submitted_at == "5.3.2026, 09:04:09"

    def test_privacy_not_accepted(self, payload):
        params = build_contact_template_params(payload.model_copy(update={"has_accepted_privacy": False}))
        assert params.privacy_status == "Nein"

    def test_camel_case_input(self):
        parsed = ContactEmailPayload.model_validate({
            "name": "A",
            "email": "a@example.com",
            "message": "m",
            "hasAcceptedPrivacy": True,
            "submittedAt": "2026-03-05T08:04:09Z",
        })
        assert parsed.has_accepted_privacy is True
        assert parsed.submitted_at == datetime(2026, 3, 5, 8, 4, 9, tzinfo=timezone.utc)


class TestRequestBody:

    def test_without_private_key(self, emailjs_configured, payload):
        body = NotificationService.build_request_body(payload)

        assert body["service_id"] == "service_123"
        assert body["template_id"] == "template_456"
        assert body["public_key"] == body["user_id"] == "public_789"
        assert "accessToken" not in body
        assert body["template_params"]["customer_name"] == "Anna Muster"

    def test_with_private_key(self, emailjs_configured, monkeypatch, payload):
        monkeypatch.setattr(settings, "EMAILJS_PRIVATE_KEY", "secret")
        assert NotificationService.build_request_body(payload)["accessToken"] == "secret"


class TestSend:

    def test_not_configured(self, monkeypatch, payload):
        monkeypatch.setattr(settings, "EMAILJS_SERVICE_ID", None)

        with patch("core.services.notification_service.httpx.post") as post:
            with pytest.raises(NotificationNotConfiguredError) as exc:
                NotificationService.send_contact_notification(payload)

        post.assert_not_called()
        assert exc.value.status_code == 500
        assert "EMAILJS_SERVICE_ID" in exc.value.details["missing"]

    def test_success(self, emailjs_configured, payload):
        with patch("core.services.notification_service.httpx.post") as post:
            post.return_value = httpx.Response(200, text="OK")
            NotificationService.send_contact_notification(payload)

        args, kwargs = post.call_args
        assert args[0] == settings.EMAILJS_ENDPOINT
        assert kwargs["json"]["template_params"]["customer_email"] == "anna@example.com"
        assert kwargs["timeout"] == settings.EMAILJS_TIMEOUT_SECONDS

    def test_rejected(self, emailjs_configured, payload):
        with patch("core.services.notification_service.httpx.post") as post:
            post.return_value = httpx.Response(400, text="The template ID is invalid")
            with pytest.raises(NotificationDeliveryError) as exc:
                NotificationService.send_contact_notification(payload)

        assert exc.value.status_code == 502
        assert "template ID is invalid" in exc.value.details["error"]

    def test_network_error(self, emailjs_configured, payload):
        with patch("core.services.notification_service.httpx.post") as post:
            post.side_effect = httpx.ConnectError("connection refused")
            with pytest.raises(NotificationDeliveryError):
                NotificationService.send_contact_notification(payload)
