"""Unit tests for the outbound collaborators: profile analysis and admin email."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from freight_portal.domain.models import ProfileKind
from freight_portal.domain.services.notifications import (
    AdminNotificationError,
    EmailAdminNotifier,
    build_notification_content,
)
from freight_portal.domain.services.profile_analysis import (
    GPTProfileAnalyzer,
    ProfileAnalysisError,
    build_application_summary,
)
from freight_portal.infrastructure.db.models import CarrierModel
from freight_portal.libs.gpt_client import GPTAPIError, GPTRateLimitError, GPTResponse, OpenAIClient
from freight_portal.libs.resend_client import ResendAPIError, ResendClient

# ============================================================================
# Mock GPT Client
# ============================================================================


class MockGPTClient:
    def __init__(self, content: str = "Established carrier, low risk.", error: Exception | None = None):
        self.content = content
        self.error = error
        self.calls: list[list[dict[str, str]]] = []

    async def chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float = 0.0,
        max_tokens: int = 400,
    ) -> GPTResponse:
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return GPTResponse(
            content=self.content,
            model="gpt-4o-mini",
            total_tokens=42,
            latency_ms=10,
            finish_reason="stop",
        )


def _carrier() -> CarrierModel:
    return CarrierModel(
        id="c-1",
        legal_name="Acme <Trucking>",
        contact_name="",
        contact_email="ops@acme.example",
        contact_phone="704-555-0100",
        city="Charlotte",
        state="NC",
        dot_number="1234567",
        mc_number="MC123456",
        documents={},
    )


class TestProfileAnalysis:
    @pytest.mark.asyncio
    async def test_returns_model_text(self, carrier_payload: dict[str, Any]) -> None:
        client = MockGPTClient()
        analyzer = GPTProfileAnalyzer(client, enabled=True)

        result = await analyzer.analyze(ProfileKind.CARRIER, carrier_payload)

        assert result == "Established carrier, low risk."
        prompt = client.calls[0][1]["content"]
        assert "dotNumber: 1234567" in prompt
        assert "secret123" not in prompt
        assert "ops@acme.example" not in prompt

    @pytest.mark.asyncio
    async def test_disabled_skips_client(self, carrier_payload: dict[str, Any]) -> None:
        client = MockGPTClient()

        result = await GPTProfileAnalyzer(client, enabled=False).analyze(
            ProfileKind.CARRIER, carrier_payload
        )

        assert result is None
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_client_errors_wrapped(self, shipper_payload: dict[str, Any]) -> None:
        analyzer = GPTProfileAnalyzer(MockGPTClient(error=GPTAPIError("boom", 500)), enabled=True)

        with pytest.raises(ProfileAnalysisError):
            await analyzer.analyze(ProfileKind.SHIPPER, shipper_payload)

    @pytest.mark.asyncio
    async def test_empty_reply_is_an_error(self, shipper_payload: dict[str, Any]) -> None:
        analyzer = GPTProfileAnalyzer(MockGPTClient(content="   "), enabled=True)

        with pytest.raises(ProfileAnalysisError):
            await analyzer.analyze(ProfileKind.SHIPPER, shipper_payload)

    def test_summary_joins_lists(self, shipper_payload: dict[str, Any]) -> None:
        summary = build_application_summary(ProfileKind.SHIPPER, shipper_payload)

        assert summary.splitlines()[0] == "Application type: shipper"
        assert "preferredEquipment: Dry Van" in summary


class TestAdminNotification:
    @pytest.mark.asyncio
    async def test_sends_through_resend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"id": "email-1"})

        client = ResendClient(api_key="re_test", transport=httpx.MockTransport(handler))
        notifier = EmailAdminNotifier(client)
        monkeypatch.setattr(notifier.settings, "admin_notification_email", "ops@broker.example")
        monkeypatch.setattr(notifier.settings, "resend_from_email", "portal@broker.example")

        await notifier.notify_new_registration(ProfileKind.CARRIER, _carrier())

        body = json.loads(requests[0].content)
        assert requests[0].url.path == "/emails"
        assert requests[0].headers["Authorization"] == "Bearer re_test"
        assert body["to"] == ["ops@broker.example"]
        assert body["subject"] == "New carrier application: Acme <Trucking>"

    @pytest.mark.asyncio
    async def test_skipped_without_recipient(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        notifier = EmailAdminNotifier(
            ResendClient(api_key="re_test", transport=httpx.MockTransport(handler))
        )
        monkeypatch.setattr(notifier.settings, "admin_notification_email", "")

        await notifier.notify_new_registration(ProfileKind.CARRIER, _carrier())

    @pytest.mark.asyncio
    async def test_provider_error_raised(self, monkeypatch: pytest.MonkeyPatch) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad"}))
        notifier = EmailAdminNotifier(ResendClient(api_key="re_test", transport=transport))
        monkeypatch.setattr(notifier.settings, "admin_notification_email", "ops@broker.example")
        monkeypatch.setattr(notifier.settings, "resend_from_email", "portal@broker.example")

        with pytest.raises(AdminNotificationError) as excinfo:
            await notifier.notify_new_registration(ProfileKind.CARRIER, _carrier())

        assert isinstance(excinfo.value.__cause__, ResendAPIError)

    def test_html_body_is_escaped(self) -> None:
        text_body, html_body = build_notification_content(ProfileKind.CARRIER, _carrier())

        assert "DOT / MC: 1234567 / MC123456" in text_body
        assert "Acme &lt;Trucking&gt;" in html_body


class TestOpenAIClient:
    @staticmethod
    def _completion() -> dict[str, Any]:
        return {
            "model": "gpt-4o-mini",
            "choices": [{"message": {"content": "Looks fine."}, "finish_reason": "stop"}],
            "usage": {"total_tokens": 12},
        }

    @pytest.mark.asyncio
    async def test_retries_server_errors(self) -> None:
        statuses = iter([503, 200])

        def handler(request: httpx.Request) -> httpx.Response:
            code = next(statuses)
            return httpx.Response(code, json=self._completion() if code == 200 else {})

        client = OpenAIClient(
            api_key="sk-test",
            max_retries=3,
            backoff_base=0,
            transport=httpx.MockTransport(handler),
        )

        response = await client.chat_completion([{"role": "user", "content": "hi"}])

        assert response.content == "Looks fine."
        assert response.total_tokens == 12

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(400, json={"error": "bad request"})

        client = OpenAIClient(
            api_key="sk-test", max_retries=3, backoff_base=0, transport=httpx.MockTransport(handler)
        )

        with pytest.raises(GPTAPIError) as excinfo:
            await client.chat_completion([{"role": "user", "content": "hi"}])

        assert excinfo.value.status_code == 400
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_exhausts_retries(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(429))
        client = OpenAIClient(api_key="sk-test", max_retries=2, backoff_base=0, transport=transport)

        with pytest.raises(GPTRateLimitError):
            await client.chat_completion([{"role": "user", "content": "hi"}])

    def test_unconfigured_without_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        client = OpenAIClient(api_key="")
        monkeypatch.setattr(client, "api_key", "")

        assert client.configured is False
