"""
AI-assisted profile analysis attached to new registrations.

The analysis is advisory text for the reviewing admin. Callers treat it as
best-effort: any failure leaves the profile without an analysis.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

import structlog
from freight_portal.core.config import get_settings
from freight_portal.domain.models import ProfileKind
from freight_portal.libs.gpt_client import GPTClientError, GPTClientProtocol, OpenAIClient

logger = structlog.get_logger(__name__)

# Only business facts go to the model; credentials and contact details stay local.
_ANALYSIS_FIELDS: dict[ProfileKind, tuple[str, ...]] = {
    ProfileKind.CARRIER: (
        "legalName",
        "dbaName",
        "dotNumber",
        "mcNumber",
        "authorityDate",
        "city",
        "state",
        "equipmentTypes",
        "preferredLanes",
    ),
    ProfileKind.SHIPPER: (
        "legalName",
        "dbaName",
        "city",
        "state",
        "commodityType",
        "monthlyVolume",
        "averageValue",
        "preferredEquipment",
    ),
}

SYSTEM_PROMPT = (
    "You are an onboarding analyst at a freight brokerage. Given a new {kind} "
    "application, write a short risk and fit summary (at most three sentences) "
    "for the admin who will approve or reject it. Do not invent facts."
)


class ProfileAnalysisError(Exception):
    """Raised when the analysis could not be produced."""


class ProfileAnalyzer(Protocol):
    async def analyze(self, kind: ProfileKind, payload: Mapping[str, Any]) -> str | None:
        """Return analysis text, None when analysis is disabled."""
        ...


class GPTProfileAnalyzer:
    """Profile analyzer backed by the OpenAI chat completions API."""

    def __init__(self, client: GPTClientProtocol | None = None, *, enabled: bool | None = None) -> None:
        settings = get_settings()
        self.client = client or OpenAIClient()
        self.enabled = settings.profile_analysis_enabled if enabled is None else enabled

    async def analyze(self, kind: ProfileKind, payload: Mapping[str, Any]) -> str | None:
        if not self.enabled:
            return None
        if isinstance(self.client, OpenAIClient) and not self.client.configured:
            await logger.adebug("profile_analysis_skipped", reason="openai_not_configured")
            return None

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT.format(kind=kind.value)},
            {"role": "user", "content": build_application_summary(kind, payload)},
        ]
        try:
            response = await self.client.chat_completion(messages, temperature=0.2, max_tokens=300)
        except GPTClientError as exc:
            raise ProfileAnalysisError(str(exc)) from exc

        content = response.content.strip()
        if not content:
            raise ProfileAnalysisError("Empty analysis returned")
        return content


def build_application_summary(kind: ProfileKind, payload: Mapping[str, Any]) -> str:
    lines = [f"Application type: {kind.value}"]
    for name in _ANALYSIS_FIELDS[kind]:
        value = payload.get(name)
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(item) for item in value)
        if value:
            lines.append(f"{name}: {value}")
    return "\n".join(lines)
