"""Shared library helpers."""

from freight_portal.libs.gpt_client import (
    GPTClientError,
    GPTClientProtocol,
    GPTResponse,
    OpenAIClient,
)
from freight_portal.libs.portal_client import PortalClient
from freight_portal.libs.resend_client import ResendClient, ResendClientError

__all__ = [
    "GPTClientError",
    "GPTClientProtocol",
    "GPTResponse",
    "OpenAIClient",
    "PortalClient",
    "ResendClient",
    "ResendClientError",
]
