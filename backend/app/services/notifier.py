"""Outbound notification of strong primary signals over a JSON webhook."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel

from core.models import PrimarySignal

logger = logging.getLogger(__name__)

REASON_SENT = "sent"
REASON_NOT_CONFIGURED = "not_configured"
REASON_ERROR = "error"


class NotifyRequest(BaseModel):
    """Payload posted to the webhook."""

    primary: PrimarySignal
    current_price: float
    timestamp: int  # epoch ms
    recipient: str = ""


class DispatchResult(BaseModel):
    """Outcome of one dispatch attempt."""

    success: bool
    reason: str
    detail: str = ""

    @property
    def should_mark_sent(self) -> bool:
        """Sent, or intentionally skipped because no channel is configured."""
        return self.success or self.reason == REASON_NOT_CONFIGURED


class WebhookNotifier:
    """Posts NotifyRequest payloads to a configured webhook URL."""

    def __init__(self, webhook_url: str = "", recipient: str = "", timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.recipient = recipient
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def send(self, primary: PrimarySignal, current_price: float, timestamp: int) -> DispatchResult:
        """Dispatch a notification. Never raises."""
        if not self.is_configured:
            logger.info("Notification channel not configured, dispatch skipped")
            return DispatchResult(success=False, reason=REASON_NOT_CONFIGURED)

        request = NotifyRequest(
            primary=primary,
            current_price=current_price,
            timestamp=timestamp,
            recipient=self.recipient,
        )

        try:
            client = await self._get_client()
            response = await client.post(
                self.webhook_url, json=request.model_dump(mode="json")
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Notification dispatch failed: {e}")
            return DispatchResult(success=False, reason=REASON_ERROR, detail=str(e))

        logger.info(
            f"Notification sent: {primary.kind.value}/{primary.strength.value} "
            f"at {current_price}"
        )
        return DispatchResult(success=True, reason=REASON_SENT)
