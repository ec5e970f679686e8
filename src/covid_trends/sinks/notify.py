"""Fire-and-forget webhook notifications."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Best-effort event notifier.

    Implementations must not raise from notify().
    """

    @abstractmethod
    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        """Send an event notification.

        Args:
            event: Event name, e.g. "countries_data_fetched".
            payload: Extra event fields.
        """


class NullNotifier(Notifier):
    """Notifier that discards everything."""

    async def notify(self, event: str, payload: dict[str, Any]) -> None:  # noqa: ARG002
        return None


class WebhookNotifier(Notifier):
    """POST events as JSON to a webhook URL.

    Body is ``{"event": ..., "timestamp": ..., **payload}``. HTTP errors, invalid
    URLs and non-2xx answers are logged and dropped.
    """

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize webhook notifier.

        Args:
            url: Webhook endpoint.
            timeout: Request timeout in seconds.
            client: Optional shared httpx client. If None, one is created per call.
        """
        self._url = url
        self._timeout = timeout
        self._client = client

    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        """POST an event to the webhook.

        Args:
            event: Event name.
            payload: Extra event fields.
        """
        body = {
            "event": event,
            "timestamp": datetime.now(UTC).isoformat(),
            **payload,
        }

        try:
            if self._client is not None:
                response = await self._client.post(self._url, json=body, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self._url, json=body)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Webhook notification %s failed: %s", event, e)
            return

        logger.debug("Webhook notification %s sent", event)
