"""Slack notification for failed config applies."""

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class SlackNotifier:
    """Posts failed configs to a Slack incoming webhook."""

    def __init__(
        self,
        lb_name: str,
        webhook_url: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.lb_name = lb_name
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def format_message(self, config: str, error: str) -> dict:
        text = (
            f"Nginx ({self.lb_name}) config failed:\n"
            f"*Error:*\n```{error}```\n"
            f"*Config:*\n```{config}```\n"
        )
        return {"text": text, "username": f"Nginx {self.lb_name}"}

    async def config_failed(self, config: str, error: str) -> bool:
        """Send the failure. Delivery errors are logged, never raised.

        Returns:
            True if the webhook accepted the message
        """
        if not self.enabled:
            logger.debug("No Slack webhook configured, skipping notification")
            return False

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.webhook_url, json=self.format_message(config, error))
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to send Slack notification: {e}")
            return False

        logger.info(f"Sent failure notification for {self.lb_name}")
        return True
