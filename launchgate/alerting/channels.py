"""Alert delivery channels.

Each channel reports success as a bool. HTTP channels catch transport
errors themselves; anything else that escapes is isolated by the
dispatcher.
"""

from typing import Any, Optional, Protocol, runtime_checkable
import json
import logging

import httpx

from launchgate.alerting.config import DISCORD_COLORS, AlertPayload

logger = logging.getLogger(__name__)

TELEGRAM_API_URL = "https://api.telegram.org"


@runtime_checkable
class AlertChannel(Protocol):
    """Protocol for alert channels."""

    @property
    def name(self) -> str: ...

    async def send(self, alert: AlertPayload) -> bool: ...


class ConsoleChannel:
    """Writes alerts to the log."""

    def __init__(self, logger_name: str = "launchgate.alerts"):
        self._logger = logging.getLogger(logger_name)

    @property
    def name(self) -> str:
        return "console"

    async def send(self, alert: AlertPayload) -> bool:
        self._logger.info(
            "%s [%s] %s: %s",
            alert.emoji, alert.level.value.upper(), alert.title, alert.message,
        )
        if alert.metadata:
            self._logger.info("   Metadata: %s", json.dumps(alert.metadata, default=str))
        return True


class _HttpChannel:
    """Shared POST helper for HTTP-backed channels."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        self._client = client
        self._timeout = timeout

    @property
    def name(self) -> str:
        raise NotImplementedError

    async def _post(self, url: str, body: dict[str, Any]) -> bool:
        try:
            if self._client is not None:
                response = await self._client.post(url, json=body)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            logger.error("%s alert failed: %s", self.name, e)
            return False
        if not response.is_success:
            logger.warning("%s alert rejected with HTTP %s", self.name, response.status_code)
        return response.is_success


class WebhookChannel(_HttpChannel):
    """POSTs the alert as JSON to a generic webhook."""

    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        super().__init__(client, timeout)
        self.url = url

    @property
    def name(self) -> str:
        return "webhook"

    async def send(self, alert: AlertPayload) -> bool:
        return await self._post(self.url, alert.to_dict())


class DiscordChannel(_HttpChannel):
    """Discord webhook embed coloured by level; metadata as inline fields."""

    def __init__(self, webhook_url: str, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0):
        super().__init__(client, timeout)
        self.webhook_url = webhook_url

    @property
    def name(self) -> str:
        return "discord"

    @staticmethod
    def build_embed(alert: AlertPayload) -> dict[str, Any]:
        return {
            "title": alert.title,
            "description": alert.message,
            "color": DISCORD_COLORS[alert.level],
            "timestamp": alert.timestamp.isoformat(),
            "fields": [
                {"name": str(key), "value": str(value), "inline": True}
                for key, value in alert.metadata.items()
            ],
        }

    async def send(self, alert: AlertPayload) -> bool:
        return await self._post(self.webhook_url, {"embeds": [self.build_embed(alert)]})


class TelegramChannel(_HttpChannel):
    """Telegram Bot API ``sendMessage`` with Markdown formatting."""

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        super().__init__(client, timeout)
        self.bot_token = bot_token
        self.chat_id = chat_id

    @property
    def name(self) -> str:
        return "telegram"

    @property
    def url(self) -> str:
        return f"{TELEGRAM_API_URL}/bot{self.bot_token}/sendMessage"

    @staticmethod
    def format_text(alert: AlertPayload) -> str:
        return f"{alert.emoji} *{alert.title}*\n\n{alert.message}"

    async def send(self, alert: AlertPayload) -> bool:
        return await self._post(self.url, {
            "chat_id": self.chat_id,
            "text": self.format_text(alert),
            "parse_mode": "Markdown",
        })
