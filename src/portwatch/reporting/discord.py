"""Discord channel message sink."""

from __future__ import annotations

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from portwatch.config.models import NotifierConfig
from portwatch.errors import PublishError

logger = logging.getLogger(__name__)


@runtime_checkable
class ReportSink(Protocol):
    """Destination that can create a report and later update it in place."""

    async def create(self, payload: dict[str, Any]) -> str: ...
    async def update(self, report_id: str, payload: dict[str, Any]) -> None: ...


class DiscordChannel:
    """Posts and edits messages in a Discord channel via the REST API."""

    def __init__(self, config: NotifierConfig) -> None:
        self._config = config
        self._messages_url = f"{config.api_base.rstrip('/')}/channels/{config.channel_id}/messages"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bot {self._config.bot_token}",
            "Content-Type": "application/json",
        }

    async def _send(self, method: str, url: str, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            async with httpx.AsyncClient(timeout=self._config.timeout) as client:
                resp = await client.request(method, url, json=payload, headers=self._headers())
                resp.raise_for_status()
                result: dict[str, Any] = resp.json()
                return result
        except httpx.HTTPStatusError as exc:
            raise PublishError(
                f"Discord rejected {method} {url}: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PublishError(f"Could not reach Discord: {exc}") from exc
        except ValueError as exc:
            raise PublishError(f"Invalid response from Discord: {exc}") from exc

    async def create(self, payload: dict[str, Any]) -> str:
        """Post a new message and return its id."""
        data = await self._send("POST", self._messages_url, payload)
        message_id = data.get("id")
        if not message_id:
            raise PublishError("Discord response did not include a message id")
        logger.info("Created status message %s", message_id)
        return str(message_id)

    async def update(self, report_id: str, payload: dict[str, Any]) -> None:
        """Edit an existing message in place."""
        await self._send("PATCH", f"{self._messages_url}/{report_id}", payload)
