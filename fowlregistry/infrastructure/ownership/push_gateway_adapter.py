"""
Adapter: HTTP push gateway.

Implements PushGateway port by POSTing one JSON payload per message to
the configured gateway. Without a gateway URL, messages are only logged.
"""

import logging
from typing import Optional

import httpx

from fowlregistry.domain.ownership.entities import PushMessage
from fowlregistry.domain.ownership.ports import PushGateway

logger = logging.getLogger(__name__)


class HttpPushGatewayAdapter(PushGateway):
    """Delivers push messages through an HTTP gateway.

    Args:
        url: Gateway endpoint. None disables delivery.
        auth_token: Optional bearer token for the gateway.
        timeout: HTTP timeout in seconds.
    """

    def __init__(
        self,
        url: Optional[str],
        auth_token: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        self._url = url
        self._auth_token = auth_token
        self._timeout = timeout

    async def send_all(self, messages: list[PushMessage]) -> int:
        if not messages:
            return 0
        if not self._url:
            logger.info("Push gateway not configured, dropping %d messages", len(messages))
            return 0

        headers = {}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"

        sent = 0
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            for message in messages:
                try:
                    resp = await client.post(
                        self._url, json=message.to_payload(), headers=headers
                    )
                    resp.raise_for_status()
                    sent += 1
                except httpx.HTTPError as exc:
                    logger.warning(
                        "Push delivery failed for transfer=%s: %s",
                        message.data.get("transferId"),
                        exc,
                    )
        logger.info("Push gateway accepted %d/%d messages", sent, len(messages))
        return sent
