"""
REST collaborator

Thin async wrappers over the vendor REST API: gateway endpoint discovery,
fetching a message and posting a new one. No retries and no timeouts;
every failure surfaces as RestError.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import ValidationError

from botgate.config import BotgateConfig
from botgate.errors import RestError
from botgate.models import Message

LOG = logging.getLogger(__name__)


@dataclass
class RestClient:
    """
    Client for the authenticated REST surface.

    Usage:
        rest = RestClient(config)
        message = await rest.get_message("channel-id", "message-id")
        await rest.create_message("channel-id", "Pong!")
        await rest.aclose()
    """

    config: BotgateConfig = field(default_factory=BotgateConfig)
    transport: httpx.AsyncBaseTransport | None = field(default=None, kw_only=True)
    http: httpx.AsyncClient | None = field(default=None, init=False)

    def client(self) -> httpx.AsyncClient:
        if self.http is None or self.http.is_closed:
            self.http = httpx.AsyncClient(
                base_url=self.config.api_base_url,
                headers={"Authorization": self.config.authorization()},
                timeout=httpx.Timeout(None),
                transport=self.transport,
            )
        return self.http

    async def aclose(self) -> None:
        if self.http is not None:
            await self.http.aclose()
            self.http = None

    async def request(self, method: str, path: str, json: dict[str, Any] | None = None) -> Any:
        """
        Perform a request and return the decoded JSON body.

        Raises:
            RestError: On transport failure, non-success status or a body
                that is not JSON
        """
        try:
            response = await self.client().request(method, path, json=json)
        except httpx.HTTPError as e:
            raise RestError(method, path, str(e)) from e

        LOG.debug("Request %s %s returned %s", method, path, response.status_code)

        if response.is_error:
            raise RestError(method, path, response.text, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise RestError(method, path, "invalid JSON body", status_code=response.status_code) from e

    async def get_gateway_url(self) -> str:
        """Discover the gateway endpoint, with version and encoding applied."""
        data = await self.request("GET", "/gateway/bot")
        if not isinstance(data, dict) or "url" not in data:
            raise RestError("GET", "/gateway/bot", "response has no url")
        return self.config.gateway_query(data["url"])

    async def get_message(self, channel_id: str, message_id: str) -> Message:
        path = f"/channels/{channel_id}/messages/{message_id}"
        data = await self.request("GET", path)
        try:
            return Message.model_validate(data)
        except ValidationError as e:
            raise RestError("GET", path, "unexpected message shape") from e

    async def create_message(self, channel_id: str, content: str) -> Any:
        return await self.request("POST", f"/channels/{channel_id}/messages", json={"content": content})
