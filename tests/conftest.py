"""Pytest fixtures for botgate tests."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from botgate.client import GatewayClient
from botgate.config import BotgateConfig
from botgate.heartbeat import HeartbeatScheduler
from botgate.models import Message
from botgate.rest import RestClient


class FakeWebSocket:
    """Stands in for a websockets client connection."""

    def __init__(self, messages=()):
        self.messages = list(messages)
        self.sent: list[str] = []
        self.close_code: int | None = None
        self.close_reason: str | None = None
        self.closed = False

    async def send(self, data: str) -> None:
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True

    def __aiter__(self):
        return self.iterate()

    async def iterate(self):
        for message in self.messages:
            yield message
        self.close_code = 1000
        self.close_reason = "bye"

    def frames(self) -> list[dict]:
        return [json.loads(data) for data in self.sent]


@pytest.fixture
def config():
    return BotgateConfig(token="test-token", activity_name="tests")


@pytest.fixture
def rest():
    """A RestClient whose calls are mocked out."""
    mock = MagicMock(spec=RestClient)
    mock.get_message = AsyncMock(return_value=Message(content="hello"))
    mock.create_message = AsyncMock(return_value={"id": "reply"})
    return mock


@pytest.fixture
def websocket():
    return FakeWebSocket()


@pytest_asyncio.fixture
async def client(config, rest, websocket):
    """A client attached to a fake socket, with a heartbeat that never fires on its own."""
    gateway = GatewayClient(config, rest, HeartbeatScheduler(jitter=lambda: 1.0))
    gateway.websocket = websocket
    yield gateway
    await gateway.heartbeat.stop()
