"""
Botgate Client

Owns one gateway WebSocket connection and its session state.
Inbound frames are decoded, handed to the opcode dispatcher and the
resulting effects are applied in order. The heartbeat scheduler and the
reactor both write through `send`, the only place the socket is touched.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pydantic import ValidationError
from websockets.asyncio.client import connect
from websockets.exceptions import ConnectionClosed

if TYPE_CHECKING:
    from websockets.asyncio.client import ClientConnection

from botgate.config import BotgateConfig
from botgate.dispatcher import (
    Effect,
    FetchMessage,
    SendHeartbeat,
    SendIdentify,
    StartHeartbeat,
    dispatch,
)
from botgate.errors import ConnectionClosedError, RestError
from botgate.heartbeat import HeartbeatScheduler
from botgate.models import GatewayFrame, SessionState, heartbeat_frame, identify_frame
from botgate.rest import RestClient

LOG = logging.getLogger(__name__)

# Message content -> reply content
COMMANDS = {
    "!ping": "Pong!",
}


@dataclass
class GatewayClient:
    """
    Client for one gateway connection.

    Usage:
        client = GatewayClient(config)
        await client.connect(await client.rest.get_gateway_url())

    No reconnect is attempted: `connect` returns once the socket closes.
    """

    config: BotgateConfig = field(default_factory=BotgateConfig)
    rest: RestClient | None = None
    heartbeat: HeartbeatScheduler = field(default_factory=HeartbeatScheduler)
    session: SessionState = field(default_factory=SessionState, init=False)
    websocket: "ClientConnection | None" = field(default=None, init=False)

    def __post_init__(self) -> None:
        if self.rest is None:
            self.rest = RestClient(self.config)

    @property
    def is_open(self) -> bool:
        return self.websocket is not None

    async def connect(self, url: str) -> None:
        """Open the socket and process frames until it closes."""
        LOG.info("Connecting to gateway at %s", url)

        # Keepalive is the protocol heartbeat, not websocket pings.
        async with connect(url, ping_interval=None) as websocket:
            await self.run(websocket)

    async def run(self, websocket: "ClientConnection") -> None:
        """Drive an already opened connection through open, message and close."""
        self.websocket = websocket
        self.session = SessionState()
        LOG.info("Gateway connection opened")

        try:
            async for message in websocket:
                await self.handle_message(message)
        except (ConnectionClosed, ConnectionClosedError) as e:
            LOG.warning("Gateway connection lost: %s", e)
        finally:
            await self.on_close(websocket.close_code, websocket.close_reason)

    async def on_close(self, code: int | None, reason: str | None) -> None:
        # Stop the heartbeat before the handle goes away.
        await self.heartbeat.stop()
        self.websocket = None
        self.session = SessionState()
        LOG.info("Gateway connection closed: %s, %s", code, reason or "no reason")

    async def close(self) -> None:
        """Close the connection from our side."""
        await self.heartbeat.stop()
        if self.websocket is not None:
            await self.websocket.close()

    async def handle_message(self, raw: str | bytes) -> None:
        """Decode one inbound message, dispatch it and apply its effects."""
        try:
            frame = GatewayFrame.model_validate_json(raw)
        except ValidationError:
            LOG.exception("Dropping undecodable gateway message: %r", raw)
            return

        LOG.debug("Received frame op=%s t=%s s=%s", frame.op, frame.t, frame.s)

        self.session = self.session.model_copy(update={"sequence": frame.s})

        try:
            transition = dispatch(frame, self.session)
        except ValidationError:
            LOG.exception("Dropping frame with invalid payload (op=%s, t=%s)", frame.op, frame.t)
            return

        self.session = transition.session
        for effect in transition.effects:
            await self.apply(effect)

    async def apply(self, effect: Effect) -> None:
        if isinstance(effect, SendHeartbeat):
            await self.send_heartbeat()
        elif isinstance(effect, SendIdentify):
            await self.identify()
        elif isinstance(effect, StartHeartbeat):
            self.heartbeat.start(effect.interval_seconds, self.send_heartbeat)
        elif isinstance(effect, FetchMessage):
            await self.on_message_created(effect.channel_id, effect.message_id)
        else:
            raise TypeError(f"Unknown effect: {effect!r}")

    async def send(self, frame: GatewayFrame) -> None:
        """
        Serialize a frame and write it to the connection.

        Raises:
            ConnectionClosedError: If there is no open connection
        """
        websocket = self.websocket
        if websocket is None:
            raise ConnectionClosedError()

        LOG.debug("Sending frame op=%s", frame.op)
        try:
            await websocket.send(frame.to_json())
        except ConnectionClosed as e:
            raise ConnectionClosedError(str(e)) from e

    async def send_heartbeat(self) -> None:
        """Send a heartbeat carrying the sequence number known right now."""
        LOG.debug("Sending heartbeat (s=%s)", self.session.sequence)
        try:
            await self.send(heartbeat_frame(self.session.sequence))
        except ConnectionClosedError as e:
            LOG.warning("Skipping heartbeat: %s", e.reason)

    async def identify(self) -> None:
        LOG.info("Sending identify")
        await self.send(identify_frame(self.config))

    async def on_message_created(self, channel_id: str, message_id: str) -> None:
        """Fetch a new message and answer it when it is a known command."""
        try:
            message = await self.rest.get_message(channel_id, message_id)
            reply = COMMANDS.get(message.content)
            if reply is None:
                return

            LOG.info("Replying to %s in channel %s", message.content, channel_id)
            await self.rest.create_message(channel_id, reply)
        except RestError as e:
            LOG.error("Failed to handle message %s in channel %s: %s", message_id, channel_id, e)
