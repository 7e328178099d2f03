"""Wire and session models for the gateway protocol."""

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from botgate.config import BotgateConfig


class Opcode(IntEnum):
    DISPATCH = 0
    HEARTBEAT = 1
    IDENTIFY = 2
    INVALID_SESSION = 9
    HELLO = 10
    HEARTBEAT_ACK = 11


class GatewayFrame(BaseModel):
    """
    A single gateway message in either direction.

    `s` and `t` are only present on dispatch frames.
    """

    op: int
    d: Any = None
    s: int | None = None
    t: str | None = None

    def to_json(self) -> str:
        """Serialize for the wire, keeping `d` even when it is null."""
        unset = {name for name in ("s", "t") if getattr(self, name) is None}
        return self.model_dump_json(exclude=unset)


class HelloPayload(BaseModel):
    heartbeat_interval: int


class ReadyPayload(BaseModel):
    session_id: str
    resume_gateway_url: str


class MessageCreatePayload(BaseModel):
    id: str
    channel_id: str


class Message(BaseModel):
    """Message object returned by the REST API. Only `content` is relied upon."""

    content: str
    id: str | None = None
    channel_id: str | None = None


class ConnectionProperties(BaseModel):
    os: str
    browser: str
    device: str


class Activity(BaseModel):
    name: str
    type: int = 0


class Presence(BaseModel):
    status: str = "online"
    afk: bool = False
    activities: list[Activity] = Field(default_factory=list)


class IdentifyPayload(BaseModel):
    token: str
    intents: int
    properties: ConnectionProperties
    presence: Presence

    @classmethod
    def from_config(cls, config: BotgateConfig) -> "IdentifyPayload":
        return cls(
            token=config.token,
            intents=config.intents,
            properties=ConnectionProperties(
                os=config.os,
                browser=config.browser,
                device=config.device,
            ),
            presence=Presence(
                status=config.status,
                afk=False,
                activities=[Activity(name=config.activity_name, type=config.activity_type)],
            ),
        )


class SessionState(BaseModel):
    """
    Mutable facts of one connection attempt, kept as immutable snapshots.

    A new snapshot is produced with `model_copy(update=...)` whenever a
    frame changes something.
    """

    model_config = ConfigDict(frozen=True)

    sequence: int | None = None
    connected: bool = False
    heartbeat_interval_seconds: float | None = None
    resume_gateway_url: str | None = None
    session_id: str | None = None


def heartbeat_frame(sequence: int | None) -> GatewayFrame:
    return GatewayFrame(op=int(Opcode.HEARTBEAT), d=sequence)


def identify_frame(config: BotgateConfig) -> GatewayFrame:
    return GatewayFrame(op=int(Opcode.IDENTIFY), d=IdentifyPayload.from_config(config).model_dump())
