"""
Opcode Dispatcher

Decides how the client reacts to an inbound gateway frame.
Dispatching performs no I/O: it returns the next session snapshot together
with the effects the client must apply, in order.

Handshake ordering: Identify is not sent on Hello. It is sent on the first
Heartbeat Ack seen while unidentified, or right away on Invalid Session.
"""

import logging
from dataclasses import dataclass, field

from botgate.models import (
    GatewayFrame,
    HelloPayload,
    MessageCreatePayload,
    Opcode,
    ReadyPayload,
    SessionState,
)

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendHeartbeat:
    pass


@dataclass(frozen=True)
class SendIdentify:
    pass


@dataclass(frozen=True)
class StartHeartbeat:
    interval_seconds: float


@dataclass(frozen=True)
class FetchMessage:
    channel_id: str
    message_id: str


Effect = SendHeartbeat | SendIdentify | StartHeartbeat | FetchMessage


@dataclass(frozen=True)
class Transition:
    session: SessionState
    effects: list[Effect] = field(default_factory=list)


def dispatch(frame: GatewayFrame, session: SessionState) -> Transition:
    """
    Map an inbound frame and the current session to a transition.

    Raises:
        pydantic.ValidationError: If the frame payload does not match its opcode
    """
    try:
        op = Opcode(frame.op)
    except ValueError:
        LOG.warning("Unhandled opcode %s: %r", frame.op, frame.d)
        return Transition(session)

    if op is Opcode.DISPATCH:
        return on_dispatch(frame, session)
    if op is Opcode.HEARTBEAT:
        LOG.debug("Server requested a heartbeat")
        return Transition(session, [SendHeartbeat()])
    if op is Opcode.INVALID_SESSION:
        LOG.error("Invalid session, reidentifying")
        return Transition(session, [SendIdentify()])
    if op is Opcode.HELLO:
        return on_hello(frame, session)
    if op is Opcode.HEARTBEAT_ACK:
        return on_heartbeat_ack(session)

    # Opcodes we only ever send, such as IDENTIFY.
    LOG.warning("Unhandled opcode %s: %r", frame.op, frame.d)
    return Transition(session)


def on_dispatch(frame: GatewayFrame, session: SessionState) -> Transition:
    LOG.debug("Dispatch %s (s=%s)", frame.t, frame.s)

    if frame.t == "READY":
        ready = ReadyPayload.model_validate(frame.d)
        LOG.info("Bot is ready, session %s", ready.session_id)
        return Transition(
            session.model_copy(
                update={
                    "resume_gateway_url": ready.resume_gateway_url,
                    "session_id": ready.session_id,
                }
            )
        )

    if frame.t == "MESSAGE_CREATE":
        message = MessageCreatePayload.model_validate(frame.d)
        return Transition(session, [FetchMessage(message.channel_id, message.id)])

    return Transition(session)


def on_hello(frame: GatewayFrame, session: SessionState) -> Transition:
    hello = HelloPayload.model_validate(frame.d)
    interval = hello.heartbeat_interval / 1000
    LOG.info("Hello received, heartbeat interval %.3fs", interval)

    return Transition(
        session.model_copy(update={"heartbeat_interval_seconds": interval}),
        [SendHeartbeat(), StartHeartbeat(interval)],
    )


def on_heartbeat_ack(session: SessionState) -> Transition:
    if session.connected:
        LOG.debug("Heartbeat acknowledged")
        return Transition(session)

    LOG.debug("First heartbeat acknowledged, identifying")
    return Transition(session.model_copy(update={"connected": True}), [SendIdentify()])
