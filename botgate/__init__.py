"""
botgate - Gateway client for a real-time bot event gateway

Keeps a persistent WebSocket session alive: performs the handshake,
sends jittered heartbeats and reacts to control and dispatch frames.
"""

from botgate.client import GatewayClient
from botgate.config import BotgateConfig
from botgate.dispatcher import Transition, dispatch
from botgate.errors import (
    BotgateError,
    ConnectionClosedError,
    RestError,
)
from botgate.heartbeat import HeartbeatScheduler
from botgate.models import (
    GatewayFrame,
    Opcode,
    SessionState,
)
from botgate.rest import RestClient

__all__ = [
    # Client
    "GatewayClient",
    "HeartbeatScheduler",
    "RestClient",
    # Dispatch
    "Transition",
    "dispatch",
    # Models
    "BotgateConfig",
    "GatewayFrame",
    "Opcode",
    "SessionState",
    # Errors
    "BotgateError",
    "ConnectionClosedError",
    "RestError",
]

__version__ = "0.1.0"
