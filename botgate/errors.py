"""Exceptions raised by botgate components."""


class BotgateError(Exception):
    """Base class for all botgate errors."""


class ConnectionClosedError(BotgateError):
    """Raised when a frame is sent without an open gateway connection."""

    def __init__(self, reason: str = "no open gateway connection") -> None:
        self.reason = reason
        super().__init__(reason)


class RestError(BotgateError):
    """Raised when a REST call fails or returns an unusable response."""

    def __init__(self, method: str, path: str, detail: str, status_code: int | None = None) -> None:
        self.method = method
        self.path = path
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{method} {path} failed: {detail}")
