"""Errors raised while talking to the Fireworq API."""


class QueueStatError(Exception):
    """Base class for queuestat failures."""

    def __init__(self, message: str, *, url: str) -> None:
        super().__init__(message)
        self.url = url


class TransportError(QueueStatError):
    """Connection, timeout or HTTP status failure."""

    def __init__(
        self, message: str, *, url: str, status_code: int | None = None
    ) -> None:
        super().__init__(message, url=url)
        self.status_code = status_code


class DecodeError(QueueStatError):
    """Response body is not JSON or does not match the expected shape."""
