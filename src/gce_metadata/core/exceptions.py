from typing import Optional


class MetadataError(Exception):
    """Base class for failures talking to the metadata server."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class TransportError(MetadataError):
    """
    The request never produced a usable response: DNS failure, connection
    refused, timeout or a broken status line. The original exception is
    available as ``__cause__``.
    """


class InvalidResponse(MetadataError):
    """The server answered with a status other than 200."""

    def __init__(self, status_code: int, reason: str, url: Optional[str] = None):
        super().__init__(f"Invalid response: {status_code} {reason}", url=url)
        self.status_code = status_code
        self.reason = reason


class ReadFailure(MetadataError):
    """The status line was fine but the body could not be read."""


class EmptyResponse(MetadataError):
    """The server answered 200 with a zero-length body."""
