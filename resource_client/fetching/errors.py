"""Error taxonomy raised by the resource accessor."""
from typing import Optional


class ResourceError(Exception):
    """Base class for accessor failures."""
    pass


class NetworkError(ResourceError):
    """Transport-level failure: no response was received."""
    pass


class HttpError(ResourceError):
    """A response arrived with a non-success status code."""

    def __init__(self, status: int, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(f"HTTP error! status: {status}")


class DecodeError(ResourceError):
    """Response body is not valid JSON or does not fit the expected shape."""
    pass
