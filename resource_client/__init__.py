"""
Remote resource client.

- fetching: HTTP accessor, bounded cache and error taxonomy
- binding: fetch lifecycle state exposed to consumers
- credentials: pluggable stores for the bearer token
- config: environment-driven settings
"""
from resource_client.fetching.accessor import RemoteResourceAccessor
from resource_client.fetching.errors import (
    ResourceError, NetworkError, HttpError, DecodeError
)
from resource_client.binding.binding import StatefulFetchBinding
from resource_client.binding.state import FetchState, FetchStatus

__all__ = [
    "RemoteResourceAccessor",
    "StatefulFetchBinding",
    "FetchState",
    "FetchStatus",
    "ResourceError",
    "NetworkError",
    "HttpError",
    "DecodeError",
]
