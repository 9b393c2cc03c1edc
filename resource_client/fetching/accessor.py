"""
RemoteResourceAccessor: HTTP access to one remote resource family.

Centralizes base endpoint resolution, bearer auth, JSON decoding and
GET memoization so individual resource types don't repeat request
boilerplate.
"""
import json
import logging
from typing import Any, Dict, Hashable, Optional, Tuple, Type, Union
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError

from resource_client.config.system_settings import SystemSettings, load_system_settings
from resource_client.credentials import build_credential_store
from resource_client.credentials.store import CredentialStore
from resource_client.fetching.cache import CacheEntry, ResourceCache
from resource_client.fetching.errors import DecodeError, HttpError, NetworkError

logger = logging.getLogger(__name__)

ResourceId = Union[str, Tuple[Any, ...]]


class RemoteResourceAccessor:
    """
    Reads and writes resources under {base_url}/{endpoint}.

    Successful GETs are cached per identifier (last write wins).
    Creation responses are never cached.
    """

    def __init__(
        self,
        settings: Optional[SystemSettings] = None,
        base_url: Optional[str] = None,
        endpoint: Optional[str] = None,
        credential_store: Optional[CredentialStore] = None,
        cache: Optional[ResourceCache] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        schema: Optional[Type[BaseModel]] = None,
    ):
        self.settings = settings if settings is not None else load_system_settings()
        self.base_url = (base_url or self.settings.API_URL).rstrip("/")
        self.endpoint = (endpoint or self.settings.RESOURCE_ENDPOINT).strip("/")
        self.timeout = timeout if timeout is not None else self.settings.REQUEST_TIMEOUT_SECONDS
        self.token_key = self.settings.AUTH_TOKEN_KEY
        self.schema = schema

        if credential_store is None:
            credential_store = build_credential_store(self.settings)
        self.credential_store = credential_store
        if cache is None:
            cache = ResourceCache(
                max_entries=self.settings.CACHE_MAX_ENTRIES,
                ttl_seconds=self.settings.CACHE_TTL_SECONDS,
            )
        self.cache = cache
        self.session = session if session is not None else requests.Session()

        logger.info(
            f"RemoteResourceAccessor initialized: "
            f"url={self.base_url}/{self.endpoint}, timeout={self.timeout}, "
            f"cache_max={self.cache.max_entries}, cache_ttl={self.cache.ttl_seconds}"
        )

    def fetch_resource(self, resource_id: ResourceId, refresh: bool = False) -> Any:
        """
        Fetch one resource by identifier.

        Args:
            resource_id: Non-empty string or tuple of path parts.
            refresh: Skip the cache lookup (the entry is still overwritten).

        Returns:
            Decoded JSON body, or a schema instance when a schema is set.

        Raises:
            ValueError: empty identifier
            HttpError / NetworkError / DecodeError
        """
        key = self._validate_id(resource_id)

        if not refresh:
            entry = self.cache.get(key)
            if entry is not None:
                logger.debug(f"RemoteResourceAccessor: cache hit for {key!r}")
                return entry.payload

        url = f"{self._collection_url()}/{self._id_path(key)}"
        payload = self._request("GET", url)
        self.cache.set(key, payload)
        return payload

    def create_resource(self, payload: Any) -> Any:
        """POST payload to the collection and return the decoded response."""
        if isinstance(payload, BaseModel):
            payload = payload.model_dump(mode="json")
        if payload is None:
            # requests drops json=None; send an explicit JSON null
            return self._request("POST", self._collection_url(), data=json.dumps(None))
        return self._request("POST", self._collection_url(), json=payload)

    def get_cached(self, resource_id: ResourceId) -> Optional[CacheEntry]:
        """Peek at the cache without touching the network."""
        return self.cache.peek(self._validate_id(resource_id))

    def clear_cache(self) -> None:
        """Evict all cached entries. In-flight fetches may still write afterwards."""
        self.cache.clear()
        logger.info("RemoteResourceAccessor: cache cleared")

    def get_token(self) -> Optional[str]:
        """Read the bearer token; None when unset or unavailable."""
        try:
            return self.credential_store.get_item(self.token_key)
        except Exception as e:
            logger.warning(f"RemoteResourceAccessor: token lookup failed: {e}")
            return None

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "RemoteResourceAccessor":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _collection_url(self) -> str:
        return f"{self.base_url}/{self.endpoint}"

    @staticmethod
    def _validate_id(resource_id: ResourceId) -> Hashable:
        if isinstance(resource_id, (list, tuple)):
            parts = tuple(resource_id)
            if not parts or any(p is None or str(p) == "" for p in parts):
                raise ValueError(f"Invalid composite resource identifier: {resource_id!r}")
            return parts
        if resource_id is None or str(resource_id) == "":
            raise ValueError("Resource identifier must be non-empty")
        return str(resource_id)

    @staticmethod
    def _id_path(key: Hashable) -> str:
        parts = key if isinstance(key, tuple) else (key,)
        return "/".join(quote(str(p), safe="") for p in parts)

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        else:
            logger.debug("RemoteResourceAccessor: no auth token, sending unauthenticated request")
        return headers

    def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Execute one request and decode the JSON response."""
        logger.info(f"RemoteResourceAccessor: {method} {url}")

        try:
            response = self.session.request(
                method,
                url,
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"RemoteResourceAccessor: {method} {url} failed: {e}")
            raise NetworkError(f"Network error: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"RemoteResourceAccessor: {method} {url} returned {response.status_code}")
            raise HttpError(response.status_code, body=response.text)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"RemoteResourceAccessor: undecodable body from {method} {url}: {e}")
            raise DecodeError(f"Invalid JSON response: {e}") from e

        if self.schema is None:
            return data

        try:
            return self.schema.model_validate(data)
        except ValidationError as e:
            logger.error(f"RemoteResourceAccessor: response from {url} failed {self.schema.__name__} validation")
            raise DecodeError(f"Response does not match {self.schema.__name__}: {e}") from e
