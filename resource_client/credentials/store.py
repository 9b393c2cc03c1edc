"""
Credential stores for the bearer token.

Stores are opaque key-value collaborators: the accessor only ever
calls get_item(). Writing and expiring tokens is the owner's concern.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

import redis

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Key-value contract mirroring browser storage."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when unset."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove_item(self, key: str) -> None:
        pass


class InMemoryCredentialStore(CredentialStore):
    """Process-local dict store."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class RedisCredentialStore(CredentialStore):
    """
    Redis-backed store, shared across processes.

    Reads degrade to None when Redis is unreachable so token lookup
    never raises; writes propagate errors to the caller.
    """

    def __init__(self, client: "redis.Redis", prefix: str = "credentials:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_settings(cls, settings) -> "RedisCredentialStore":
        client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        logger.info(f"RedisCredentialStore: using {settings.REDIS_URL}")
        return cls(client, prefix=settings.CREDENTIAL_PREFIX)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get_item(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(self._key(key))
        except redis.RedisError as e:
            logger.warning(f"RedisCredentialStore: lookup of '{key}' failed: {e}")
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set_item(self, key: str, value: str) -> None:
        self.client.set(self._key(key), value)

    def remove_item(self, key: str) -> None:
        self.client.delete(self._key(key))
