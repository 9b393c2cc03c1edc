"""
Credential store registry.
"""
from resource_client.credentials.store import (
    CredentialStore, InMemoryCredentialStore, RedisCredentialStore
)

# Registry of available store classes, keyed by CREDENTIAL_BACKEND
CREDENTIAL_STORES = {
    "memory": InMemoryCredentialStore,
    "redis": RedisCredentialStore,
}

# Process-wide store handed out for the "memory" backend
default_credential_store = InMemoryCredentialStore()


def build_credential_store(settings) -> CredentialStore:
    """Instantiate the store selected by settings.CREDENTIAL_BACKEND."""
    backend = settings.CREDENTIAL_BACKEND.lower()
    if backend not in CREDENTIAL_STORES:
        raise ValueError(
            f"Unknown credential backend '{settings.CREDENTIAL_BACKEND}'. "
            f"Available: {sorted(CREDENTIAL_STORES)}"
        )
    if backend == "memory":
        return default_credential_store
    return CREDENTIAL_STORES[backend].from_settings(settings)
