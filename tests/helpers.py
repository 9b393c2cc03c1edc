import json

import requests

from resource_client.config.system_settings import SystemSettings
from resource_client.credentials.store import InMemoryCredentialStore
from resource_client.fetching.accessor import RemoteResourceAccessor


def make_response(status=200, body=None, raw=None, url="http://api.test/endpoint"):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    if raw is not None:
        response._content = raw
    else:
        response._content = json.dumps(body).encode("utf-8")
    return response


class FakeSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        # Last outcome repeats once the queue is drained
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


def make_settings(**overrides) -> SystemSettings:
    overrides.setdefault("API_URL", "http://api.test")
    return SystemSettings(_env_file=None, **overrides)


def make_store(token="secret-token") -> InMemoryCredentialStore:
    return InMemoryCredentialStore({"authToken": token} if token else {})


def make_accessor(*outcomes, settings=None, **kwargs):
    """Accessor wired to a FakeSession; returns (accessor, session)."""
    session = FakeSession(*outcomes)
    kwargs.setdefault("credential_store", make_store())
    accessor = RemoteResourceAccessor(settings=settings or make_settings(), session=session, **kwargs)
    return accessor, session
