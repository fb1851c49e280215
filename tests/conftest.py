# Shared fixtures: headless Qt platform and an httpx.MockTransport backed
# remote client whose handler each test supplies.

import json
import os
from typing import Callable, List

import httpx
import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from core.remote_client import RemoteStoreClient  # noqa: E402


class Recorder:
    """Collects requests seen by the mock transport."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self._handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture
def make_client():
    clients = []

    def factory(handler, **kwargs):
        recorder = Recorder(handler)
        kwargs.setdefault("sleep", lambda _s: None)
        client = RemoteStoreClient(
            "http://backend.test",
            api_key="anon-key",
            transport=httpx.MockTransport(recorder),
            **kwargs,
        )
        clients.append(client)
        return client, recorder

    yield factory
    for c in clients:
        c.close()
