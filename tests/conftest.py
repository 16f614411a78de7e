"""Pytest shared fixtures for remote directory tests."""
import json
import pathlib
import sys
from typing import Callable, Optional, Union

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers

from user_federation.config.settings import DirectoryClientConfig
from user_federation.core.remote import RemoteUserClient

DATA_DIR = ROOT / "tests" / "data"
BASE_URL = "https://directory.example.com/api"


# ─────────────────────────────────────────────────────────────────────────────
# Stub transport
# ─────────────────────────────────────────────────────────────────────────────
class StubAdapter(BaseAdapter):
    """Transport adapter that records prepared requests and replays canned responses.

    Each queued item is either an Exception (raised from send) or a
    (status_code, body[, content_type]) tuple; the last item repeats once
    the queue drains.
    """

    def __init__(self):
        super().__init__()
        self.requests: list[requests.PreparedRequest] = []
        self.sent_kwargs: list[dict] = []
        self._queue: list[Union[Exception, tuple]] = [(200, b"")]

    def queue(self, *items) -> "StubAdapter":
        self._queue = list(items)
        return self

    def send(self, request, **kwargs):
        self.requests.append(request)
        self.sent_kwargs.append(kwargs)
        item = self._queue.pop(0) if len(self._queue) > 1 else self._queue[0]
        if isinstance(item, Exception):
            raise item

        status_code, body = item[0], item[1]
        content_type = item[2] if len(item) > 2 else "application/json"
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")

        resp = requests.Response()
        resp.status_code = status_code
        resp.reason = "OK" if status_code < 400 else "Error"
        resp._content = body
        resp.headers = CaseInsensitiveDict({"Content-Type": content_type})
        resp.encoding = get_encoding_from_headers(resp.headers) or "utf-8"
        resp.url = request.url
        resp.request = request
        return resp

    def close(self):
        pass

    @property
    def last(self) -> requests.PreparedRequest:
        return self.requests[-1]


def make_config(**overrides) -> DirectoryClientConfig:
    base = dict(
        base_url=BASE_URL,
        find_user_path="/users/find",
        verify_user_path="/users/verify",
        search_user_path="/users/search",
        count_user_path="/users/count",
        authorization="Bearer static-token",
        headers_to_forward=(),
        debug_logging=False,
        timeout=3.0,
    )
    base.update(overrides)
    return DirectoryClientConfig(**base)


@pytest.fixture
def stub_adapter() -> StubAdapter:
    return StubAdapter()


@pytest.fixture
def client_factory(stub_adapter) -> Callable[..., RemoteUserClient]:
    """Build a RemoteUserClient whose session routes through the stub adapter."""

    def factory(header_source: Optional[Callable] = None, **overrides) -> RemoteUserClient:
        session = requests.Session()
        session.trust_env = False
        session.mount("https://", stub_adapter)
        session.mount("http://", stub_adapter)
        return RemoteUserClient(make_config(**overrides), header_source=header_source, session=session)

    return factory


@pytest.fixture
def client(client_factory) -> RemoteUserClient:
    return client_factory()


@pytest.fixture
def identity_adapter_payload() -> list:
    return json.loads((DATA_DIR / "identity-adapter-response.json").read_text())
