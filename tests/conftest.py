from __future__ import annotations

from collections import deque
import json
import threading
from typing import Any, Optional
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests

from graphjs_client.config import AppSettings
from graphjs_client.core import ApiClientCore
from graphjs_client.http import HttpClient
from graphjs_client.services import build_service

TEST_BASE_URL = "http://api.graphjs.test:1338/"
TEST_PUBLIC_ID = "79982844-6a27-4b3b-b77f-419a79be0e10"


def make_response(status_code: int = 200, body: Any = None, url: str = TEST_BASE_URL) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if body is None:
        content = b""
    elif isinstance(body, (bytes, str)):
        content = body if isinstance(body, bytes) else body.encode("utf-8")
    else:
        content = json.dumps(body).encode("utf-8")
    response._content = content
    return response


class RecordingSession(requests.Session):
    """Stands in for the network: records every GET and serves canned replies.

    Replies come from ``routes`` (keyed by backend method) when one matches,
    otherwise from the FIFO filled through :meth:`queue`. A reply may be a
    ``Response``, a JSON-able body, an exception to raise, or a callable
    taking the URL.
    """

    def __init__(self) -> None:
        super().__init__()
        self.urls: list[str] = []
        self.routes: dict[str, Any] = {}
        self._queued: deque = deque()
        self._lock = threading.Lock()

    @property
    def call_count(self) -> int:
        with self._lock:
            return len(self.urls)

    def queue(self, *replies: Any) -> None:
        self._queued.extend(replies)

    def route(self, method: str, reply: Any) -> None:
        self.routes[method] = reply

    def get(self, url, **kwargs):
        with self._lock:
            self.urls.append(url)
        method = urlsplit(url).path.rsplit("/", 1)[-1]
        if method in self.routes:
            reply = self.routes[method]
        else:
            reply = self._queued.popleft()
        if callable(reply):
            reply = reply(url)
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, requests.Response):
            return reply
        return make_response(200, reply, url)

    def last_params(self) -> dict[str, str]:
        return query_params(self.urls[-1])

    def params_for(self, method: str) -> Optional[dict[str, str]]:
        for url in reversed(self.urls):
            if urlsplit(url).path.endswith("/" + method):
                return query_params(url)
        return None


def query_params(url: str) -> dict[str, str]:
    return dict(parse_qsl(urlsplit(url).query, keep_blank_values=True))


@pytest.fixture()
def settings() -> AppSettings:
    return AppSettings(
        base_url=TEST_BASE_URL,
        public_id=TEST_PUBLIC_ID,
        retry_attempts=0,
        backoff_seconds=0,
    )


@pytest.fixture()
def recording_session() -> RecordingSession:
    return RecordingSession()


@pytest.fixture()
def http_client(settings, recording_session) -> HttpClient:
    return HttpClient(settings, session=recording_session)


@pytest.fixture()
def core(settings, http_client):
    client = ApiClientCore(settings, http_client=http_client)
    yield client
    client.close()


@pytest.fixture()
def service(settings, http_client):
    graphjs = build_service(settings, http_client=http_client)
    yield graphjs
    graphjs.close()

