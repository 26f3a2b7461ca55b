"""Shared test fixtures."""

import json
from typing import Any, List, Optional, Union

import httpx
import pytest

from payjp import PayjpClient, PayjpConfig

Scripted = Union[Exception, tuple]


class ScriptedTransport(httpx.BaseTransport):
    """
    Replays queued (status, body) pairs or exceptions, repeating the last entry
    once the queue runs out. Remembers the last request it saw and the
    headers of every request.
    """

    def __init__(self, *responses: Scripted):
        self.responses: List[Scripted] = list(responses) or [(200, {})]
        self.calls = 0
        self.method: Optional[str] = None
        self.url: Optional[str] = None
        self.headers: Optional[httpx.Headers] = None
        self.body: bytes = b""
        self.sent_headers: List[httpx.Headers] = []

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        self.method = request.method
        self.url = str(request.url)
        self.headers = request.headers
        self.sent_headers.append(request.headers)
        self.body = request.read()

        entry = self.responses[min(self.calls, len(self.responses)) - 1]
        if isinstance(entry, Exception):
            raise entry
        status, body = entry[0], entry[1]
        headers = entry[2] if len(entry) > 2 else {}
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        return httpx.Response(status, content=body, headers=headers, request=request)

    @property
    def form(self) -> str:
        return self.body.decode("utf-8")


def make_client(transport: ScriptedTransport, **config: Any) -> PayjpClient:
    cfg = PayjpConfig(api_key="sk_test_xxx", base_url="https://api.pay.jp/v1", **config)
    return PayjpClient(cfg, transport=transport)


@pytest.fixture
def transport():
    return ScriptedTransport()


@pytest.fixture
def client(transport):
    with make_client(transport) as c:
        yield c


@pytest.fixture
def no_sleep(mocker):
    """Patch out retry sleeps; the mock records requested delays."""
    return mocker.patch("payjp.client.time.sleep")


def error_body(status: int, code: str = "code", message: str = "message", type: str = "client_error", param: Optional[str] = None) -> dict:
    err = {"code": code, "message": message, "status": status, "type": type}
    if param is not None:
        err["param"] = param
    return {"error": err}
