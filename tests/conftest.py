"""Shared fixtures: a test identity and mock ACM servers"""

import httpx
import pytest

from acm_watch.common.config import GroupIdentity

@pytest.fixture
def identity():
    return GroupIdentity(
        access_key="test-ak",
        secret_key="test-sk",
        namespace="ns1",
        group="group1",
    )


class FakeAcm:
    """
    In-memory address server + config server.

    poll_responses is consumed one item per long-poll; when it runs out
    the poll answers "" (nothing changed).
    """

    def __init__(self, server_ip: str = "10.0.0.1"):
        self.address_text = f"{server_ip}\n"
        self.poll_responses: list = []
        self.configs: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/diamond-server/diamond":
            return httpx.Response(200, text=self.address_text)

        if path == "/diamond-server/config.co" and request.method == "POST":
            if not self.poll_responses:
                return httpx.Response(200, text="")
            reply = self.poll_responses.pop(0)
            if isinstance(reply, httpx.Response):
                return reply
            return httpx.Response(200, text=reply)

        if path == "/diamond-server/config.co" and request.method == "GET":
            data_id = request.url.params["dataId"]
            if data_id not in self.configs:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, content=self.configs[data_id])

        return httpx.Response(404)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def requests_to(self, path: str, method: str | None = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if r.url.path == path and (method is None or r.method == method)
        ]


@pytest.fixture
def fake_acm():
    return FakeAcm()
