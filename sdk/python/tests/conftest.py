"""Shared fixtures: a client whose HTTP traffic goes to an in-process handler."""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Optional, Union

import httpx
import pytest

from kessel_access_check import (
    AccessCheckClient,
    AccessCheckConfig,
    BulkCheckConfig,
    ReporterReference,
    Resource,
)

BASE_URL = "https://api.example.com"
API_PATH = "/api/kessel/v1beta2"
CHECKSELF_URL = f"{BASE_URL}{API_PATH}/checkself"
CHECKSELF_BULK_URL = f"{BASE_URL}{API_PATH}/checkselfbulk"

Handler = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class Recorder:
    """Records requests and delegates to a handler."""

    def __init__(self, handler: Handler) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resp = self.handler(request)
        if not isinstance(resp, httpx.Response):
            resp = await resp
        return resp

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests]


def make_resource(i: int, **extra: Any) -> Resource:
    return Resource(id=f"ws-{i}", type="workspace", reporter=ReporterReference(type="rbac"), **extra)


def make_resources(count: int) -> list[Resource]:
    return [make_resource(i) for i in range(count)]


def bulk_ok(request: httpx.Request, token: Optional[str] = None, allowed: str = "ALLOWED_TRUE") -> httpx.Response:
    body = json.loads(request.content)
    payload: dict[str, Any] = {
        "pairs": [{"request": item, "item": {"allowed": allowed}} for item in body["items"]],
    }
    if token is not None:
        payload["consistencyToken"] = {"token": token}
    return httpx.Response(200, json=payload)


@pytest.fixture
def make_client():
    """Factory building an AccessCheckClient wired to ``handler``."""

    def factory(handler: Handler, bulk_request_limit: Optional[int] = None) -> tuple[AccessCheckClient, Recorder]:
        recorder = Recorder(handler)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        config = AccessCheckConfig(
            base_url=BASE_URL,
            api_path=API_PATH,
            bulk_check_config=BulkCheckConfig(bulk_request_limit=bulk_request_limit),
        )
        client = AccessCheckClient(config, client=http_client, rbac_base_url=BASE_URL)
        return client, recorder

    return factory
