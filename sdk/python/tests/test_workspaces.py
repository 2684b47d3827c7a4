"""RBAC workspace lookup."""

import httpx
import pytest

from kessel_access_check import ApiError, NotFoundError, fetch_default_workspace, fetch_root_workspace

RBAC = "https://console.example.com"

ROOT = {
    "id": "root-ws-id",
    "type": "root",
    "name": "Root Workspace",
    "created": "2024-01-01T00:00:00Z",
    "modified": "2024-01-01T00:00:00Z",
}
DEFAULT = {
    "id": "default-ws-id",
    "type": "default",
    "name": "Default Workspace",
    "created": "2024-01-01T00:00:00Z",
    "modified": "2024-01-01T00:00:00Z",
    "parent_id": "root-ws-id",
}


def listing(*workspaces: dict) -> dict:
    return {
        "meta": {"count": len(workspaces), "limit": 10, "offset": 0},
        "links": {"first": None, "next": None, "previous": None, "last": None},
        "data": list(workspaces),
    }


def async_client(handler, requests: list) -> httpx.AsyncClient:
    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(record))


@pytest.mark.asyncio
async def test_fetch_root_workspace() -> None:
    requests: list = []
    client = async_client(lambda r: httpx.Response(200, json=listing(ROOT)), requests)

    workspace = await fetch_root_workspace(RBAC, client=client)

    assert workspace.id == "root-ws-id"
    assert workspace.type == "root"
    assert requests[0].method == "GET"
    assert str(requests[0].url) == f"{RBAC}/api/rbac/v2/workspaces/?type=root"


@pytest.mark.asyncio
async def test_fetch_default_workspace_includes_parent() -> None:
    requests: list = []
    client = async_client(lambda r: httpx.Response(200, json=listing(DEFAULT)), requests)

    workspace = await fetch_default_workspace(RBAC, client=client)

    assert workspace.id == "default-ws-id"
    assert workspace.parent_id == "root-ws-id"
    assert requests[0].url.params["type"] == "default"


@pytest.mark.asyncio
async def test_trailing_slashes_are_stripped() -> None:
    requests: list = []
    client = async_client(lambda r: httpx.Response(200, json=listing(ROOT)), requests)

    await fetch_root_workspace(f"{RBAC}///", client=client)

    assert str(requests[0].url) == f"{RBAC}/api/rbac/v2/workspaces/?type=root"


@pytest.mark.asyncio
async def test_first_workspace_wins() -> None:
    other = dict(ROOT, id="second-root")
    client = async_client(lambda r: httpx.Response(200, json=listing(ROOT, other)), [])

    workspace = await fetch_root_workspace(RBAC, client=client)

    assert workspace.id == "root-ws-id"


@pytest.mark.asyncio
@pytest.mark.parametrize("fetch,kind", [(fetch_root_workspace, "root"), (fetch_default_workspace, "default")])
async def test_empty_listing_is_not_found(fetch, kind) -> None:
    client = async_client(lambda r: httpx.Response(200, json=listing()), [])

    with pytest.raises(NotFoundError) as exc_info:
        await fetch(RBAC, client=client)

    assert exc_info.value.to_dict() == {
        "code": 404,
        "message": f"No {kind} workspace found in response",
        "details": [],
    }


@pytest.mark.asyncio
async def test_http_error_with_json_body() -> None:
    client = async_client(lambda r: httpx.Response(403, json={"code": 403, "message": "Forbidden", "details": []}), [])

    with pytest.raises(ApiError) as exc_info:
        await fetch_root_workspace(RBAC, client=client)

    assert exc_info.value.code == 403
    assert exc_info.value.message == "Forbidden"


@pytest.mark.asyncio
async def test_http_error_with_text_body() -> None:
    client = async_client(lambda r: httpx.Response(502, text="Bad Gateway"), [])

    with pytest.raises(ApiError) as exc_info:
        await fetch_default_workspace(RBAC, client=client)

    assert exc_info.value.to_dict() == {"code": 502, "message": "Bad Gateway", "details": []}


@pytest.mark.asyncio
async def test_auth_headers_are_merged() -> None:
    requests: list = []
    client = async_client(lambda r: httpx.Response(200, json=listing(ROOT)), requests)

    await fetch_root_workspace(RBAC, headers={"Authorization": "Bearer abc"}, client=client)

    assert requests[0].headers["Authorization"] == "Bearer abc"
    assert requests[0].headers["Content-Type"] == "application/json"


@pytest.mark.asyncio
async def test_client_workspace_lookup_uses_rbac_base(make_client) -> None:
    client, recorder = make_client(lambda r: httpx.Response(200, json=listing(DEFAULT)))

    workspace = await client.fetch_default_workspace()

    assert workspace.id == "default-ws-id"
    assert recorder.requests[0].url.path == "/api/rbac/v2/workspaces/"
