"""Result-state coordinator lifecycle and cancellation."""

import asyncio

import httpx
import pytest

from kessel_access_check import (
    ApiError,
    BulkSameRelation,
    BulkSelfAccessCheckResult,
    CancellationToken,
    CheckState,
    ConsistencyToken,
    SelfAccessCheckResult,
    SingleCheck,
)

from conftest import bulk_ok, make_resource, make_resources


@pytest.mark.asyncio
async def test_single_success_lifecycle(make_client) -> None:
    client, _ = make_client(lambda r: httpx.Response(200, json={"allowed": "ALLOWED_TRUE"}))
    resource = make_resource(1)
    coordinator = client.coordinator(SingleCheck(resource=resource, relation="view"))
    seen: list[tuple[bool, bool]] = []
    coordinator.subscribe(lambda result: seen.append((result.loading, result.data is not None)))

    assert coordinator.state is CheckState.IDLE
    result = await coordinator.run()

    assert coordinator.state is CheckState.SUCCESS
    assert isinstance(result, SelfAccessCheckResult)
    assert result.loading is False
    assert result.error is None
    assert result.data.allowed is True
    assert result.data.resource is resource
    assert seen == [(True, False), (False, True)]


@pytest.mark.asyncio
async def test_bulk_success_carries_token(make_client) -> None:
    client, _ = make_client(lambda r: bulk_ok(r, token="tok"), bulk_request_limit=2)
    request = BulkSameRelation(resources=make_resources(3), relation="view")

    result = await client.check(request)

    assert isinstance(result, BulkSelfAccessCheckResult)
    assert result.loading is False
    assert len(result.data) == 3
    assert result.consistency_token == ConsistencyToken(token="tok")


@pytest.mark.asyncio
async def test_failure_exposes_error_without_data(make_client) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.content and b'"ws-2"' in request.content:
            return httpx.Response(500, json={"code": 500, "message": "boom", "details": []})
        return bulk_ok(request, token="t")

    client, _ = make_client(handler, bulk_request_limit=2)
    coordinator = client.coordinator(BulkSameRelation(resources=make_resources(4), relation="view"))

    result = await coordinator.run()

    assert coordinator.state is CheckState.FAILED
    assert result.loading is False
    assert result.data is None
    assert result.consistency_token is None
    assert result.error == ApiError(500, "boom", [])


@pytest.mark.asyncio
async def test_empty_bulk_skips_loading(make_client) -> None:
    client, recorder = make_client(bulk_ok)
    coordinator = client.coordinator(BulkSameRelation(resources=[], relation="view"))
    states: list[bool] = []
    coordinator.subscribe(lambda result: states.append(result.loading))

    result = await coordinator.run()

    assert coordinator.state is CheckState.SUCCESS
    assert states == [False]
    assert result.data == []
    assert recorder.requests == []


@pytest.mark.asyncio
async def test_cancel_while_loading_suppresses_result(make_client) -> None:
    entered = asyncio.Event()
    release = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        entered.set()
        await release.wait()
        return httpx.Response(200, json={"allowed": "ALLOWED_TRUE"})

    client, _ = make_client(handler)
    coordinator = client.coordinator(SingleCheck(resource=make_resource(1), relation="view"))
    seen: list = []
    coordinator.subscribe(seen.append)

    task = asyncio.create_task(coordinator.run())
    await entered.wait()
    assert coordinator.state is CheckState.LOADING

    coordinator.cancel("unmounted")
    release.set()
    result = await task

    assert coordinator.state is CheckState.LOADING
    assert result.loading is True
    assert result.data is None
    assert len(seen) == 1


@pytest.mark.asyncio
async def test_cancel_suppresses_late_failure(make_client) -> None:
    entered = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        entered.set()
        await asyncio.sleep(0.01)
        return httpx.Response(500, json={"code": 500, "message": "late"})

    client, _ = make_client(handler, bulk_request_limit=1)
    token = CancellationToken()
    coordinator = client.coordinator(BulkSameRelation(resources=make_resources(2), relation="view"), cancel_token=token)

    task = asyncio.create_task(coordinator.run())
    await entered.wait()
    token.cancel()
    result = await task

    assert coordinator.state is CheckState.LOADING
    assert result.error is None


@pytest.mark.asyncio
async def test_cancel_before_run_sends_nothing(make_client) -> None:
    client, recorder = make_client(bulk_ok)
    token = CancellationToken()
    token.cancel()

    result = await client.check(BulkSameRelation(resources=make_resources(2), relation="view"), cancel_token=token)

    assert recorder.requests == []
    assert result.data is None


@pytest.mark.asyncio
async def test_observer_called_once_with_request(make_client) -> None:
    client, _ = make_client(lambda r: httpx.Response(200, json={"allowed": "ALLOWED_FALSE"}))
    request = SingleCheck(resource=make_resource(1), relation="view")
    observed: list = []

    await client.check(request, observer=observed.append)

    assert observed == [request]


@pytest.mark.asyncio
async def test_coordinator_runs_once(make_client) -> None:
    client, _ = make_client(lambda r: httpx.Response(200, json={"allowed": "ALLOWED_TRUE"}))
    coordinator = client.coordinator(SingleCheck(resource=make_resource(1), relation="view"))
    await coordinator.run()

    with pytest.raises(RuntimeError):
        await coordinator.run()


@pytest.mark.asyncio
async def test_unsubscribe(make_client) -> None:
    client, _ = make_client(lambda r: httpx.Response(200, json={"allowed": "ALLOWED_TRUE"}))
    coordinator = client.coordinator(SingleCheck(resource=make_resource(1), relation="view"))
    seen: list = []
    unsubscribe = coordinator.subscribe(seen.append)
    unsubscribe()

    await coordinator.run()

    assert seen == []


@pytest.mark.asyncio
async def test_independent_invocations_do_not_share_state(make_client) -> None:
    client, recorder = make_client(lambda r: httpx.Response(200, json={"allowed": "ALLOWED_TRUE"}))
    request = SingleCheck(resource=make_resource(1), relation="view")

    first, second = await asyncio.gather(client.check(request), client.check(request))

    assert len(recorder.requests) == 2
    assert first.data.allowed and second.data.allowed
    assert first is not second
