"""The check-request engine: single checks and chunked bulk checks."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Optional, Sequence, Union

from .chunking import chunk_items
from .transformers import transform_bulk_response, transform_single_response, transform_token
from .types.access import BulkCheckItem, BulkCheckOutcome, CheckResultItem, ConsistencyOptions, Resource
from .types.requests import BulkPerItemRelation, BulkSameRelation, CheckRequest, SingleCheck
from .types.wire import CheckSelfBulkResponse

if TYPE_CHECKING:
    from .cancellation import CancellationToken
    from .services.access_checks import AccessChecksService

logger = logging.getLogger(__name__)


async def check_single(
    checks: AccessChecksService,
    resource: Resource,
    relation: str,
    cancel_token: Optional[CancellationToken] = None,
) -> CheckResultItem:
    """Check one relation on one resource with a single request.

    Raises:
        ApiError: on transport failure, error status or malformed body.
    """
    response = await checks.check_self(resource, relation, cancel_token=cancel_token)
    return transform_single_response(response, resource)


async def check_bulk(
    checks: AccessChecksService,
    items: Sequence[BulkCheckItem],
    consistency: Optional[ConsistencyOptions] = None,
    cancel_token: Optional[CancellationToken] = None,
) -> BulkCheckOutcome:
    """Check many (resource, relation) pairs.

    Items are split into chunks of at most ``bulk_request_limit`` and all
    chunks are requested concurrently. Results come back in input order and
    the consistency token is the one from the chunk holding the last item.
    The first chunk to fail fails the whole call and the other chunks are
    cancelled; no partial results are returned.

    Raises:
        ApiError: the error of the failing chunk.
    """
    items = list(items)
    if not items:
        return BulkCheckOutcome()

    chunks = chunk_items(items, checks.config.bulk_check_config.effective_limit)
    responses = await _run_chunks(checks, chunks, consistency, cancel_token)

    results: list[CheckResultItem] = []
    for chunk, response in zip(chunks, responses):
        results.extend(transform_bulk_response(response, chunk))
    return BulkCheckOutcome(items=results, consistency_token=transform_token(responses[-1].consistency_token))


async def _run_chunks(
    checks: AccessChecksService,
    chunks: list[list[BulkCheckItem]],
    consistency: Optional[ConsistencyOptions],
    cancel_token: Optional[CancellationToken],
) -> list[CheckSelfBulkResponse]:
    tasks = [
        asyncio.ensure_future(checks.check_self_bulk(chunk, consistency, cancel_token=cancel_token))
        for chunk in chunks
    ]
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        raise

    # Tasks are kept in chunk order, so the lowest failing position wins a tie.
    failed = next(
        (task for task in tasks if task in done and not task.cancelled() and task.exception() is not None),
        None,
    )
    if failed is not None:
        for task in done:
            if not task.cancelled():
                task.exception()
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.wait(pending)
            for task in pending:
                if not task.cancelled():
                    task.exception()
        logger.debug(
            "Bulk check chunk %d of %d failed, discarding the others",
            tasks.index(failed) + 1,
            len(tasks),
        )
        raise failed.exception()

    return [task.result() for task in tasks]


async def run_check(
    checks: AccessChecksService,
    request: CheckRequest,
    cancel_token: Optional[CancellationToken] = None,
) -> Union[CheckResultItem, BulkCheckOutcome]:
    """Run any check request variant."""
    if isinstance(request, SingleCheck):
        return await check_single(checks, request.resource, request.relation, cancel_token=cancel_token)
    if isinstance(request, (BulkSameRelation, BulkPerItemRelation)):
        return await check_bulk(checks, request.bulk_items(), request.consistency, cancel_token=cancel_token)
    raise TypeError(f"Unsupported check request: {type(request).__name__}")
