"""Internal HTTP transport for the access check client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx
from pydantic import BaseModel

from .exceptions import ApiError, MalformedResponseError, TransportError, error_for_status
from .types.wire import ApiErrorResponse

if TYPE_CHECKING:
    from .cancellation import CancellationToken

logger = logging.getLogger(__name__)


class HttpClient:
    """Low-level async HTTP client wrapping httpx.

    Credentials are whatever the underlying client carries: its cookie jar
    for session cookies, or extra headers supplied by the caller.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        headers: Optional[dict[str, str]] = None,
        cookies: Optional[dict[str, str]] = None,
    ) -> None:
        self._owns_client = client is None
        # No timeout: a hung request stays pending until the consumer cancels.
        self._client = client if client is not None else httpx.AsyncClient(timeout=None, cookies=cookies)
        self._extra_headers: dict[str, str] = dict(headers or {})

    def _headers(self, extra: Optional[dict[str, str]] = None) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        headers.update(self._extra_headers)
        if extra:
            headers.update(extra)
        return headers

    def _handle_response(
        self,
        resp: httpx.Response,
        response_model: Optional[type[BaseModel]] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> Any:
        if not resp.is_success:
            raise self._error_from_response(resp)
        try:
            data = resp.json()
            if response_model is None:
                return data
            return response_model.model_validate(data, context=context)
        except ValueError as e:
            # Covers undecodable bodies and bodies of the wrong shape.
            logger.debug("Malformed %s response body: %s", resp.status_code, e)
            raise MalformedResponseError(resp.status_code) from e

    def _error_from_response(self, resp: httpx.Response) -> ApiError:
        try:
            body = ApiErrorResponse.model_validate(resp.json())
        except ValueError:
            return error_for_status(resp.status_code, resp.reason_phrase or "Request failed")
        return error_for_status(resp.status_code, body.message, body.details, code=body.code)

    async def _send(
        self,
        method: str,
        url: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        response_model: Optional[type[BaseModel]] = None,
        context: Optional[dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        logger.debug("%s %s", method, url)
        request = self._client.request(method, url, headers=self._headers(headers), json=json, params=params)
        try:
            if cancel_token is None:
                resp = await request
            else:
                resp = await cancel_token.run(request)
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}") from e
        if not resp.is_success:
            logger.debug("%s %s returned %s", method, url, resp.status_code)
        return self._handle_response(resp, response_model, context)

    async def get(
        self,
        url: str,
        params: Optional[dict[str, Any]] = None,
        headers: Optional[dict[str, str]] = None,
        response_model: Optional[type[BaseModel]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        return await self._send(
            "GET",
            url,
            params=params,
            headers=headers,
            response_model=response_model,
            cancel_token=cancel_token,
        )

    async def post(
        self,
        url: str,
        json: Optional[dict[str, Any]] = None,
        response_model: Optional[type[BaseModel]] = None,
        context: Optional[dict[str, Any]] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Any:
        return await self._send(
            "POST",
            url,
            json=json,
            response_model=response_model,
            context=context,
            cancel_token=cancel_token,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
