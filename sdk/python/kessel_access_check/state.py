"""Per-invocation result state: Idle -> Loading -> Success | Failed."""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable, Optional, Union

from .cancellation import CancellationToken
from .engine import run_check
from .exceptions import ApiError, CheckCancelledError
from .types.access import BulkCheckOutcome, BulkSelfAccessCheckResult, CheckResultItem, SelfAccessCheckResult
from .types.requests import CheckRequest, SingleCheck

if TYPE_CHECKING:
    from .services.access_checks import AccessChecksService

logger = logging.getLogger(__name__)

AccessCheckResult = Union[SelfAccessCheckResult, BulkSelfAccessCheckResult]
Subscriber = Callable[[AccessCheckResult], None]
RequestObserver = Callable[[CheckRequest], None]


class CheckState(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


class ResultCoordinator:
    """Drives one check invocation and publishes its state to subscribers.

    Once :meth:`cancel` is called no further state is committed, whatever
    the in-flight requests end up doing.

    Usage:
        coordinator = ResultCoordinator(client.access_checks, request)
        coordinator.subscribe(render)
        result = await coordinator.run()
    """

    def __init__(
        self,
        checks: AccessChecksService,
        request: CheckRequest,
        cancel_token: Optional[CancellationToken] = None,
        observer: Optional[RequestObserver] = None,
    ) -> None:
        self._checks = checks
        self._request = request
        self._cancel_token = cancel_token if cancel_token is not None else CancellationToken()
        self._observer = observer
        self._subscribers: list[Subscriber] = []
        self._state = CheckState.IDLE
        self._result: AccessCheckResult = self._snapshot()

    @property
    def state(self) -> CheckState:
        return self._state

    @property
    def result(self) -> AccessCheckResult:
        return self._result

    @property
    def request(self) -> CheckRequest:
        return self._request

    @property
    def cancel_token(self) -> CancellationToken:
        return self._cancel_token

    @property
    def is_bulk(self) -> bool:
        return not isinstance(self._request, SingleCheck)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register ``callback`` for every committed state. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def cancel(self, reason: Optional[str] = None) -> None:
        """Tear down the consumer. Pending requests are aborted and ignored."""
        logger.debug("Cancelling access check in state %s", self._state.value)
        self._cancel_token.cancel(reason)

    def _snapshot(
        self,
        data: Optional[Union[CheckResultItem, BulkCheckOutcome]] = None,
        error: Optional[ApiError] = None,
    ) -> AccessCheckResult:
        loading = self._state is CheckState.LOADING
        if not self.is_bulk:
            return SelfAccessCheckResult(loading=loading, data=data, error=error)
        if isinstance(data, BulkCheckOutcome):
            return BulkSelfAccessCheckResult(
                loading=loading,
                data=data.items,
                consistency_token=data.consistency_token,
            )
        return BulkSelfAccessCheckResult(loading=loading, error=error)

    def _commit(
        self,
        state: CheckState,
        data: Optional[Union[CheckResultItem, BulkCheckOutcome]] = None,
        error: Optional[ApiError] = None,
    ) -> bool:
        if self._cancel_token.cancelled:
            logger.debug("Dropping %s transition of a cancelled access check", state.value)
            return False
        self._state = state
        self._result = self._snapshot(data, error)
        for callback in list(self._subscribers):
            callback(self._result)
        return True

    async def run(self) -> AccessCheckResult:
        """Run the check and return the last committed result."""
        if self._state is not CheckState.IDLE:
            raise RuntimeError(f"Access check already ran (state={self._state.value})")
        if self._observer is not None:
            self._observer(self._request)

        if self.is_bulk and not self._request.resources:
            # Nothing to ask the service; straight to success.
            self._commit(CheckState.SUCCESS, data=BulkCheckOutcome())
            return self._result

        if not self._commit(CheckState.LOADING):
            return self._result

        try:
            outcome = await run_check(self._checks, self._request, cancel_token=self._cancel_token)
        except CheckCancelledError:
            logger.debug("Access check cancelled while loading")
            return self._result
        except ApiError as e:
            self._commit(CheckState.FAILED, error=e)
            return self._result

        self._commit(CheckState.SUCCESS, data=outcome)
        return self._result
