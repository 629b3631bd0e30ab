from __future__ import annotations

import logging
import time
from collections.abc import Sized
from typing import Any, Callable, Optional, TypeVar

from .config import ClientSettings, PollingPolicy
from .errors import OverloadError, ProtocolError, RzdError
from .reply import ReplyOutcome
from .search import QueryMode, RequestId, SearchRequest
from .transport import Transport, TransportOutcome, TransportStatus, extract_session_cookies


LOGGER = logging.getLogger("rzd-client")

T = TypeVar("T")


class QueryExecutor:
    """
    Runs a search against the service and returns its result, or ``None`` if nothing was found.

    One-shot searches take a single request. Two-phase searches first ask for
    a job token, then poll for the answer with the cookies issued alongside
    the token. Each poll is preceded by a fixed pause, and polling stops
    after ``policy.max_attempts`` tries with ``OverloadError``.
    """

    def __init__(
        self,
        *,
        transport: Optional[Transport] = None,
        settings: Optional[ClientSettings] = None,
        policy: Optional[PollingPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.transport = transport or Transport(timeout_seconds=self.settings.timeout_seconds)
        self.policy = policy or PollingPolicy()
        self._sleep = sleep

    def run(self, request: SearchRequest[T]) -> Optional[T]:
        if request.mode() is QueryMode.ONE_SHOT:
            return self._run_one_shot(request)
        return self._run_two_phase(request)

    def _run_one_shot(self, request: SearchRequest[T]) -> Optional[T]:
        url = request.build_phase2_request(RequestId())
        outcome = self.transport.send(url, self.settings.default_headers())

        if outcome.status is TransportStatus.EMPTY:
            return None
        _raise_for_failed(outcome)

        reply = request.decode_phase2(outcome.body)
        if reply.is_not_ready:
            # Nothing to poll with in this mode.
            LOGGER.warning("RZD answered a one-shot request with a job token")
            raise OverloadError(1)
        return _unwrap(reply)

    def _run_two_phase(self, request: SearchRequest[T]) -> Optional[T]:
        request_id, cookies = self._fetch_request_id(request)

        headers = self.settings.default_headers()
        headers["Cookie"] = cookies

        url = request.build_phase2_request(request_id)
        attempts = self.policy.max_attempts

        for attempt in range(1, attempts + 1):
            # The job is prepared asynchronously, so even the first poll waits.
            self._sleep(self.policy.interval_seconds)

            outcome = self.transport.send(url, headers)
            if outcome.status is TransportStatus.EMPTY:
                return None
            _raise_for_failed(outcome)

            reply = request.decode_phase2(outcome.body)
            if reply.is_not_ready:
                LOGGER.debug("Answer for request %s is not ready (attempt %d/%d)", request_id, attempt, attempts)
                continue

            value = _unwrap(reply)
            if value is not None:
                return value
            LOGGER.debug("Answer for request %s is empty (attempt %d/%d)", request_id, attempt, attempts)

        LOGGER.warning("RZD did not answer request %s after %d attempts", request_id, attempts)
        raise OverloadError(attempts)

    def _fetch_request_id(self, request: SearchRequest[T]) -> tuple[RequestId, str]:
        url = request.build_phase1_request()
        outcome = self.transport.send(url, self.settings.default_headers())

        if outcome.status is TransportStatus.EMPTY:
            raise ProtocolError("RZD returned an empty reply instead of a request id", status_code=outcome.status_code)
        _raise_for_failed(outcome)

        # The service sets the session cookies on every 2xx reply, so take them before decoding.
        cookies = extract_session_cookies(outcome.response)

        reply = request.decode_phase1(outcome.body)
        if reply.failed:
            raise _error_of(reply)
        if reply.value is None:
            raise ProtocolError("RZD did not issue a request id", status_code=outcome.status_code)

        LOGGER.debug("RZD issued request id %s", reply.value)
        return reply.value, cookies


def _raise_for_failed(outcome: TransportOutcome) -> None:
    if outcome.status is TransportStatus.FAILED:
        raise ProtocolError(f"RZD returned HTTP {outcome.status_code}", status_code=outcome.status_code)


def _unwrap(reply: ReplyOutcome[T]) -> Optional[T]:
    if reply.failed:
        raise _error_of(reply)
    if _is_empty(reply.value):
        return None
    return reply.value


def _error_of(reply: ReplyOutcome[Any]) -> RzdError:
    if reply.error is None:
        return ProtocolError("RZD reply failed without a reason")
    return reply.error


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, Sized) and len(value) == 0
