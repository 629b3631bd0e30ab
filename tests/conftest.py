"""
Shared fixtures: a scripted fake of the RZD service and an executor wired to it.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional, Sequence

import httpx
import pytest

from rzd_trains.config import PollingPolicy
from rzd_trains.executor import QueryExecutor
from rzd_trains.transport import Transport


def json_reply(payload: Any, *, cookies: Sequence[str] = ()) -> httpx.Response:
    headers = [("Set-Cookie", cookie) for cookie in cookies]
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    headers.append(("Content-Type", "application/json"))
    return httpx.Response(200, headers=headers, content=body)


def empty_reply() -> httpx.Response:
    return httpx.Response(200, headers={"Content-Length": "0"})


class FakeService:
    """Answers requests with scripted responses, in order, and records every request."""

    def __init__(self, responses: Optional[List[Any]] = None) -> None:
        self.responses = list(responses or [])
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request to {request.url}")

        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def sleeps() -> List[float]:
    return []


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def executor(service: FakeService, sleeps: List[float]) -> QueryExecutor:
    return QueryExecutor(
        transport=Transport(transport=httpx.MockTransport(service)),
        policy=PollingPolicy(interval_seconds=1.5, max_attempts=3),
        sleep=sleeps.append,
    )
