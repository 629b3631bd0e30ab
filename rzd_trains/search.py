from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from .reply import ReplyOutcome


T = TypeVar("T")


class QueryMode(Enum):
    """Some searches are answered at once, others return a job token that must be polled."""

    ONE_SHOT = "one_shot"
    TWO_PHASE = "two_phase"


@dataclass(frozen=True)
class RequestId:
    """Opaque token the service issues to correlate a job with its answer."""

    value: int = 0

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("request id must not be negative.")

    def __str__(self) -> str:
        return str(self.value)


class SearchRequest(ABC, Generic[T]):
    """
    One kind of search against the service.

    The executor only calls these methods; it never mutates the search.
    ``build_phase1_request`` and ``decode_phase1`` are used in the two-phase
    mode only. In the one-shot mode ``build_phase2_request`` receives a
    default ``RequestId`` which it ignores.
    """

    @abstractmethod
    def mode(self) -> QueryMode:
        ...

    @abstractmethod
    def build_phase1_request(self) -> str:
        ...

    @abstractmethod
    def build_phase2_request(self, request_id: RequestId) -> str:
        ...

    @abstractmethod
    def decode_phase1(self, body: bytes) -> ReplyOutcome[RequestId]:
        ...

    @abstractmethod
    def decode_phase2(self, body: bytes) -> ReplyOutcome[T]:
        ...
