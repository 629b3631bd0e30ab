"""Uniform outcome that every endpoint decoder produces from a reply body."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .errors import RzdError


T = TypeVar("T")


class ReplyStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class ReplyOutcome(Generic[T]):
    """
    Result of decoding one reply.

    A service-reported error is data here, not an exception: the service
    routinely wraps its failures in a 200 reply. ``NOT_READY`` means the
    service handed back a fresh job token instead of data, so the caller
    may ask again.
    """

    status: ReplyStatus
    value: Optional[T] = None
    error: Optional[RzdError] = None

    def __post_init__(self) -> None:
        if self.status is ReplyStatus.FAILURE and self.error is None:
            raise ValueError("a failed reply must carry an error")
        if self.status is not ReplyStatus.FAILURE and self.error is not None:
            raise ValueError("only a failed reply may carry an error")
        if self.status is ReplyStatus.NOT_READY and self.value is not None:
            raise ValueError("a not-ready reply has no value")

    @classmethod
    def success(cls, value: T) -> "ReplyOutcome[T]":
        return cls(ReplyStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: RzdError) -> "ReplyOutcome[T]":
        return cls(ReplyStatus.FAILURE, error=error)

    @classmethod
    def not_ready(cls) -> "ReplyOutcome[T]":
        return cls(ReplyStatus.NOT_READY)

    @property
    def succeeded(self) -> bool:
        return self.status is ReplyStatus.SUCCESS

    @property
    def failed(self) -> bool:
        return self.status is ReplyStatus.FAILURE

    @property
    def is_not_ready(self) -> bool:
        return self.status is ReplyStatus.NOT_READY
