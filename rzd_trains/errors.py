from __future__ import annotations

from typing import Iterable, List, Optional


class RzdError(Exception):
    """Base error for issues communicating with the RZD passenger service."""


class TransportError(RzdError):
    """Raised when the request could not reach the service at all."""


class ProtocolError(RzdError):
    """Raised when the service answers with a bad status or an unusable reply."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DeserializationError(RzdError):
    """Raised when a reply body does not match the expected JSON shape."""


class ServiceError(RzdError):
    """The service described its own failure inside an otherwise valid reply."""

    def __init__(self, messages: Iterable[str]) -> None:
        self.messages: List[str] = list(messages)
        super().__init__("; ".join(self.messages))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ServiceError):
            return NotImplemented
        return self.messages == other.messages

    __hash__ = Exception.__hash__


class OverloadError(RzdError):
    """Raised when every poll attempt ended without a usable answer."""

    def __init__(self, attempts: int) -> None:
        super().__init__(
            f"RZD did not prepare an answer after {attempts} attempts; "
            "change the request or try again later"
        )
        self.attempts = attempts


class UnsupportedOperationError(RzdError):
    """Raised when a search is asked for a phase it does not have."""


class TooShortQueryError(RzdError, ValueError):
    """Raised when a station name query is too short to search for."""


class EmptyTrainNumberError(RzdError, ValueError):
    """Raised when a train number is blank."""


def normalize_message(text: str) -> str:
    """Bring a service message to a stable form: trimmed, one trailing period dropped, lowercase."""
    message = text.strip()
    if message.endswith("."):
        message = message[:-1]
    return message.lower()


def normalize_messages(texts: Iterable[Optional[str]]) -> List[str]:
    messages: List[str] = []
    for text in texts:
        if not text:
            continue
        message = normalize_message(text)
        if message:
            messages.append(message)
    return messages
