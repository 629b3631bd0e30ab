from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional

import httpx

from .config import DEFAULT_TIMEOUT_SECONDS
from .errors import TransportError


LOGGER = logging.getLogger("rzd-transport")


class TransportStatus(str, Enum):
    BODY = "body"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(slots=True)
class TransportOutcome:
    status: TransportStatus
    status_code: int
    response: httpx.Response

    @property
    def body(self) -> bytes:
        return self.response.content


class Transport:
    """Issues single GET requests and classifies what came back. It never retries."""

    def __init__(
        self,
        *,
        timeout_seconds: Optional[float] = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        # An injected transport is owned by the caller and must outlive each client.
        self._transport = _LentTransport(transport) if transport is not None else None

    def send(self, url: str, headers: Mapping[str, str]) -> TransportOutcome:
        """Send one GET request; network failures raise ``TransportError``."""
        LOGGER.debug("GET %s", url)

        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = client.get(url, headers=dict(headers))
        except httpx.HTTPError as exc:
            LOGGER.error("Unable to reach RZD at %s: %s", url, exc)
            raise TransportError(f"Unable to reach RZD: {exc}") from exc

        if not response.is_success:
            LOGGER.warning("RZD returned HTTP %s for %s", response.status_code, url)
            return TransportOutcome(TransportStatus.FAILED, response.status_code, response)

        if response.headers.get("content-length") == "0" or not response.content:
            LOGGER.warning("RZD returned an empty body for %s", url)
            return TransportOutcome(TransportStatus.EMPTY, response.status_code, response)

        return TransportOutcome(TransportStatus.BODY, response.status_code, response)


def extract_session_cookies(response: httpx.Response) -> str:
    """
    Collapse the cookies set on a reply into one ``Cookie`` header value.

    Every ``Set-Cookie`` header contributes its ``name=value`` pair. Cookies
    sharing a name but not a value are all kept; exact duplicate pairs are
    dropped and the rest sorted so the header is deterministic. Returns an
    empty string if nothing was set.
    """
    pairs: List[str] = []
    for header in response.headers.get_list("set-cookie"):
        pair = header.split(";", 1)[0].strip()
        if pair:
            pairs.append(pair)
    return join_cookie_pairs(pairs)


def join_cookie_pairs(pairs: List[str]) -> str:
    return "; ".join(sorted(set(pairs)))


class _LentTransport(httpx.BaseTransport):
    """Passes requests to a caller-owned transport and leaves closing it to the caller."""

    def __init__(self, transport: httpx.BaseTransport) -> None:
        self._transport = transport

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        return self._transport.handle_request(request)
