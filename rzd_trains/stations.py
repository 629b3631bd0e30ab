from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import httpx
from pydantic import Field, RootModel

from .errors import DeserializationError, TooShortQueryError, UnsupportedOperationError
from .reply import ReplyOutcome
from .search import QueryMode, RequestId, SearchRequest
from .wire import StationCode, Text, WireModel, decode


LOGGER = logging.getLogger("rzd-stations")

SUGGESTER_URL = "https://pass.rzd.ru/suggester"

MIN_QUERY_LENGTH = 2


@dataclass(slots=True)
class StationItem:
    name: str
    code: int


class _Station(WireModel):
    name: Text = Field("", alias="n")
    code: StationCode = Field(0, alias="c")


class _StationList(RootModel[List[_Station]]):
    pass


class StationCodeSearch(SearchRequest[List[StationItem]]):
    """Looks up station codes by the first letters of a station name."""

    def __init__(self, query: str, *, base_url: str = SUGGESTER_URL) -> None:
        query = query.strip().upper()
        if len(query) < MIN_QUERY_LENGTH:
            raise TooShortQueryError(
                f"Station query must have at least {MIN_QUERY_LENGTH} characters.")

        self.query = query
        self.base_url = base_url
        LOGGER.debug("query: %s", query)

    def mode(self) -> QueryMode:
        return QueryMode.ONE_SHOT

    def build_phase1_request(self) -> str:
        return ""

    def build_phase2_request(self, request_id: RequestId) -> str:
        params = {"stationNamePart": self.query, "lang": "ru", "compactMode": "y"}
        return str(httpx.URL(self.base_url, params=params))

    def decode_phase1(self, body: bytes) -> ReplyOutcome[RequestId]:
        return ReplyOutcome.failure(
            UnsupportedOperationError("Station search has no request id phase."))

    def decode_phase2(self, body: bytes) -> ReplyOutcome[List[StationItem]]:
        try:
            answer = decode(_StationList, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)

        # The suggester matches on the first two letters only, so the full query is checked here.
        stations = [
            StationItem(name=item.name, code=item.code)
            for item in answer.root
            if is_first_letters_found(item.name, self.query)
        ]
        LOGGER.info("%d stations found", len(stations))
        return ReplyOutcome.success(stations)


def is_first_letters_found(text: str, letters: str) -> bool:
    """True if ``letters`` start a word or a hyphen-separated part of ``text``, ignoring case."""
    text = text.strip().upper()
    letters = letters.strip().upper()

    if not text or not letters:
        return False

    if any(word.startswith(letters) for word in text.split()):
        return True
    return any(part.startswith(letters) for part in text.split("-"))
