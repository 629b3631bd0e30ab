"""
Tests for the station code search.
"""

from __future__ import annotations

import json

import pytest

from rzd_trains.errors import DeserializationError, TooShortQueryError, UnsupportedOperationError
from rzd_trains.search import QueryMode, RequestId
from rzd_trains.stations import StationCodeSearch, StationItem, is_first_letters_found
from tests.conftest import empty_reply, json_reply


def _body(payload) -> bytes:
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


class TestStationCodeSearch:

    @pytest.mark.parametrize("query", ["", " ", "м"])
    def test_rejects_short_queries(self, query):
        with pytest.raises(TooShortQueryError):
            StationCodeSearch(query)

    def test_query_is_trimmed_and_upper_cased(self):
        assert StationCodeSearch("  мОс ").query == "МОС"

    def test_is_one_shot(self):
        search = StationCodeSearch("МОС")
        assert search.mode() is QueryMode.ONE_SHOT
        assert isinstance(search.decode_phase1(b"{}").error, UnsupportedOperationError)

    def test_request_url(self):
        url = StationCodeSearch("мос").build_phase2_request(RequestId())
        assert url.startswith("https://pass.rzd.ru/suggester?")
        assert "stationNamePart=%D0%9C%D0%9E%D0%A1" in url
        assert "lang=ru" in url
        assert "compactMode=y" in url

    def test_decodes_compact_names(self):
        body = _body([
            {"n": "ВОЕННОЕ ШОССЕ", "c": 2034058, "S": 4, "L": 0},
            {"n": "БУРЛИТ-ВОЛОЧАЕВСКИЙ", "c": 2034458, "S": 0, "L": 2},
            {"n": "ВОРОПАЕВО", "c": 2100047, "S": 0, "L": 4},
        ])
        reply = StationCodeSearch("во").decode_phase2(body)

        assert reply.succeeded
        assert reply.value == [
            StationItem("ВОЕННОЕ ШОССЕ", 2034058),
            StationItem("БУРЛИТ-ВОЛОЧАЕВСКИЙ", 2034458),
            StationItem("ВОРОПАЕВО", 2100047),
        ]

    def test_keeps_only_names_starting_with_query(self):
        body = _body([
            {"n": "БУРЛИТ-ВОЛОЧАЕВСКИЙ", "c": 2034458},
            {"n": "ВОЕННОЕ ШОССЕ", "c": 2034058},
            {"n": "ВОЛОГДА 1", "c": 2010290},
        ])
        reply = StationCodeSearch("вол").decode_phase2(body)

        assert [station.name for station in reply.value] == ["БУРЛИТ-ВОЛОЧАЕВСКИЙ", "ВОЛОГДА 1"]

    def test_empty_list_is_success(self):
        reply = StationCodeSearch("мос").decode_phase2(b"[]")
        assert reply.succeeded
        assert reply.value == []

    def test_malformed_body(self):
        reply = StationCodeSearch("мос").decode_phase2(b"{\"n\":")
        assert isinstance(reply.error, DeserializationError)


class TestFirstLettersFound:

    @pytest.mark.parametrize(
        "text, letters, expected",
        [
            ("", "", False),
            ("", "МОС", False),
            ("МОСКОВСКАЯ", "", False),
            ("МОСКОВСКАЯ", " ", False),
            ("МОСКОВСКАЯ", "мОс", True),
            ("ВОЕННЫЙ ГОРОДОК", "гоР", True),
            ("САНКТ-ПЕТЕРБУРГ-ГЛАВН", "пет", True),
            ("САНКТ-ПЕТЕРБУРГ-ГЛАВН", "тер", False),
        ],
    )
    def test_matches_word_or_hyphen_segment(self, text, letters, expected):
        assert is_first_letters_found(text, letters) is expected


class TestStationSearchEndToEnd:

    def test_nothing_matching_is_none(self, executor, service):
        service.responses = [json_reply([{"n": "ТВЕРЬ", "c": 2004600}])]
        assert executor.run(StationCodeSearch("мос")) is None

    def test_empty_body_is_none(self, executor, service):
        service.responses = [empty_reply()]
        assert executor.run(StationCodeSearch("мос")) is None

    def test_found(self, executor, service, sleeps):
        service.responses = [json_reply([
            {"n": "МОСКВА", "c": 2000000},
            {"n": "МОЖАЙСК", "c": 2000055},
        ])]
        assert executor.run(StationCodeSearch("мос")) == [StationItem("МОСКВА", 2000000)]
        assert sleeps == []
