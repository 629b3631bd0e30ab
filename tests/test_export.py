"""
Tests for the JSON export of search results.
"""

from __future__ import annotations

import json
from datetime import date, time

from rzd_trains.export import to_json
from rzd_trains.schedule import SeatsInfo, TrainInfo
from rzd_trains.stations import StationItem
from rzd_trains.train_info import TrainItem
from rzd_trains.trip import TripStations, TripStop


def _train_info(**overrides) -> TrainInfo:
    fields = dict(
        train_number="119А",
        brand="",
        carrier="ФПК",
        leaving_route="С-ПЕТЕР-ГЛ",
        leaving_route_code=2004001,
        arriving_route="БЕЛГОРОД",
        arriving_route_code=2014370,
        leaving_station="САНКТ-ПЕТЕРБУРГ-ГЛАВН.",
        leaving_date=date(2022, 4, 1),
        leaving_time=time(5, 7),
        arriving_station="МОСКВА",
        arriving_date=date(2022, 4, 2),
        arriving_time=time(10, 8),
        trip_duration=time(9, 57),
        stops="",
        seats=[SeatsInfo(121, "Плацкартный")],
    )
    fields.update(overrides)
    return TrainInfo(**fields)


class TestToJson:

    def test_empty_results(self):
        assert to_json([]) == "[]"
        assert to_json(TripStations(train_number="001А")) == "[]"

    def test_stations(self):
        exported = to_json([StationItem("МОСКВА", 2000000), StationItem("МОСКВА ОКТ", 2006004)])
        assert json.loads(exported) == [
            {"name": "МОСКВА", "code": 2000000},
            {"name": "МОСКВА ОКТ", "code": 2006004},
        ]
        assert "МОСКВА" in exported

    def test_dates_and_times_use_service_format(self):
        exported = json.loads(to_json([_train_info()]))[0]
        assert exported["leaving_date"] == "01.04.2022"
        assert exported["leaving_time"] == "05:07"
        assert exported["arriving_date"] == "02.04.2022"
        assert exported["trip_duration"] == "09:57"
        assert exported["seats"] == [{"free_seats": 121, "seats_type": "Плацкартный"}]

    def test_missing_date_and_time_are_null(self):
        exported = json.loads(to_json([_train_info(leaving_date=None, arriving_time=None)]))[0]
        assert exported["leaving_date"] is None
        assert exported["arriving_time"] is None

    def test_train_without_cars(self):
        train = TrainItem(
            train_number="001А",
            leaving_date=date(2022, 4, 1),
            leaving_time=time(23, 55),
            arriving_date=None,
            arriving_time=None,
            leaving_station_name="С-ПЕТЕР-ГЛ",
            arriving_station_name="МОСКВА ОКТ",
            leaving_station_code=2004001,
            arriving_station_code=2006004,
        )
        exported = json.loads(to_json([train]))[0]
        assert exported["leaving_time"] == "23:55"
        assert exported["cars"] == []

    def test_trip_stops(self):
        stations = TripStations(
            train_number="001А",
            stations=[
                TripStop(station="С-ПЕТЕР-ГЛ", code=2004001, trip_days=0, leaving_time=time(23, 55), arriving_time=None),
                TripStop(station="МОСКВА ОКТ", code=2006004, trip_days=1, leaving_time=None, arriving_time=time(7, 55)),
            ],
        )
        assert json.loads(to_json(stations)) == [
            {"station": "С-ПЕТЕР-ГЛ", "code": 2004001, "trip_days": 0, "leaving_time": "23:55", "arriving_time": None},
            {"station": "МОСКВА ОКТ", "code": 2006004, "trip_days": 1, "leaving_time": None, "arriving_time": "07:55"},
        ]
