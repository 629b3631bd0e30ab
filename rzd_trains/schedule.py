from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import httpx
from pydantic import Field

from .errors import DeserializationError, ProtocolError, ServiceError, normalize_messages
from .models import (
    RouteDirection,
    TrainDate,
    TrainTime,
    TrainType,
    format_train_date,
    parse_train_date,
    parse_train_time,
)
from .reply import ReplyOutcome
from .search import QueryMode, RequestId, SearchRequest
from .wire import StationCode, Text, WireModel, decode, request_id_reply


LOGGER = logging.getLogger("rzd-schedule")

TIMETABLE_URL = "https://pass.rzd.ru/timetable/public/ru"

SCHEDULE_LAYER_ID = 5827


@dataclass(slots=True)
class SeatsInfo:
    free_seats: int
    seats_type: str


@dataclass(slots=True)
class TrainInfo:
    train_number: str
    brand: str
    carrier: str
    leaving_route: str
    leaving_route_code: int
    arriving_route: str
    arriving_route_code: int
    leaving_station: str
    leaving_date: Optional[TrainDate]
    leaving_time: Optional[TrainTime]
    arriving_station: str
    arriving_date: Optional[TrainDate]
    arriving_time: Optional[TrainTime]
    trip_duration: Optional[TrainTime]
    stops: str
    seats: List[SeatsInfo] = field(default_factory=list)


@dataclass(slots=True)
class Route:
    leaving_name: str
    leaving_code: int
    arriving_name: str
    arriving_code: int
    trains: List[TrainInfo] = field(default_factory=list)


class _Message(WireModel):
    message: Text = ""


class _Car(WireModel):
    car_type: Text = Field("", alias="typeLoc")
    free_seats: int = Field(0, alias="freeSeats")


class _Train(WireModel):
    number: Text = ""
    brand: Text = ""
    carrier: Text = ""
    route0: Text = ""
    route1: Text = ""
    route_code0: StationCode = Field(0, alias="routeCode0")
    route_code1: StationCode = Field(0, alias="routeCode1")
    station0: Text = ""
    station1: Text = ""
    date0: Text = ""
    time0: Text = ""
    date1: Text = ""
    time1: Text = ""
    trip_duration: Text = Field("", alias="timeInWay")
    st_list: Text = Field("", alias="stList")
    cars: List[_Car] = []


class _RouteGroup(WireModel):
    from_name: Text = Field("", alias="from")
    from_code: StationCode = Field(0, alias="fromCode")
    to_name: Text = Field("", alias="where")
    to_code: StationCode = Field(0, alias="whereCode")
    trains: List[_Train] = Field([], alias="list")
    messages: List[_Message] = Field([], alias="msgList")


class _RidReply(WireModel):
    result: Text = ""
    rid: int = Field(0, alias="RID")
    tp: List[_RouteGroup] = []


class _ScheduleReply(WireModel):
    result: Text = ""
    tp: List[_RouteGroup] = []


class TrainScheduleSearch(SearchRequest[List[Route]]):
    """
    Schedule of trains between two stations on a given date.

    Suburban electric trains are answered at once; every other train type
    goes through a request id first.
    """

    def __init__(
        self,
        leaving_code: int,
        arriving_code: int,
        leaving_date: date,
        train_type: TrainType = TrainType.ALL_TRAINS,
        free_seats_only: bool = True,
        *,
        base_url: str = TIMETABLE_URL,
    ) -> None:
        self.leaving_code = leaving_code
        self.arriving_code = arriving_code
        self.leaving_date = leaving_date
        self.train_type = TrainType(train_type)
        self.free_seats_only = free_seats_only
        self.base_url = base_url

    def mode(self) -> QueryMode:
        if self.train_type is TrainType.ELECTRIC_TRAIN:
            return QueryMode.ONE_SHOT
        return QueryMode.TWO_PHASE

    def _route_params(self) -> Dict[str, object]:
        return {
            "layer_id": SCHEDULE_LAYER_ID,
            "dir": int(RouteDirection.ONE_WAY),
            "tfl": int(self.train_type),
        }

    def _stations_params(self) -> Dict[str, object]:
        return {
            "code0": self.leaving_code,
            "dt0": format_train_date(self.leaving_date),
            "code1": self.arriving_code,
        }

    def build_phase1_request(self) -> str:
        params = self._route_params()
        if self.free_seats_only:
            params["checkSeats"] = 1
        else:
            params["checkSeats"] = 0
            params["withoutSeats"] = "y"
        params.update(self._stations_params())
        return str(httpx.URL(self.base_url, params=params))

    def build_phase2_request(self, request_id: RequestId) -> str:
        if self.mode() is QueryMode.ONE_SHOT:
            params = self._route_params()
            params.update(self._stations_params())
        else:
            params = {"layer_id": SCHEDULE_LAYER_ID, "rid": str(request_id)}
        return str(httpx.URL(self.base_url, params=params))

    def decode_phase1(self, body: bytes) -> ReplyOutcome[RequestId]:
        try:
            reply = decode(_RidReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)

        if reply.result == "OK":
            # The request was rejected and the reasons are in the route messages.
            messages = normalize_messages(m.message for group in reply.tp for m in group.messages)
            if messages:
                return ReplyOutcome.failure(ServiceError(messages))
        return request_id_reply(reply.result == "RID", reply.rid)

    def decode_phase2(self, body: bytes) -> ReplyOutcome[List[Route]]:
        try:
            reply = decode(_ScheduleReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)

        if reply.result == "RID":
            return ReplyOutcome.not_ready()
        if reply.result != "OK":
            return ReplyOutcome.failure(ProtocolError(f"Unexpected RZD schedule reply {reply.result!r}"))

        return _collect_routes(reply.tp)


def _collect_routes(groups: List[_RouteGroup]) -> ReplyOutcome[List[Route]]:
    """
    Turn route groups into routes.

    A group without trains is a failed group, with or without messages. Once
    one group fails, trains of later groups are dropped and only their
    messages are kept, so a partially failed reply never returns routes. A
    failure that left no message at all is a protocol error.
    """
    routes: List[Route] = []
    errors: List[str] = []
    failed = False

    for group in groups:
        if failed or not group.trains:
            errors.extend(normalize_messages(m.message for m in group.messages))
            failed = True
            continue

        routes.append(Route(
            leaving_name=group.from_name,
            leaving_code=group.from_code,
            arriving_name=group.to_name,
            arriving_code=group.to_code,
            trains=[_to_train_info(train) for train in group.trains],
        ))

    if failed:
        if not errors:
            return ReplyOutcome.failure(ProtocolError("RZD schedule reply has a route group without trains or a reason"))
        LOGGER.info("Schedule reply failed: %s", "; ".join(errors))
        return ReplyOutcome.failure(ServiceError(errors))

    LOGGER.info("%d routes found", len(routes))
    return ReplyOutcome.success(routes)


def _to_train_info(train: _Train) -> TrainInfo:
    return TrainInfo(
        train_number=train.number,
        brand=train.brand,
        carrier=train.carrier,
        leaving_route=train.route0,
        leaving_route_code=train.route_code0,
        arriving_route=train.route1,
        arriving_route_code=train.route_code1,
        leaving_station=train.station0,
        leaving_date=parse_train_date(train.date0),
        leaving_time=parse_train_time(train.time0),
        arriving_station=train.station1,
        arriving_date=parse_train_date(train.date1),
        arriving_time=parse_train_time(train.time1),
        trip_duration=parse_train_time(train.trip_duration),
        stops=train.st_list,
        seats=[SeatsInfo(free_seats=car.free_seats, seats_type=car.car_type) for car in train.cars],
    )
