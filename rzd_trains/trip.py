from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Annotated, List, Optional

import httpx
from pydantic import BeforeValidator, Field

from .errors import DeserializationError, EmptyTrainNumberError, ProtocolError, ServiceError, normalize_messages
from .models import TrainTime, format_train_date, parse_day_offset, parse_train_time
from .reply import ReplyOutcome
from .search import QueryMode, RequestId, SearchRequest
from .wire import StationCode, Text, WireModel, decode, request_id_reply


LOGGER = logging.getLogger("rzd-trip")

TIMETABLE_URL = "https://pass.rzd.ru/timetable/public/ru"

TRIP_LAYER_ID = 5804

REQUEST_ID_TYPE = "REQUEST_ID"


@dataclass(slots=True)
class TripStop:
    station: str
    code: int
    trip_days: int
    leaving_time: Optional[TrainTime]
    arriving_time: Optional[TrainTime]


@dataclass(slots=True)
class TripStations:
    train_number: str
    stations: List[TripStop] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.stations)


# "Days" comes as "00", "01", ...
DayOffset = Annotated[int, BeforeValidator(parse_day_offset)]


class _Error(WireModel):
    content: Text = ""


class _Stop(WireModel):
    station: Text = Field("", alias="Station")
    days: DayOffset = Field(0, alias="Days")
    dep_time: Text = Field("", alias="DepTime")
    arv_time: Text = Field("", alias="ArvTime")
    code: StationCode = Field(0, alias="Code")


class _Routes(WireModel):
    stops: List[_Stop] = Field([], alias="Stop")


class _Train(WireModel):
    number: Text = Field("", alias="Number")


class _Info(WireModel):
    train: _Train = Field(default_factory=_Train, alias="Train")
    routes: _Routes = Field(default_factory=_Routes, alias="Routes")
    error: _Error = Field(default_factory=_Error, alias="Error")


class _RidReply(WireModel):
    reply_type: Text = Field("", alias="type")
    rid: int = 0


class _TripReply(WireModel):
    response: _Info = Field(default_factory=_Info, alias="GtExpress_Response")
    error: _Error = Field(default_factory=_Error, alias="Error")
    reply_type: Text = Field("", alias="type")


class TripStopsSearch(SearchRequest[TripStations]):
    """List of stops a train makes on a given date."""

    def __init__(self, train_number: str, train_date: date, *, base_url: str = TIMETABLE_URL) -> None:
        train_number = train_number.strip().upper()
        if not train_number:
            raise EmptyTrainNumberError("Train number must be provided.")

        self.train_number = train_number
        self.train_date = train_date
        self.base_url = base_url
        LOGGER.debug("query: %s at %s", train_number, format_train_date(train_date))

    def mode(self) -> QueryMode:
        return QueryMode.TWO_PHASE

    def build_phase1_request(self) -> str:
        params = {
            "layer_id": TRIP_LAYER_ID,
            "date": format_train_date(self.train_date),
            "train_num": self.train_number,
            "json": "y",
            "format": "array",
        }
        return str(httpx.URL(self.base_url, params=params))

    def build_phase2_request(self, request_id: RequestId) -> str:
        params = {
            "layer_id": TRIP_LAYER_ID,
            "rid": str(request_id),
            "json": "y",
            "format": "array",
        }
        return str(httpx.URL(self.base_url, params=params))

    def decode_phase1(self, body: bytes) -> ReplyOutcome[RequestId]:
        try:
            reply = decode(_RidReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)
        return request_id_reply(reply.reply_type == REQUEST_ID_TYPE, reply.rid)

    def decode_phase2(self, body: bytes) -> ReplyOutcome[TripStations]:
        try:
            reply = decode(_TripReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)

        if reply.reply_type == REQUEST_ID_TYPE:
            return ReplyOutcome.not_ready()
        if reply.reply_type:
            return ReplyOutcome.failure(ProtocolError(f"Unexpected RZD trip reply {reply.reply_type!r}"))

        # The error sits either at the top level or inside the express response.
        messages = normalize_messages([reply.error.content]) or normalize_messages([reply.response.error.content])
        if messages:
            return ReplyOutcome.failure(ServiceError(messages))

        stations = [
            TripStop(
                station=stop.station,
                code=stop.code,
                trip_days=stop.days,
                leaving_time=parse_train_time(stop.dep_time),
                arriving_time=parse_train_time(stop.arv_time),
            )
            for stop in reply.response.routes.stops
        ]
        LOGGER.info("%d stops found for train %s", len(stations), self.train_number)
        return ReplyOutcome.success(TripStations(train_number=reply.response.train.number, stations=stations))
