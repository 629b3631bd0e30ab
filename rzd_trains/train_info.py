from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, time
from typing import List, Optional

import httpx
from pydantic import Field

from .errors import (
    DeserializationError,
    EmptyTrainNumberError,
    ProtocolError,
    ServiceError,
    normalize_messages,
)
from .models import RouteDirection, TrainDate, TrainTime, format_train_date, parse_train_date, parse_train_time
from .reply import ReplyOutcome
from .search import QueryMode, RequestId, SearchRequest
from .wire import StationCode, Text, WireModel, decode, request_id_reply


LOGGER = logging.getLogger("rzd-train-info")

TIMETABLE_URL = "https://pass.rzd.ru/timetable/public/ru"

TRAIN_LAYER_ID = 5764


@dataclass(slots=True)
class CarSeats:
    free_seats: int
    seats_type: str
    price: str


@dataclass(slots=True)
class InsuranceInfo:
    name: str
    url: str
    price: str


@dataclass(slots=True)
class TrainCar:
    number: str
    type_loc: str
    service_class: str
    services: List[str]
    tariff: str
    tariff2: str
    tariff_service: str
    carrier: str
    insurance: Optional[InsuranceInfo]
    seats: List[CarSeats]
    places: str


@dataclass(slots=True)
class TrainItem:
    train_number: str
    leaving_date: Optional[TrainDate]
    leaving_time: Optional[TrainTime]
    arriving_date: Optional[TrainDate]
    arriving_time: Optional[TrainTime]
    leaving_station_name: str
    arriving_station_name: str
    leaving_station_code: int
    arriving_station_code: int
    cars: List[TrainCar] = field(default_factory=list)


class _Seats(WireModel):
    free_seats: int = Field(0, alias="free")
    seats_type: Text = Field("", alias="label")
    tariff: Text = ""


class _Service(WireModel):
    id: int = 0
    description: Text = ""


class _Car(WireModel):
    cnumber: Text = ""
    type_loc: Text = Field("", alias="typeLoc")
    cls_type: Text = Field("", alias="clsType")
    services: List[_Service] = []
    tariff: Text = ""
    tariff2: Text = ""
    tariff_serv: Text = Field("", alias="tariffServ")
    carrier: Text = ""
    insurance_id: int = Field(0, alias="insuranceTypeId")
    seats: List[_Seats] = []
    places: Text = ""


class _Train(WireModel):
    result: Text = ""
    number: Text = ""
    date0: Text = ""
    time0: Text = ""
    date1: Text = ""
    time1: Text = ""
    station0: Text = ""
    station1: Text = ""
    code0: StationCode = 0
    code1: StationCode = 0
    cars: List[_Car] = []
    error: Text = ""


class _Insurance(WireModel):
    id: int = 0
    short_name: Text = Field("", alias="shortName")
    offer_url: Text = Field("", alias="offerUrl")
    insurance_cost: int = Field(0, alias="insuranceCost")


class _RidReply(WireModel):
    result: Text = ""
    rid: int = Field(0, alias="RID")


class _TrainReply(WireModel):
    result: Text = ""
    lst: List[_Train] = []
    insurance: List[_Insurance] = Field([], alias="insuranceCompany")


class TrainSearch(SearchRequest[List[TrainItem]]):
    """Cars, seats and prices of one train between two stations."""

    def __init__(
        self,
        leaving_code: int,
        arriving_code: int,
        leaving_date: date,
        leaving_time: time,
        train_number: str,
        *,
        base_url: str = TIMETABLE_URL,
    ) -> None:
        train_number = train_number.strip().upper()
        if not train_number:
            raise EmptyTrainNumberError("Train number must be provided.")

        self.leaving_code = leaving_code
        self.arriving_code = arriving_code
        self.leaving_date = leaving_date
        self.leaving_time = leaving_time
        self.train_number = train_number
        self.base_url = base_url
        LOGGER.debug("query: %s", train_number)

    def mode(self) -> QueryMode:
        return QueryMode.TWO_PHASE

    def build_phase1_request(self) -> str:
        params = {
            "layer_id": TRAIN_LAYER_ID,
            "dir": int(RouteDirection.ONE_WAY),
            "code0": self.leaving_code,
            "dt0": format_train_date(self.leaving_date),
            "time0": self.leaving_time.strftime("%H:%M"),
            "code1": self.arriving_code,
            "tnum0": self.train_number,
        }
        return str(httpx.URL(self.base_url, params=params))

    def build_phase2_request(self, request_id: RequestId) -> str:
        params = {"layer_id": TRAIN_LAYER_ID, "rid": str(request_id)}
        return str(httpx.URL(self.base_url, params=params))

    def decode_phase1(self, body: bytes) -> ReplyOutcome[RequestId]:
        try:
            reply = decode(_RidReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)
        return request_id_reply(reply.result == "RID", reply.rid)

    def decode_phase2(self, body: bytes) -> ReplyOutcome[List[TrainItem]]:
        try:
            reply = decode(_TrainReply, body)
        except DeserializationError as exc:
            return ReplyOutcome.failure(exc)

        if reply.result == "RID":
            return ReplyOutcome.not_ready()
        if reply.result != "OK":
            return ReplyOutcome.failure(ProtocolError(f"Unexpected RZD train reply {reply.result!r}"))

        trains: List[TrainItem] = []
        for train in reply.lst:
            if train.result != "OK":
                messages = normalize_messages([train.error])
                if not messages:
                    return ReplyOutcome.failure(ProtocolError(f"RZD train reply {train.result!r} without a reason"))
                return ReplyOutcome.failure(ServiceError(messages))
            trains.append(_to_train_item(train, reply.insurance))

        LOGGER.info("%d trains found", len(trains))
        return ReplyOutcome.success(trains)


def _to_train_item(train: _Train, insurance: List[_Insurance]) -> TrainItem:
    return TrainItem(
        train_number=train.number,
        leaving_date=parse_train_date(train.date0),
        leaving_time=parse_train_time(train.time0),
        arriving_date=parse_train_date(train.date1),
        arriving_time=parse_train_time(train.time1),
        leaving_station_name=train.station0,
        arriving_station_name=train.station1,
        leaving_station_code=train.code0,
        arriving_station_code=train.code1,
        cars=[_to_train_car(car, insurance) for car in train.cars],
    )


def _to_train_car(car: _Car, insurance: List[_Insurance]) -> TrainCar:
    return TrainCar(
        number=car.cnumber,
        type_loc=car.type_loc,
        service_class=car.cls_type,
        services=[service.description for service in car.services],
        tariff=car.tariff,
        tariff2=car.tariff2,
        tariff_service=car.tariff_serv,
        carrier=car.carrier,
        insurance=_find_insurance(car.insurance_id, insurance),
        seats=[
            CarSeats(free_seats=seat.free_seats, seats_type=seat.seats_type, price=seat.tariff)
            for seat in car.seats
        ],
        places=car.places,
    )


def _find_insurance(insurance_id: int, insurance: List[_Insurance]) -> Optional[InsuranceInfo]:
    for offer in insurance:
        if offer.id == insurance_id:
            return InsuranceInfo(
                name=offer.short_name,
                url=offer.offer_url,
                price=str(offer.insurance_cost),
            )
    return None
