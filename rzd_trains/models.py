from __future__ import annotations

from datetime import date, datetime, time
from enum import IntEnum
from typing import Annotated, Any, Optional

from pydantic import PlainSerializer


class TrainType(IntEnum):
    """Kind of trains to search for."""

    TRAIN = 1
    ELECTRIC_TRAIN = 2
    ALL_TRAINS = 3


class RouteDirection(IntEnum):
    ONE_WAY = 0
    ROUND_TRIP = 1


DATE_FORMAT = "%d.%m.%Y"
TIME_FORMAT = "%H:%M"


def format_train_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def format_train_time(value: time) -> str:
    return value.strftime(TIME_FORMAT)


# Result fields export in the same form the service uses on the wire.
TrainDate = Annotated[date, PlainSerializer(format_train_date, return_type=str)]
TrainTime = Annotated[time, PlainSerializer(format_train_time, return_type=str)]


def parse_train_date(value: Optional[str]) -> Optional[date]:
    """Parse ``dd.mm.yyyy``; returns ``None`` for anything else."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        return None


def parse_train_time(value: Optional[str]) -> Optional[time]:
    """Parse ``HH:MM`` or ``HH:MM:SS``, keeping hours and minutes only."""
    if not value:
        return None

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        return None
    try:
        hours, minutes = int(parts[0]), int(parts[1])
        return time(hours, minutes)
    except ValueError:
        return None


def parse_station_code(value: Any) -> int:
    """RZD station codes are unsigned integers, sent either as numbers or strings."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value >= 0 else 0
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def parse_day_offset(value: Any) -> int:
    if isinstance(value, int) and not isinstance(value, bool):
        return max(value, 0)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0
