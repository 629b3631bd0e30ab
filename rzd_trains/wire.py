"""Declarative pieces shared by the endpoint reply models."""

from __future__ import annotations

import logging
from typing import Annotated, Any, Type, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, ValidationError

from .errors import DeserializationError, ProtocolError
from .models import parse_station_code
from .reply import ReplyOutcome
from .search import RequestId


LOGGER = logging.getLogger("rzd-wire")

M = TypeVar("M", bound=BaseModel)


def _null_to_empty(value: Any) -> Any:
    return "" if value is None else value


# The service sends ``null`` where it means an empty value.
Text = Annotated[str, BeforeValidator(_null_to_empty)]
StationCode = Annotated[int, BeforeValidator(parse_station_code)]


class WireModel(BaseModel):
    """Base for reply shapes: unknown fields are ignored, aliases and field names both accepted."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, coerce_numbers_to_str=True)


def decode(model: Type[M], body: bytes) -> M:
    """Parse a reply body into ``model``; shape problems raise ``DeserializationError``."""
    try:
        return model.model_validate_json(body)
    except ValidationError as exc:
        LOGGER.debug("Unexpected RZD reply: %s", exc)
        raise DeserializationError(f"Unexpected RZD reply structure: {exc}") from exc


def request_id_reply(accepted: bool, rid: int) -> ReplyOutcome[RequestId]:
    if not accepted:
        return ReplyOutcome.failure(ProtocolError("RZD refused to issue a request id"))
    try:
        return ReplyOutcome.success(RequestId(rid))
    except ValueError as exc:
        return ReplyOutcome.failure(DeserializationError(str(exc)))
