"""JSON export of search results."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Sequence, Union

from pydantic import TypeAdapter

from .trip import TripStations


@lru_cache(maxsize=None)
def _adapter(item_type: type) -> TypeAdapter:
    return TypeAdapter(List[item_type])


def to_json(results: Union[Sequence[Any], TripStations]) -> str:
    """
    Render a search result as a JSON array.

    Dates are written as ``dd.mm.yyyy`` and times as ``HH:MM``, the way the
    service sends them; missing values become ``null``. Stops of a train are
    exported as the list of stops.
    """
    if isinstance(results, TripStations):
        results = results.stations
    if not results:
        return "[]"
    return _adapter(type(results[0])).dump_json(list(results)).decode("utf-8")
