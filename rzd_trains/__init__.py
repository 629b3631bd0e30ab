"""Client for the RZD passenger rail information service."""

from .version import __version__  # noqa: F401
from .config import ClientSettings, PollingPolicy  # noqa: F401
from .errors import (  # noqa: F401
    DeserializationError,
    EmptyTrainNumberError,
    OverloadError,
    ProtocolError,
    RzdError,
    ServiceError,
    TooShortQueryError,
    TransportError,
    UnsupportedOperationError,
    normalize_message,
)
from .executor import QueryExecutor  # noqa: F401
from .export import to_json  # noqa: F401
from .models import TrainType  # noqa: F401
from .reply import ReplyOutcome, ReplyStatus  # noqa: F401
from .search import QueryMode, RequestId, SearchRequest  # noqa: F401
from .transport import Transport, TransportOutcome, TransportStatus, extract_session_cookies  # noqa: F401
from .stations import StationCodeSearch, StationItem  # noqa: F401
from .schedule import Route, SeatsInfo, TrainInfo, TrainScheduleSearch  # noqa: F401
from .train_info import CarSeats, InsuranceInfo, TrainCar, TrainItem, TrainSearch  # noqa: F401
from .trip import TripStations, TripStop, TripStopsSearch  # noqa: F401
