# routebatch/models/query.py

from datetime import datetime, timezone
import math
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from routebatch.core.errors import (
    InvalidLatitude,
    InvalidLongitude,
    InvalidTime,
    MissingTrafficModel,
    UnknownAvoidance,
    UnknownMode,
    UnknownTrafficModel,
)

LAT_BOUNDS: Tuple[float, float] = (-90.0, 90.0)
LON_BOUNDS: Tuple[float, float] = (-180.0, 180.0)
WEEK_IN_SECONDS: int = 60 * 60 * 24 * 7
AVOID_DELIMITER = "|"


class RawRecord(BaseModel):
    """
    One input record exactly as read from the source: every field is text.
    """
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    origin_lat: str
    origin_lon: str
    destination_lat: str
    destination_lon: str
    departure_time: str
    mode: str
    avoidances: Optional[str] = None
    traffic_model: Optional[str] = None


class Coordinate(BaseModel):
    """
    Latitude/longitude pair in degrees. Rendered as "lat,lon" with six
    fractional digits, e.g. "-37.820189,145.149954".
    """
    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=LAT_BOUNDS[0], le=LAT_BOUNDS[1])
    lon: float = Field(ge=LON_BOUNDS[0], le=LON_BOUNDS[1])

    @classmethod
    def from_degrees(cls, lat: float, lon: float) -> "Coordinate":
        """
        Build a coordinate, raising InvalidLatitude / InvalidLongitude
        (naming the value and the violated bound) when out of range.
        """
        if not LAT_BOUNDS[0] <= lat <= LAT_BOUNDS[1]:
            raise InvalidLatitude(lat, *LAT_BOUNDS)
        if not LON_BOUNDS[0] <= lon <= LON_BOUNDS[1]:
            raise InvalidLongitude(lon, *LON_BOUNDS)
        return cls(lat=lat, lon=lon)

    def __str__(self) -> str:
        return f"{self.lat:.6f},{self.lon:.6f}"


def _to_instant(timestamp: int) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"{timestamp} is not a valid calendar instant") from exc


def _epoch_seconds(now: Union[datetime, int]) -> int:
    if isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return math.floor(now.timestamp())
    return int(now)


class DepartureTime(BaseModel):
    """
    Departure time as whole seconds since the UNIX epoch (UTC).
    """
    model_config = ConfigDict(frozen=True)

    timestamp: int

    @field_validator("timestamp")
    @classmethod
    def _check_instant(cls, value: int) -> int:
        _to_instant(value)
        return value

    @classmethod
    def from_timestamp(cls, timestamp: int) -> "DepartureTime":
        try:
            _to_instant(timestamp)
        except ValueError as exc:
            raise InvalidTime(timestamp) from exc
        return cls(timestamp=timestamp)

    @property
    def instant(self) -> datetime:
        return _to_instant(self.timestamp)

    def shift(self, now: Union[datetime, int]) -> "DepartureTime":
        """
        If this departure time is before `now`, move it forward by whole
        weeks to the earliest time not before `now` that falls on the same
        day of week and time of day. Naive datetimes are taken as UTC.
        """
        now_ts = _epoch_seconds(now)
        if self.timestamp >= now_ts:
            return self

        delta = now_ts - self.timestamp
        weeks, remainder = divmod(delta, WEEK_IN_SECONDS)
        if remainder:
            weeks += 1
        return DepartureTime(timestamp=self.timestamp + weeks * WEEK_IN_SECONDS)

    def __str__(self) -> str:
        return str(self.timestamp)


class _Token(str, Enum):
    """
    Enumerated query-parameter token, parsed by exact, case-sensitive match.
    """

    @classmethod
    def parse(cls, token: str) -> "_Token":
        try:
            return cls(token)
        except ValueError:
            raise _UNKNOWN_TOKEN_ERRORS[cls](token) from None

    def __str__(self) -> str:
        return self.value


class Mode(_Token):
    BICYCLING = "bicycling"
    DRIVING = "driving"
    TRANSIT = "transit"
    WALKING = "walking"


class Avoidance(_Token):
    TOLLS = "tolls"
    HIGHWAYS = "highways"
    FERRIES = "ferries"
    INDOORS = "indoors"


class TrafficModel(_Token):
    BEST_GUESS = "best_guess"
    PESSIMISTIC = "pessimistic"
    OPTIMISTIC = "optimistic"


_UNKNOWN_TOKEN_ERRORS = {
    Mode: UnknownMode,
    Avoidance: UnknownAvoidance,
    TrafficModel: UnknownTrafficModel,
}


class Avoidances(BaseModel):
    """
    Set of features to avoid. Text form is "|"-delimited; rendering sorts
    the tokens so the same set always produces the same text.
    """
    model_config = ConfigDict(frozen=True)

    members: FrozenSet[Avoidance] = frozenset()

    @classmethod
    def of(cls, *avoidances: Avoidance) -> "Avoidances":
        return cls(members=frozenset(avoidances))

    @classmethod
    def parse(cls, text: Optional[str]) -> "Avoidances":
        if not text:
            return cls()
        # Any unknown token fails the whole set
        return cls(members=frozenset(Avoidance.parse(token) for token in text.split(AVOID_DELIMITER)))

    @property
    def is_empty(self) -> bool:
        return not self.members

    def __str__(self) -> str:
        return AVOID_DELIMITER.join(sorted(member.value for member in self.members))


class Query(BaseModel):
    """
    Validated, immutable directions request for one input record.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    origin: Coordinate
    destination: Coordinate
    departure_time: DepartureTime
    mode: Mode
    avoidances: Optional[Avoidances] = None
    traffic_model: Optional[TrafficModel] = None

    @model_validator(mode="after")
    def _traffic_model_when_driving(self) -> "Query":
        if self.mode is Mode.DRIVING and self.traffic_model is None:
            raise ValueError(MissingTrafficModel.message)
        return self

    def query_params(self) -> List[Tuple[str, str]]:
        """
        Query parameters in their fixed wire order.
        """
        params = [
            ("origin", str(self.origin)),
            ("destination", str(self.destination)),
            ("departure_time", str(self.departure_time)),
            ("mode", self.mode.value),
        ]
        if self.avoidances is not None and not self.avoidances.is_empty:
            params.append(("avoid", str(self.avoidances)))
        if self.traffic_model is not None:
            params.append(("traffic_model", self.traffic_model.value))
        return params

    def to_query_string(self) -> str:
        return "&".join(f"{name}={value}" for name, value in self.query_params())

    def __str__(self) -> str:
        return self.to_query_string()
