# routebatch/services/validator.py

from datetime import datetime
from time import perf_counter
from typing import Iterable, List, Optional, Union

from routebatch.core.errors import (
    InvalidFloat,
    InvalidInt,
    MissingTrafficModel,
    ParseError,
    RecordError,
)
from routebatch.core.logger import logger
from routebatch.models.query import (
    Avoidances,
    Coordinate,
    DepartureTime,
    Mode,
    Query,
    RawRecord,
    TrafficModel,
)


def to_float(text: str) -> float:
    # Digit separators are Python literal syntax, not data
    if "_" in text:
        raise InvalidFloat(text)
    try:
        return float(text)
    except (TypeError, ValueError) as exc:
        raise InvalidFloat(text) from exc


def to_int(text: str) -> int:
    if "_" in text:
        raise InvalidInt(text)
    try:
        return int(text)
    except (TypeError, ValueError) as exc:
        raise InvalidInt(text) from exc


def _optional(text: Optional[str]) -> Optional[str]:
    # Empty optional columns are treated as absent
    return text if text else None


def parse_record(record: RawRecord, now: Union[datetime, int]) -> Query:
    """
    Turn one raw record into a Query, raising the first ParseError met.

    Departure times in the past are rolled forward by whole weeks
    (see DepartureTime.shift).
    """
    origin_lat = to_float(record.origin_lat)
    origin_lon = to_float(record.origin_lon)
    destination_lat = to_float(record.destination_lat)
    destination_lon = to_float(record.destination_lon)
    departure_ts = to_int(record.departure_time)

    origin = Coordinate.from_degrees(origin_lat, origin_lon)
    destination = Coordinate.from_degrees(destination_lat, destination_lon)
    departure_time = DepartureTime.from_timestamp(departure_ts).shift(now)
    mode = Mode.parse(record.mode)

    avoidances_text = _optional(record.avoidances)
    avoidances = Avoidances.parse(avoidances_text) if avoidances_text is not None else None

    traffic_model_text = _optional(record.traffic_model)
    traffic_model = (
        TrafficModel.parse(traffic_model_text) if traffic_model_text is not None else None
    )

    if mode is Mode.DRIVING and traffic_model is None:
        raise MissingTrafficModel()

    return Query(
        id=record.id,
        origin=origin,
        destination=destination,
        departure_time=departure_time,
        mode=mode,
        avoidances=avoidances,
        traffic_model=traffic_model,
    )


def validate_record(record: RawRecord, now: Union[datetime, int], line: int) -> Query:
    """
    Like parse_record, but any field error is re-raised as a RecordError
    for `line`, with the field error as its cause.
    """
    try:
        return parse_record(record, now)
    except ParseError as exc:
        logger.debug("Record on line {} rejected: {}", line, exc)
        raise RecordError(line) from exc


def validate_records(records: Iterable[RawRecord], now: Union[datetime, int]) -> List[Query]:
    """
    Validate a whole batch before anything is sent. Records are numbered
    from 1; the first invalid record aborts the batch.
    """
    t0 = perf_counter()
    queries = [
        validate_record(record, now, line)
        for line, record in enumerate(records, start=1)
    ]
    logger.info(
        "Validated {} records in {:.2f} ms",
        len(queries),
        (perf_counter() - t0) * 1000.0,
    )
    return queries
