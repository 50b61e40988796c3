# tests/test_query.py
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from routebatch.core.errors import (
    InvalidLatitude,
    InvalidLongitude,
    InvalidTime,
    UnknownAvoidance,
    UnknownMode,
    UnknownTrafficModel,
)
from routebatch.models.query import (
    Avoidance,
    Avoidances,
    Coordinate,
    DepartureTime,
    Mode,
    Query,
    TrafficModel,
)

from conftest import NOW


def test_construct_coordinate():
    assert Coordinate.from_degrees(90.0, 180.0)
    assert Coordinate.from_degrees(-90.0, -180.0)

    with pytest.raises(InvalidLatitude):
        Coordinate.from_degrees(91.0, 180.0)
    with pytest.raises(InvalidLongitude):
        Coordinate.from_degrees(90.0, 181.0)
    with pytest.raises(InvalidLatitude):
        Coordinate.from_degrees(91.0, 181.0)
    with pytest.raises(InvalidLatitude):
        Coordinate.from_degrees(float("nan"), 0.0)


def test_coordinate_error_names_value_and_bound():
    with pytest.raises(InvalidLongitude) as excinfo:
        Coordinate.from_degrees(10.0, -180.5)

    assert excinfo.value.value == -180.5
    assert "longitude" in str(excinfo.value)
    assert "-180.5" in str(excinfo.value)
    assert "lower bound" in str(excinfo.value)


def test_coordinate_direct_construction_is_bounded():
    with pytest.raises(ValidationError):
        Coordinate(lat=95.0, lon=0.0)


def test_coordinate_is_immutable():
    coord = Coordinate.from_degrees(1.0, 2.0)
    with pytest.raises(ValidationError):
        coord.lat = 3.0


def test_display_coordinate():
    assert str(Coordinate.from_degrees(-37.820189, 145.149954)) == "-37.820189,145.149954"
    assert str(Coordinate.from_degrees(1.5, -2)) == "1.500000,-2.000000"


def test_construct_departure_time():
    departure = DepartureTime.from_timestamp(1534284000)
    assert departure.instant == datetime(2018, 8, 14, 22, 0, tzinfo=timezone.utc)
    assert str(departure) == "1534284000"


def test_departure_time_must_be_calendar_instant():
    with pytest.raises(InvalidTime):
        DepartureTime.from_timestamp(10 ** 18)
    with pytest.raises(ValidationError):
        DepartureTime(timestamp=10 ** 18)


def test_shift_rolls_past_time_forward_by_whole_weeks():
    shifted = DepartureTime.from_timestamp(1534284000).shift(NOW)

    assert shifted == DepartureTime.from_timestamp(1537308000)
    # Same weekday and time of day as the original departure
    original = DepartureTime.from_timestamp(1534284000).instant
    assert shifted.instant.weekday() == original.weekday()
    assert shifted.instant.time() == original.time()


def test_shift_keeps_future_and_current_times():
    assert DepartureTime.from_timestamp(1565820000).shift(NOW).timestamp == 1565820000
    assert DepartureTime.from_timestamp(1537308000).shift(NOW).timestamp == 1537308000
    assert DepartureTime.from_timestamp(NOW).shift(NOW).timestamp == NOW


def test_shift_exact_number_of_weeks():
    week = 604800
    assert DepartureTime.from_timestamp(NOW - 2 * week).shift(NOW).timestamp == NOW


def test_shift_accepts_datetime_now():
    now = datetime.fromtimestamp(NOW, tz=timezone.utc)
    naive_now = now.replace(tzinfo=None)

    assert DepartureTime.from_timestamp(1534284000).shift(now).timestamp == 1537308000
    assert DepartureTime.from_timestamp(1534284000).shift(naive_now).timestamp == 1537308000


def test_shift_does_not_mutate():
    departure = DepartureTime.from_timestamp(1534284000)
    departure.shift(NOW)
    assert departure.timestamp == 1534284000


def test_parse_mode():
    assert Mode.parse("bicycling") is Mode.BICYCLING
    assert Mode.parse("driving") is Mode.DRIVING
    assert Mode.parse("transit") is Mode.TRANSIT
    assert Mode.parse("walking") is Mode.WALKING

    with pytest.raises(UnknownMode) as excinfo:
        Mode.parse("Driving")
    assert excinfo.value.value == "Driving"


def test_display_mode():
    assert str(Mode.BICYCLING) == "bicycling"
    assert str(Mode.WALKING) == "walking"


def test_parse_avoidance():
    assert Avoidance.parse("tolls") is Avoidance.TOLLS
    assert Avoidance.parse("highways") is Avoidance.HIGHWAYS
    assert Avoidance.parse("ferries") is Avoidance.FERRIES
    assert Avoidance.parse("indoors") is Avoidance.INDOORS
    with pytest.raises(UnknownAvoidance):
        Avoidance.parse("unknown")


def test_parse_avoidances():
    expected = Avoidances.of(
        Avoidance.TOLLS,
        Avoidance.HIGHWAYS,
        Avoidance.FERRIES,
        Avoidance.INDOORS,
    )

    assert Avoidances.parse("highways|ferries|indoors|tolls") == expected
    assert len(expected.members) == 4
    assert Avoidances.parse("") == Avoidances()
    assert Avoidances.parse("tolls|tolls") == Avoidances.of(Avoidance.TOLLS)

    with pytest.raises(UnknownAvoidance):
        Avoidances.parse("unknown|tolls")


def test_display_avoidances_is_sorted_and_round_trips():
    avoidances = Avoidances.of(Avoidance.TOLLS, Avoidance.INDOORS, Avoidance.FERRIES)

    assert str(avoidances) == "ferries|indoors|tolls"
    assert Avoidances.parse(str(avoidances)) == avoidances


def test_parse_traffic_model():
    assert TrafficModel.parse("best_guess") is TrafficModel.BEST_GUESS
    assert TrafficModel.parse("optimistic") is TrafficModel.OPTIMISTIC
    assert TrafficModel.parse("pessimistic") is TrafficModel.PESSIMISTIC
    with pytest.raises(UnknownTrafficModel):
        TrafficModel.parse("unknown")


def test_query_string(sample_query):
    query = sample_query.model_copy(update={"departure_time": DepartureTime.from_timestamp(1534284000)})

    assert query.to_query_string() == (
        "origin=-37.820189,145.149954"
        "&destination=-37.819681,144.952302"
        "&departure_time=1534284000"
        "&mode=driving"
        "&avoid=tolls"
        "&traffic_model=best_guess"
    )


def test_query_string_omits_absent_options():
    query = Query(
        id="x",
        origin=Coordinate.from_degrees(1, 2),
        destination=Coordinate.from_degrees(3, 4),
        departure_time=DepartureTime.from_timestamp(1537308000),
        mode=Mode.WALKING,
        avoidances=Avoidances(),
    )

    assert str(query) == (
        "origin=1.000000,2.000000&destination=3.000000,4.000000"
        "&departure_time=1537308000&mode=walking"
    )


def test_query_requires_traffic_model_when_driving(sample_query):
    with pytest.raises(ValidationError):
        Query(**{**sample_query.model_dump(), "traffic_model": None})
