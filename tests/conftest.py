# tests/conftest.py
import os
import sys

import pytest

# Add the project root directory to sys.path so that "import routebatch" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from routebatch.core.logging_config import setup_logging  # noqa: E402
from routebatch.models.query import (  # noqa: E402
    Avoidance,
    Avoidances,
    Coordinate,
    DepartureTime,
    Mode,
    Query,
    RawRecord,
    TrafficModel,
)

# Reference "now" used across the rollover tests
NOW = 1536991111


@pytest.fixture
def raw_record():
    """
    Factory for a valid driving record; keyword arguments override fields.
    """
    def _make(**overrides):
        fields = {
            "id": "1",
            "origin_lat": "-37.820189",
            "origin_lon": "145.149954",
            "destination_lat": "-37.819681",
            "destination_lon": "144.952302",
            "departure_time": "1534284000",
            "mode": "driving",
            "avoidances": "tolls",
            "traffic_model": "best_guess",
        }
        fields.update(overrides)
        return RawRecord(**fields)

    return _make


@pytest.fixture
def sample_query():
    return Query(
        id="1",
        origin=Coordinate.from_degrees(-37.820189, 145.149954),
        destination=Coordinate.from_degrees(-37.819681, 144.952302),
        departure_time=DepartureTime.from_timestamp(1537308000),
        mode=Mode.DRIVING,
        avoidances=Avoidances.of(Avoidance.TOLLS),
        traffic_model=TrafficModel.BEST_GUESS,
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    # The CLI points loguru at the (captured) stderr of the running test
    yield
    setup_logging("INFO", sys.stdout)
