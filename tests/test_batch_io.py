# tests/test_batch_io.py
import json

import pytest

from routebatch.core.errors import InputError, RecordError
from routebatch.models.directions import TaggedResult
from routebatch.models.query import RawRecord
from routebatch.services.batch_io import export, load_input, read_csv


def test_read_valid_csv():
    text = (
        "id,origin_lat,origin_lon,destination_lat,destination_lon,departure_time,mode,avoidances,traffic_model\n"
        "1,-37.820189,145.149954,-37.819681,144.952302,1534284000,driving,tolls,best_guess\n"
    )

    assert read_csv(text) == [
        RawRecord(
            id="1",
            origin_lat="-37.820189",
            origin_lon="145.149954",
            destination_lat="-37.819681",
            destination_lon="144.952302",
            departure_time="1534284000",
            mode="driving",
            avoidances="tolls",
            traffic_model="best_guess",
        )
    ]


def test_optional_columns_may_be_missing():
    text = (
        "id,origin_lat,origin_lon,destination_lat,destination_lon,departure_time,mode\n"
        "1,1,2,3,4,1534284000,walking\n"
    )

    record = read_csv(text)[0]
    assert record.avoidances is None
    assert record.traffic_model is None


def test_csv_missing_field():
    text = (
        "origin_lat,origin_lon,destination_lat,destination_lon,departure_time,mode,avoidances,traffic_model\n"
        "-37.820189,145.149954,-37.819681,144.952302,1534284000,driving,tolls,best_guess\n"
    )

    with pytest.raises(InputError, match="id"):
        read_csv(text)


def test_csv_misspelled_field_name():
    text = (
        "ids,origin_lat,origin_lon,destination_lat,destination_lon,departure_time,mode,avoidances,traffic_model,unknown_field\n"
        "1,-37.820189,145.149954,-37.819681,144.952302,1534284000,driving,tolls,best_guess,unknown_value\n"
    )

    with pytest.raises(InputError):
        read_csv(text)


def test_short_row_reports_line():
    text = (
        "id,origin_lat,origin_lon,destination_lat,destination_lon,departure_time,mode\n"
        "1,1,2,3,4,1534284000,walking\n"
        "2,1,2,3\n"
    )

    with pytest.raises(RecordError) as excinfo:
        read_csv(text)
    assert excinfo.value.line == 2


def test_load_input(tmp_path):
    path = tmp_path / "in.csv"
    path.write_text("\n  id,mode\n\n")

    assert load_input(str(path)) == "id,mode"
    with pytest.raises(InputError):
        load_input(str(tmp_path / "nope.csv"))


def test_export(tmp_path, capsys):
    results = [TaggedResult(id="1", response={"status": "OK"})]

    export(None, results)
    assert json.loads(capsys.readouterr().out) == [{"id": "1", "response": {"status": "OK"}}]

    target = tmp_path / "out.json"
    export(str(target), results)
    assert json.loads(target.read_text()) == [{"id": "1", "response": {"status": "OK"}}]
