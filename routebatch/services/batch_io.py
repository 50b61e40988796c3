# routebatch/services/batch_io.py

import csv
import io
import json
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from routebatch.core.errors import InputError, OutputError, RecordError
from routebatch.core.logger import logger
from routebatch.models.directions import TaggedResult
from routebatch.models.query import RawRecord

REQUIRED_COLUMNS = (
    "id",
    "origin_lat",
    "origin_lon",
    "destination_lat",
    "destination_lon",
    "departure_time",
    "mode",
)
OPTIONAL_COLUMNS = ("avoidances", "traffic_model")


def load_input(path: Optional[str] = None) -> str:
    """
    Read the whole input from `path`, or from stdin when no path is given.
    """
    if path is None:
        return sys.stdin.read().strip()

    try:
        return Path(path).read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise InputError(f"invalid input file path supplied ({path})") from exc
    except UnicodeDecodeError as exc:
        raise InputError("input file is not valid") from exc


def read_csv(text: str) -> List[RawRecord]:
    """
    Parse headed CSV text into raw records. Every field is trimmed; extra
    columns are ignored. Lines are numbered from 1 at the first record.
    """
    reader = csv.DictReader(io.StringIO(text))
    header = [name.strip() for name in (reader.fieldnames or [])]
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise InputError(f"input is missing required column(s): {', '.join(missing)}")
    reader.fieldnames = header

    records: List[RawRecord] = []
    for line, row in enumerate(reader, start=1):
        fields = {
            column: row[column].strip()
            for column in REQUIRED_COLUMNS + OPTIONAL_COLUMNS
            if row.get(column) is not None
        }
        try:
            records.append(RawRecord(**fields))
        except ValidationError as exc:
            raise RecordError(line) from exc

    logger.info("Read {} records from CSV input", len(records))
    return records


def export(path: Optional[str], results: Sequence[TaggedResult]) -> None:
    """
    Write the results as a JSON array to `path`, or to stdout.
    """
    contents = json.dumps([result.model_dump() for result in results])
    if path is None:
        print(contents)
        return

    try:
        Path(path).write_text(contents, encoding="utf-8")
    except OSError as exc:
        raise OutputError(f"could not write output file ({path})") from exc
    logger.info("Wrote {} results to {}", len(results), path)
