# routebatch/models/directions.py

from typing import Any, List

from pydantic import BaseModel, ConfigDict

from routebatch.models.query import RawRecord


class TaggedUrl(BaseModel):
    """
    Fully rendered request URL, tagged with the identifier of its record.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    url: str


class TaggedBody(BaseModel):
    """
    Raw response body as returned by the directions service.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    body: str


class TaggedResult(BaseModel):
    """
    One entry of the output array: {"id": ..., "response": <JSON>}.
    """
    id: str
    response: Any


class BatchRequest(BaseModel):
    """
    Request body for the /directions/batch endpoint.
    """
    records: List[RawRecord]
