# routebatch/api/v1/routes_directions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from routebatch.core.config import settings
from routebatch.core.errors import (
    ConfigError,
    DispatchError,
    RecordError,
    UrlError,
    format_error,
)
from routebatch.core.logger import logger
from routebatch.models.directions import BatchRequest, TaggedResult
from routebatch.services.batch_service import BatchDirectionsService

router = APIRouter(
    prefix="/directions",
    tags=["directions"],
)


def get_batch_service() -> BatchDirectionsService:
    """
    Build the service from settings. Overridden in tests.
    """
    try:
        return BatchDirectionsService(
            credentials=settings.credentials(),
            rate_limit=settings.RATE_LIMIT,
            interval_s=settings.RATE_INTERVAL_S,
            timeout_s=settings.REQUEST_TIMEOUT_S,
        )
    except ConfigError as exc:
        logger.error("Cannot serve batch request: {}", exc)
        raise HTTPException(status_code=500, detail=format_error(exc))


@router.post(
    "/batch",
    response_model=List[TaggedResult],
    summary="Fetch directions for a batch of raw records",
)
async def directions_batch(
    request: BatchRequest,
    service: BatchDirectionsService = Depends(get_batch_service),
) -> List[TaggedResult]:
    """
    Validate every record, sign and send the requests in rate-limited
    chunks, and return one {"id", "response"} entry per record, in order.

    - Any invalid record rejects the whole batch (422) before anything is sent.
    - A transport failure aborts the batch (502); no partial results.
    """
    try:
        return await service.run(request.records)
    except RecordError as exc:
        raise HTTPException(status_code=422, detail=format_error(exc))
    except UrlError as exc:
        raise HTTPException(status_code=400, detail=format_error(exc))
    except DispatchError as exc:
        raise HTTPException(status_code=502, detail=format_error(exc))
