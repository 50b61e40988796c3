# routebatch/services/batch_service.py

from datetime import datetime, timezone
from time import perf_counter
from typing import Iterable, List, Optional, Union

import httpx

from routebatch.core.errors import ConfigError
from routebatch.core.logger import logger
from routebatch.models.credentials import Credentials
from routebatch.models.directions import TaggedResult, TaggedUrl
from routebatch.models.query import Query, RawRecord
from routebatch.services.dispatcher import execute_requests
from routebatch.services.signer import build_tagged_url
from routebatch.services.tagger import tag_responses
from routebatch.services.validator import validate_records


class BatchDirectionsService:
    """
    Batch pipeline:
    - validates every raw record (nothing is sent if any record is invalid)
    - renders an authenticated URL per query
    - dispatches the URLs in rate-limited chunks
    - tags each response body with its record identifier
    """

    DEFAULT_RATE_LIMIT: int = 50
    DEFAULT_INTERVAL_S: float = 1.0
    DEFAULT_TIMEOUT_S: float = 5.0

    def __init__(
        self,
        credentials: Credentials,
        rate_limit: int = DEFAULT_RATE_LIMIT,
        interval_s: float = DEFAULT_INTERVAL_S,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if rate_limit < 1:
            raise ConfigError(f"rate limit must be at least 1 (got {rate_limit})")
        if interval_s <= 0:
            raise ConfigError(f"rate interval must be positive (got {interval_s})")
        self.credentials = credentials
        self.rate_limit = rate_limit
        self.interval_s = interval_s
        self.timeout_s = timeout_s
        self.transport = transport
        logger.info(
            "BatchDirectionsService initialised ({} credentials, rate limit {}).",
            type(credentials).__name__,
            rate_limit,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def prepare(
        self,
        records: Iterable[RawRecord],
        now: Optional[Union[datetime, int]] = None,
    ) -> List[TaggedUrl]:
        """
        Validate all records, then sign a URL for each. Raises before any
        network traffic if a record or the credentials are bad.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        queries: List[Query] = validate_records(records, now)
        return [build_tagged_url(query, self.credentials) for query in queries]

    async def run(
        self,
        records: Iterable[RawRecord],
        now: Optional[Union[datetime, int]] = None,
    ) -> List[TaggedResult]:
        """
        Main entry point for both the CLI and the /directions/batch endpoint.
        """
        t0 = perf_counter()

        requests = self.prepare(records, now)
        logger.info("Prepared {} signed request URLs", len(requests))

        async with httpx.AsyncClient(
            timeout=self.timeout_s,
            transport=self.transport,
        ) as client:
            bodies = await execute_requests(
                client,
                requests,
                rate_limit=self.rate_limit,
                interval_s=self.interval_s,
            )

        results = tag_responses(bodies)

        logger.info(
            "Batch of {} requests finished in {:.2f} ms",
            len(results),
            (perf_counter() - t0) * 1000.0,
        )
        return results
