# routebatch/services/dispatcher.py

import asyncio
from time import perf_counter
from typing import List, Sequence

import httpx

from routebatch.core.errors import DispatchError
from routebatch.core.logger import logger
from routebatch.models.directions import TaggedBody, TaggedUrl


class TokenBucket:
    """
    Async token bucket. Starts full; refills `capacity` tokens over
    `capacity * interval_s` seconds (one token per `interval_s`).
    """

    def __init__(self, interval_s: float = 1.0, capacity: int = 1) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be positive")
        self.rate = 1.0 / interval_s
        self.capacity = float(capacity)
        self.tokens = float(capacity)
        self._last = None
        self._lock = asyncio.Lock()

    async def acquire(self) -> float:
        """
        Take one token, sleeping until one is available. Returns the time
        spent waiting, in seconds.
        """
        async with self._lock:
            loop = asyncio.get_running_loop()
            now = loop.time()
            if self._last is not None:
                self.tokens = min(self.capacity, self.tokens + (now - self._last) * self.rate)
            self._last = now

            if self.tokens >= 1.0:
                self.tokens -= 1.0
                return 0.0

            wait = (1.0 - self.tokens) / self.rate
            await asyncio.sleep(wait)
            self.tokens = 0.0
            self._last = loop.time()
            return wait


def chunked(requests: Sequence[TaggedUrl], size: int) -> List[Sequence[TaggedUrl]]:
    """
    Split into consecutive chunks of at most `size`, keeping order.
    """
    if size < 1:
        raise ValueError("rate limit must be at least 1")
    return [requests[i:i + size] for i in range(0, len(requests), size)]


async def fetch(client: httpx.AsyncClient, request: TaggedUrl) -> TaggedBody:
    """
    GET one URL. The identifier travels with the request, so the result is
    correlated no matter when it completes.
    """
    response = await client.get(request.url)
    if response.status_code != 200:
        logger.warning(
            "Request {} returned HTTP {}; passing body through",
            request.id,
            response.status_code,
        )
    return TaggedBody(id=request.id, body=response.text)


async def _fetch_or_abort(
    client: httpx.AsyncClient,
    request: TaggedUrl,
    completed: List[TaggedBody],
) -> TaggedBody:
    try:
        return await fetch(client, request)
    except httpx.RequestError as exc:
        logger.error("Transport failure for request {}: {}", request.id, exc)
        raise DispatchError(request.id, completed) from exc


async def execute_requests(
    client: httpx.AsyncClient,
    requests: Sequence[TaggedUrl],
    rate_limit: int,
    interval_s: float = 1.0,
) -> List[TaggedBody]:
    """
    Send every request, `rate_limit` at a time.

    1. Partition into chunks of at most `rate_limit`.
    2. Wait for a token (capacity 1, one per `interval_s`) before each chunk.
    3. Run the chunk concurrently and wait for all of it (barrier).
    4. Any transport or protocol error aborts the batch with DispatchError;
       siblings already in flight are left to finish. No retries.

    Results come back in input order.
    """
    chunks = chunked(requests, rate_limit)
    bucket = TokenBucket(interval_s=interval_s, capacity=1)
    results: List[TaggedBody] = []

    logger.info(
        "Dispatching {} requests in {} chunks (rate limit {} per {:.2f} s)",
        len(requests),
        len(chunks),
        rate_limit,
        interval_s,
    )

    for index, chunk in enumerate(chunks, start=1):
        waited = await bucket.acquire()
        t0 = perf_counter()

        bodies = await asyncio.gather(
            *(_fetch_or_abort(client, request, results) for request in chunk)
        )
        results.extend(bodies)

        logger.debug(
            "Chunk {}/{}: {} responses in {:.2f} ms (waited {:.2f} s for rate limit)",
            index,
            len(chunks),
            len(bodies),
            (perf_counter() - t0) * 1000.0,
            waited,
        )

    return results
