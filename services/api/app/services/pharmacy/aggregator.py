from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from opentelemetry import trace

from app.services.pharmacy.errors import AggregationError, UpstreamError
from app.services.pharmacy.location_cache import LocationCache
from app.services.pharmacy.provider import SlotChecker, StoreLookup
from app.services.pharmacy.types import AvailabilityRecord, Location

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class Aggregator:
    """Resolves a postal code to stores and probes every store for open slots.

    Resolution is cache-aside in front of the store lookup. Probes run
    concurrently, one task per store, and the first failing probe fails the
    whole call; the remaining probes are cancelled.

    max_concurrency caps simultaneous probes within one call (None = no cap).
    single_flight makes concurrent cache misses for the same postal code share
    one upstream lookup.
    """

    def __init__(
        self,
        cache: LocationCache,
        stores: StoreLookup,
        slots: SlotChecker,
        *,
        max_concurrency: int | None = None,
        single_flight: bool = False,
    ):
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1 or None")
        self.cache = cache
        self.stores = stores
        self.slots = slots
        self.max_concurrency = max_concurrency
        self.single_flight = single_flight
        self._inflight: dict[str, asyncio.Future[tuple[Location, ...]]] = {}

    async def aggregate(self, postal_code: str) -> list[AvailabilityRecord]:
        try:
            locations = await self.resolve(postal_code)
        except UpstreamError as e:
            logger.warning("store lookup for %s failed: %s", postal_code, e)
            raise AggregationError(postal_code, stage="resolve", cause=e) from e

        with tracer.start_as_current_span(
            "get all store availability",
            attributes={"postal_code": postal_code, "location_count": len(locations)},
        ):
            records = await self._probe_all(postal_code, locations)

        logger.info(
            "aggregated availability for %s",
            postal_code,
            extra={
                "locations": len(records),
                "available": sum(r.possible_availability for r in records),
            },
        )
        return records

    async def resolve(self, postal_code: str) -> tuple[Location, ...]:
        cached = self.cache.get(postal_code)
        if cached is not None:
            with tracer.start_as_current_span(
                "list stores", attributes={"postal_code": postal_code, "source": "cache"}
            ):
                logger.debug("location cache hit for %s", postal_code)
            return cached

        logger.debug("location cache miss for %s", postal_code)
        if self.single_flight:
            return await self._shared_lookup(postal_code)
        return await self._lookup(postal_code)

    async def _lookup(self, postal_code: str) -> tuple[Location, ...]:
        with tracer.start_as_current_span(
            "list stores", attributes={"postal_code": postal_code, "source": "http"}
        ):
            locations = tuple(await self.stores.lookup(postal_code))
        # Only a fully decoded list reaches the cache; errors propagate above.
        self.cache.put(postal_code, locations)
        return locations

    async def _shared_lookup(self, postal_code: str) -> tuple[Location, ...]:
        fut = self._inflight.get(postal_code)
        if fut is None:
            fut = asyncio.ensure_future(self._lookup(postal_code))
            self._inflight[postal_code] = fut

            def _forget(done: asyncio.Future) -> None:
                if self._inflight.get(postal_code) is done:
                    del self._inflight[postal_code]

            fut.add_done_callback(_forget)
        else:
            logger.debug("joining in-flight store lookup for %s", postal_code)
        # shield: one cancelled waiter must not cancel the lookup for the others
        return await asyncio.shield(fut)

    async def _probe(
        self, location: Location, semaphore: asyncio.Semaphore | None
    ) -> AvailabilityRecord:
        if semaphore is None:
            return await self._check(location)
        async with semaphore:
            return await self._check(location)

    async def _check(self, location: Location) -> AvailabilityRecord:
        with tracer.start_as_current_span(
            "get store availability", attributes={"location_id": location.id}
        ):
            available = await self.slots.check_availability(location.id)
        return AvailabilityRecord.for_location(location, possible_availability=available)

    async def _probe_all(
        self, postal_code: str, locations: Sequence[Location]
    ) -> list[AvailabilityRecord]:
        semaphore = (
            asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        )
        tasks = {
            asyncio.ensure_future(self._probe(loc, semaphore)): loc for loc in locations
        }

        records: list[AvailabilityRecord] = []
        pending = set(tasks)
        try:
            while pending:
                done, pending = await asyncio.wait(
                    pending, return_when=asyncio.FIRST_EXCEPTION
                )
                failed = [t for t in done if t.exception() is not None]
                if failed:
                    task = failed[0]
                    exc = task.exception()
                    location = tasks[task]
                    if not isinstance(exc, UpstreamError):
                        raise exc  # type: ignore[misc]
                    logger.warning(
                        "availability probe for store %s failed: %s",
                        location.id,
                        exc,
                        extra={"postal_code": postal_code, "abandoned": len(pending)},
                    )
                    raise AggregationError(
                        postal_code, stage="probe", cause=exc, location_id=location.id
                    ) from exc
                records.extend(t.result() for t in done)
        finally:
            for t in pending:
                t.cancel()

        return records
