from __future__ import annotations

import httpx

from app.core.config import Settings
from app.services.pharmacy.aggregator import Aggregator
from app.services.pharmacy.fixture_provider import (
    FixtureData,
    FixtureSlotClient,
    FixtureStoreClient,
)
from app.services.pharmacy.location_cache import LocationCache
from app.services.pharmacy.provider import SlotChecker, StoreLookup
from app.services.pharmacy.slot_client import RiteAidSlotClient
from app.services.pharmacy.store_client import RiteAidStoreClient


def get_clients(
    settings: Settings, http: httpx.AsyncClient
) -> tuple[StoreLookup, SlotChecker]:
    if settings.pharmacy_provider == "fixture":
        data = FixtureData(fixture_path=settings.fixture_stores_path)
        return FixtureStoreClient(data), FixtureSlotClient(data)
    if settings.pharmacy_provider == "riteaid":
        stores = RiteAidStoreClient(
            http,
            url=settings.store_locator_url,
            attr_filter=settings.store_attr_filter,
            fetch_mechanism_version=settings.store_fetch_mechanism_version,
            radius=settings.store_search_radius,
        )
        return stores, RiteAidSlotClient(http, url=settings.slot_check_url)
    raise ValueError(f"Unknown pharmacy provider: {settings.pharmacy_provider}")


def build_aggregator(settings: Settings, http: httpx.AsyncClient) -> Aggregator:
    stores, slots = get_clients(settings, http)
    return Aggregator(
        LocationCache(),
        stores,
        slots,
        max_concurrency=settings.probe_concurrency_limit,
        single_flight=settings.lookup_single_flight,
    )
