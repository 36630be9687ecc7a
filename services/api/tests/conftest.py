import asyncio

import pytest
from app.api.deps import get_aggregator
from app.main import app
from app.services.pharmacy.aggregator import Aggregator
from app.services.pharmacy.errors import UpstreamError
from app.services.pharmacy.location_cache import LocationCache
from app.services.pharmacy.slot_client import possible_availability
from app.services.pharmacy.types import Location
from fastapi.testclient import TestClient

MAIN_ST = [
    Location(id=100, address="1 Main St", postal_code="10001", phone="555-0001"),
    Location(id=200, address="2 Main St", postal_code="10001", phone="555-0002"),
]
BEVERLY_HILLS = [
    Location(id=300, address="300 Canon Dr", postal_code="90210", phone="555-0300"),
]


class StubStores:
    name = "stub"

    def __init__(self, stores=None):
        self.stores = stores if stores is not None else {}
        self.calls: list[str] = []
        self.error: UpstreamError | None = None
        self.gate: asyncio.Event | None = None

    async def lookup(self, postal_code):
        self.calls.append(postal_code)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return list(self.stores.get(postal_code, []))


class StubSlots:
    """Slot maps per store id; an exception value is raised instead."""

    name = "stub"

    def __init__(self, slots=None):
        self.slots = slots if slots is not None else {}
        self.calls: list[int] = []

    async def check_availability(self, location_id):
        self.calls.append(location_id)
        await asyncio.sleep(0)
        value = self.slots[location_id]
        if isinstance(value, Exception):
            raise value
        return possible_availability(value)


@pytest.fixture()
def stores():
    return StubStores({"10001": MAIN_ST, "90210": BEVERLY_HILLS})


@pytest.fixture()
def slots():
    return StubSlots(
        {
            100: {"1": True, "2": True},
            200: {"1": False, "2": True},
            300: {"1": True},
        }
    )


@pytest.fixture()
def aggregator(stores, slots):
    return Aggregator(LocationCache(), stores, slots)


@pytest.fixture()
def client(aggregator):
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def main_st():
    return list(MAIN_ST)


@pytest.fixture()
def beverly_hills():
    return list(BEVERLY_HILLS)
