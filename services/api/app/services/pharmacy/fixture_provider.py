from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from app.services.pharmacy.errors import UpstreamDecodeError, UpstreamNetworkError
from app.services.pharmacy.slot_client import possible_availability
from app.services.pharmacy.types import Location


class FixtureData:
    """Stores and slot maps loaded from a local JSON file.

    Layout:
      {"stores": {"<postal code>": [{"id", "address", "postal_code", "phone"}]},
       "slots": {"<store id>": {"1": true, "2": false}}}
    """

    def __init__(self, fixture_path: str):
        self.fixture_path = fixture_path
        self._data = self._load()

    def _load(self) -> dict:
        p = Path(self.fixture_path)
        if not p.exists():
            raise FileNotFoundError(f"Fixture file not found: {p}")
        raw = p.read_text(encoding="utf-8")
        return json.loads(raw)

    def stores_for(self, postal_code: str) -> list[dict]:
        return self._data.get("stores", {}).get(postal_code, [])

    def slots_for(self, location_id: int) -> dict[str, bool] | None:
        return self._data.get("slots", {}).get(str(location_id))


class FixtureStoreClient:
    name = "fixture"

    def __init__(self, data: FixtureData):
        self.data = data

    async def lookup(self, postal_code: str) -> list[Location]:
        try:
            return [Location.model_validate(it) for it in self.data.stores_for(postal_code)]
        except ValidationError as e:
            raise UpstreamDecodeError(
                f"Bad fixture stores for {postal_code!r}: {e.error_count()} validation error(s)",
                url=self.data.fixture_path,
            ) from e


class FixtureSlotClient:
    name = "fixture"

    def __init__(self, data: FixtureData):
        self.data = data

    async def check_availability(self, location_id: int) -> bool:
        slots = self.data.slots_for(location_id)
        if slots is None:
            raise UpstreamNetworkError(f"No fixture slots for store {location_id}")
        return possible_availability(slots)
