from __future__ import annotations

from typing import Protocol

from app.services.pharmacy.types import Location


class StoreLookup(Protocol):
    name: str

    async def lookup(self, postal_code: str) -> list[Location]: ...


class SlotChecker(Protocol):
    name: str

    async def check_availability(self, location_id: int) -> bool: ...
