from __future__ import annotations

import logging
from typing import Iterable

from app.services.pharmacy.types import Location

logger = logging.getLogger(__name__)


class LocationCache:
    """Postal code -> store list, kept for the lifetime of the process.

    Cache-aside only: entries are written after a successful store lookup and
    never expire. All access happens on the event loop thread, so a plain dict
    gives per-key independence without locking.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Location, ...]] = {}

    def get(self, postal_code: str) -> tuple[Location, ...] | None:
        return self._entries.get(postal_code)

    def put(self, postal_code: str, locations: Iterable[Location]) -> None:
        # Last write wins.
        self._entries[postal_code] = tuple(locations)
        logger.debug(
            "cached %d locations for %s", len(self._entries[postal_code]), postal_code
        )

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, postal_code: object) -> bool:
        return postal_code in self._entries

    def __len__(self) -> int:
        return len(self._entries)
