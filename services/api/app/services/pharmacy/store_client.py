from __future__ import annotations

import logging

import httpx

from app.services.pharmacy.types import GetStoresResponse, Location
from app.services.pharmacy.upstream import get_model

logger = logging.getLogger(__name__)


class RiteAidStoreClient:
    """Finds stores near a postal code via the store-locator endpoint.

    attr_filter, fetch_mechanism_version and radius are passed through
    unmodified on every request.
    """

    name = "riteaid"

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        url: str,
        attr_filter: str,
        fetch_mechanism_version: str,
        radius: int,
    ):
        self.http = http
        self.url = url
        self.attr_filter = attr_filter
        self.fetch_mechanism_version = fetch_mechanism_version
        self.radius = radius

    def _params(self, postal_code: str) -> dict[str, str]:
        return {
            "address": postal_code,
            "attrFilter": self.attr_filter,
            "fetchMechanismVersion": self.fetch_mechanism_version,
            "radius": str(self.radius),
        }

    async def lookup(self, postal_code: str) -> list[Location]:
        resp = await get_model(
            self.http,
            self.url,
            params=self._params(postal_code),
            model=GetStoresResponse,
        )
        locations = [s.to_location() for s in resp.data.stores]
        logger.debug("store lookup for %s returned %d stores", postal_code, len(locations))
        return locations
