from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt


class Location(BaseModel):
    """A single pharmacy store returned by the store locator."""

    model_config = ConfigDict(frozen=True)

    id: int
    address: str
    postal_code: str
    phone: str


class AvailabilityRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    location_id: int
    address: str
    postal_code: str
    phone: str
    possible_availability: bool

    @classmethod
    def for_location(
        cls, location: Location, *, possible_availability: bool
    ) -> "AvailabilityRecord":
        return cls(
            location_id=location.id,
            address=location.address,
            postal_code=location.postal_code,
            phone=location.phone,
            possible_availability=possible_availability,
        )


# Upstream envelopes. Unknown fields are ignored (pydantic default); ids and
# slot flags must already have the right JSON type.


class UpstreamStore(BaseModel):
    store_number: StrictInt = Field(alias="storeNumber")
    address: str
    zipcode: str
    full_phone: str = Field(alias="fullPhone")

    def to_location(self) -> Location:
        return Location(
            id=self.store_number,
            address=self.address,
            postal_code=self.zipcode,
            phone=self.full_phone,
        )


class StoresData(BaseModel):
    stores: list[UpstreamStore]


class GetStoresResponse(BaseModel):
    data: StoresData = Field(alias="Data")


class SlotsData(BaseModel):
    slots: dict[str, StrictBool]


class CheckSlotsResponse(BaseModel):
    data: SlotsData = Field(alias="Data")
