from __future__ import annotations

from pydantic import BaseModel

from app.services.pharmacy.types import AvailabilityRecord


class StoreAvailabilityOut(BaseModel):
    id: int
    address: str
    possible_availability: bool
    zip: str
    phone: str

    @classmethod
    def from_record(cls, r: AvailabilityRecord) -> "StoreAvailabilityOut":
        return cls(
            id=r.location_id,
            address=r.address,
            possible_availability=r.possible_availability,
            zip=r.postal_code,
            phone=r.phone,
        )
