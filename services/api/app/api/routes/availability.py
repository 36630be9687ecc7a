from __future__ import annotations

import logging

from app.api.deps import get_aggregator
from app.schemas.availability import StoreAvailabilityOut
from app.services.pharmacy.aggregator import Aggregator
from app.services.pharmacy.errors import AggregationError
from fastapi import APIRouter, Depends, HTTPException, status

logger = logging.getLogger(__name__)

router = APIRouter(tags=["availability"])


@router.get(
    "/availability/{postal_code}",
    response_model=list[StoreAvailabilityOut],
)
async def get_availability(
    postal_code: str,
    aggregator: Aggregator = Depends(get_aggregator),
):
    try:
        records = await aggregator.aggregate(postal_code)
    except AggregationError as e:
        logger.warning(
            "availability request failed",
            extra={"postal_code": postal_code, "stage": e.stage},
        )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Upstream availability lookup failed",
        ) from e

    return [StoreAvailabilityOut.from_record(r) for r in records]
