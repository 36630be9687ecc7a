from __future__ import annotations

from app.api.deps import get_aggregator
from app.schemas.health import HealthOut
from app.services.pharmacy.aggregator import Aggregator
from fastapi import APIRouter, Depends

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthOut)
def health(aggregator: Aggregator = Depends(get_aggregator)):
    return HealthOut(
        status="ok",
        provider=getattr(aggregator.stores, "name", "unknown"),
        cached_postal_codes=len(aggregator.cache),
    )
