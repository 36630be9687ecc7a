from __future__ import annotations

from app.services.pharmacy.aggregator import Aggregator
from fastapi import HTTPException, Request, status


def get_aggregator(request: Request) -> Aggregator:
    # Built once per process in the app lifespan.
    aggregator = getattr(request.app.state, "aggregator", None)
    if aggregator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not ready",
        )
    return aggregator
