from __future__ import annotations

from typing import Any, Mapping, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from app.services.pharmacy.errors import UpstreamDecodeError, UpstreamNetworkError

M = TypeVar("M", bound=BaseModel)


def build_http_client(*, timeout: float, user_agent: str) -> httpx.AsyncClient:
    """Shared client for both upstreams; the timeout is the per-call deadline."""
    return httpx.AsyncClient(
        timeout=timeout,
        follow_redirects=True,
        headers={"User-Agent": user_agent},
    )


async def get_model(
    client: httpx.AsyncClient,
    url: str,
    *,
    params: Mapping[str, Any],
    model: type[M],
) -> M:
    """GET `url` and decode the JSON body into `model`.

    Transport errors, timeouts and non-2xx statuses raise UpstreamNetworkError;
    a body that is not JSON or lacks required fields raises UpstreamDecodeError.
    """
    try:
        resp = await client.get(url, params=dict(params))
        resp.raise_for_status()
    except httpx.TimeoutException as e:
        raise UpstreamNetworkError(f"Timed out calling {url}", url=url) from e
    except httpx.HTTPStatusError as e:
        raise UpstreamNetworkError(
            f"{url} returned HTTP {e.response.status_code}", url=url
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamNetworkError(f"Request to {url} failed: {e}", url=url) from e

    try:
        return model.model_validate_json(resp.content)
    except ValidationError as e:
        raise UpstreamDecodeError(
            f"Unexpected response from {url}: {e.error_count()} validation error(s)",
            url=url,
        ) from e
