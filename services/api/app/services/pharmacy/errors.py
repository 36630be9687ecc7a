from __future__ import annotations


class UpstreamError(Exception):
    """Base class for failures talking to the pharmacy upstreams."""

    def __init__(self, message: str, *, url: str | None = None):
        super().__init__(message)
        self.url = url


class UpstreamNetworkError(UpstreamError):
    """The outbound call failed: connection, timeout, transport or HTTP status."""


class UpstreamDecodeError(UpstreamError):
    """A response arrived but did not have the expected shape."""


class AggregationError(Exception):
    """Terminal failure of one aggregate() call.

    `stage` is "resolve" when the store lookup failed and "probe" when an
    availability probe failed. The upstream error is available as `cause`
    (and as `__cause__` when raised with `from`).
    """

    def __init__(
        self,
        postal_code: str,
        *,
        stage: str,
        cause: UpstreamError,
        location_id: int | None = None,
    ):
        where = f"location {location_id}" if location_id is not None else stage
        super().__init__(f"Aggregation for {postal_code!r} failed at {where}: {cause}")
        self.postal_code = postal_code
        self.stage = stage
        self.cause = cause
        self.location_id = location_id
