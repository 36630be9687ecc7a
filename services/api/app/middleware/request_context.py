import logging
import uuid

from opentelemetry import trace
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assigns X-Request-Id and records client details on the active span."""

    async def dispatch(self, request, call_next):
        req_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.state.request_id = req_id

        host = request.headers.get("host", "")
        user_agent = request.headers.get("user-agent", "")
        client_ip = request.client.host if request.client else ""

        span = trace.get_current_span()
        if span.is_recording():
            span.set_attribute("http.host", host)
            span.set_attribute("http.user_agent", user_agent)
            span.set_attribute("http.client_ip", client_ip)
            span.set_attribute("http.request_id", req_id)

        response = await call_next(request)
        response.headers["X-Request-Id"] = req_id
        logger.info(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={
                "request_id": req_id,
                "host": host,
                "user_agent": user_agent,
                "client_ip": client_ip,
            },
        )
        return response
