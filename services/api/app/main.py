from __future__ import annotations

from contextlib import asynccontextmanager

from app.api.router import api_router
from app.core.config import settings
from app.core.logging_config import configure_logging
from app.core.otel import init_otel
from app.middleware.request_context import RequestContextMiddleware
from app.services.pharmacy.factory import build_aggregator
from app.services.pharmacy.upstream import build_http_client
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    http = build_http_client(
        timeout=settings.upstream_timeout_secs, user_agent=settings.user_agent
    )
    app.state.aggregator = build_aggregator(settings, http)
    try:
        yield
    finally:
        await http.aclose()


app = FastAPI(title=settings.api_name, lifespan=lifespan)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)

app.include_router(api_router)

init_otel(app)
