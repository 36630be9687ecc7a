from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# services/api/app/core/config.py -> BASE_DIR == services/api
BASE_DIR = Path(__file__).resolve().parents[2]
APP_DIR = BASE_DIR / "app"
DEFAULT_FIXTURE_STORES_PATH = APP_DIR / "fixtures" / "pharmacy_fixture.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(BASE_DIR / ".env"),
        extra="ignore",
        env_prefix="",
        case_sensitive=False,
    )

    # Environment
    env: str = Field(default="dev", validation_alias="ENV")

    # Application
    api_name: str = Field(default="vaxslots-api", validation_alias="API_NAME")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    user_agent: str = Field(default="VaxSlots/0.1", validation_alias="USER_AGENT")

    # Pharmacy provider
    pharmacy_provider: str = Field(
        default="riteaid", validation_alias="PHARMACY_PROVIDER"
    )
    fixture_stores_path: str = Field(
        default=str(DEFAULT_FIXTURE_STORES_PATH),
        validation_alias="FIXTURE_STORES_PATH",
    )

    # Store locator upstream
    store_locator_url: str = Field(
        default="https://www.riteaid.com/services/ext/v2/stores/getStores",
        validation_alias="STORE_LOCATOR_URL",
    )
    store_attr_filter: str = Field(
        default="PREF-112", validation_alias="STORE_ATTR_FILTER"
    )
    store_fetch_mechanism_version: str = Field(
        default="2", validation_alias="STORE_FETCH_MECHANISM_VERSION"
    )
    store_search_radius: int = Field(default=50, validation_alias="STORE_SEARCH_RADIUS")

    # Slot check upstream
    slot_check_url: str = Field(
        default="https://www.riteaid.com/services/ext/v2/vaccine/checkSlots",
        validation_alias="SLOT_CHECK_URL",
    )

    # Upstream call behaviour
    upstream_timeout_secs: float = Field(
        default=10.0, validation_alias="UPSTREAM_TIMEOUT_SECS"
    )
    probe_concurrency_limit: int | None = Field(
        default=None, validation_alias="PROBE_CONCURRENCY_LIMIT"
    )
    lookup_single_flight: bool = Field(
        default=False, validation_alias="LOOKUP_SINGLE_FLIGHT"
    )

    @field_validator("probe_concurrency_limit", mode="before")
    @classmethod
    def normalize_concurrency_limit(cls, v: Any) -> int | None:
        # Unset, empty or zero all mean "no cap".
        if v is None:
            return None
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
        n = int(v)
        if n < 0:
            raise ValueError("PROBE_CONCURRENCY_LIMIT must be >= 0")
        return n or None

    # CORS
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["*"],
        validation_alias="CORS_ORIGINS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """
        Supported env formats:
          - JSON list: '["http://localhost:3000"]'
          - Comma-separated: 'http://localhost:3000, http://localhost:5173'
          - '*' wildcard
        """
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x).strip() for x in v if str(x).strip()]
        if not isinstance(v, str):
            raise TypeError("cors_origins must be a string or list of strings")

        s = v.strip()
        if not s:
            return []
        if s == "*":
            return ["*"]

        if s.startswith("[") and s.endswith("]"):
            try:
                parsed = json.loads(s)
            except json.JSONDecodeError:
                s = s[1:-1]
            else:
                if isinstance(parsed, list):
                    return [str(x).strip() for x in parsed if str(x).strip()]

        parts = [p.strip().strip('"').strip("'") for p in s.split(",")]
        return [p for p in parts if p]

    # OpenTelemetry
    otel_enabled: bool = Field(default=False, validation_alias="OTEL_ENABLED")
    otel_otlp_endpoint: str | None = Field(
        default=None, validation_alias="OTEL_OTLP_ENDPOINT"
    )
    honeycomb_api_key: str | None = Field(
        default=None, validation_alias="HONEYCOMB_API_KEY"
    )
    honeycomb_dataset: str = Field(
        default="riteaid-covid", validation_alias="HONEYCOMB_DATASET"
    )

    @property
    def telemetry_enabled(self) -> bool:
        return self.otel_enabled or bool(self.honeycomb_api_key)


settings = Settings()
