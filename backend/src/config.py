from __future__ import annotations

import os
from typing import Any, Optional

from pydantic import BaseModel, Field

from utils import mask_secret


class ConfigurationError(ValueError):
    """A data source is unusable because its credential is missing."""


class Configuration(BaseModel):
    # Google Places (candidate source)
    places_api_key: Optional[str] = Field(default=None)
    places_base_url: str = Field(default="https://places.googleapis.com")
    places_timeout: int = Field(default=15)
    places_max_results: int = Field(default=20)
    places_radius_meters: int = Field(default=1500)

    # Google Routes (transit enrichment)
    routes_api_key: Optional[str] = Field(default=None)
    routes_base_url: str = Field(default="https://routes.googleapis.com")
    routes_timeout: int = Field(default=10)
    # hard cap per enrichment request, on top of the HTTP timeout
    routes_deadline_sec: float = Field(default=12.0)

    # Ranking
    places_top_k: int = Field(default=10)
    transit_enrich_top_n: int = Field(default=5)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Configuration":
        raw: dict[str, Any] = {}

        env_map = {
            "places_api_key": os.getenv("GOOGLE_PLACES_API_KEY"),
            "places_base_url": os.getenv("PLACES_BASE_URL"),
            "places_timeout": os.getenv("PLACES_TIMEOUT"),
            "places_max_results": os.getenv("PLACES_MAX_RESULTS"),
            "places_radius_meters": os.getenv("PLACES_RADIUS_METERS"),
            "routes_api_key": os.getenv("GOOGLE_ROUTES_API_KEY"),
            "routes_base_url": os.getenv("ROUTES_BASE_URL"),
            "routes_timeout": os.getenv("ROUTES_TIMEOUT"),
            "routes_deadline_sec": os.getenv("ROUTES_DEADLINE_SEC"),
            "places_top_k": os.getenv("PLACES_TOP_K"),
            "transit_enrich_top_n": os.getenv("TRANSIT_ENRICH_TOP_N"),
        }

        for k, v in env_map.items():
            if v is None or v == "":
                continue
            raw[k] = v

        if overrides:
            raw.update({k: v for k, v in overrides.items() if v is not None})

        return cls(**raw)

    @property
    def is_places_configured(self) -> bool:
        return bool(self.places_api_key)

    @property
    def is_routes_configured(self) -> bool:
        return bool(self.routes_api_key)

    def require_places(self) -> None:
        if not self.places_api_key:
            raise ConfigurationError("GOOGLE_PLACES_API_KEY is required")

    def require_routes(self) -> None:
        if not self.routes_api_key:
            raise ConfigurationError("GOOGLE_ROUTES_API_KEY is required")

    def log_summary(self) -> str:
        return (
            "places=%s routes=%s radius_m=%s max_results=%s top_k=%s enrich_top_n=%s deadline=%ss "
            "places_key=%s routes_key=%s"
            % (
                self.is_places_configured,
                self.is_routes_configured,
                self.places_radius_meters,
                self.places_max_results,
                self.places_top_k,
                self.transit_enrich_top_n,
                self.routes_deadline_sec,
                mask_secret(self.places_api_key),
                mask_secret(self.routes_api_key),
            )
        )
