from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Optional

import requests

from config import Configuration
from models import Coordinates, TransitRouteSummary
from services.transit_summary import primary_route, summarize_route


ROUTES_FIELD_MASK = ",".join(
    [
        "routes.duration",
        "routes.legs.steps.travelMode",
        "routes.legs.steps.staticDuration",
        "routes.legs.steps.duration",
    ]
)


class RoutesError(RuntimeError):
    pass


def _lat_lng(point: Coordinates) -> dict:
    return {"location": {"latLng": {"latitude": point.lat, "longitude": point.lng}}}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class RoutesClient:
    """Google Routes API client; one attempt per call, no retries."""

    def __init__(self, cfg: Configuration) -> None:
        cfg.require_routes()
        self.cfg = cfg
        self.base = cfg.routes_base_url.rstrip("/")
        self.session = requests.Session()

    def _post(self, path: str, body: dict, field_mask: str) -> dict:
        url = f"{self.base}{path}"
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.cfg.routes_api_key or "",
            "X-Goog-FieldMask": field_mask,
        }
        try:
            resp = self.session.post(url, headers=headers, json=body, timeout=self.cfg.routes_timeout)
        except requests.RequestException as exc:
            raise RoutesError(f"request error: {exc}") from exc

        if not resp.ok:
            snippet = resp.text[:300]
            raise RoutesError(f"Routes API error {resp.status_code}: {snippet}")

        try:
            return resp.json()
        except ValueError as exc:
            raise RoutesError("invalid json response") from exc

    def compute_transit_route(
        self,
        origin: Coordinates,
        destination: Coordinates,
        *,
        departure_time: Optional[str] = None,
    ) -> Optional[dict]:
        body = {
            "origin": _lat_lng(origin),
            "destination": _lat_lng(destination),
            "travelMode": "TRANSIT",
            "computeAlternativeRoutes": False,
            "departureTime": departure_time or _now_iso(),
        }
        payload = self._post("/directions/v2:computeRoutes", body, ROUTES_FIELD_MASK)
        return primary_route(payload)

    def fetch_transit_summary(
        self,
        origin: Coordinates,
        destination: Coordinates,
        *,
        departure_time: Optional[str] = None,
    ) -> Optional[TransitRouteSummary]:
        route = self.compute_transit_route(origin, destination, departure_time=departure_time)
        if route is None:
            return None
        return summarize_route(route)

    async def fetch_transit_summary_async(
        self,
        origin: Coordinates,
        destination: Coordinates,
        *,
        departure_time: Optional[str] = None,
    ) -> Optional[TransitRouteSummary]:
        """Async wrapper so that enrichment requests can run concurrently."""
        return await asyncio.to_thread(
            self.fetch_transit_summary, origin, destination, departure_time=departure_time
        )
