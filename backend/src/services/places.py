from __future__ import annotations

import math
from typing import List, Optional

import requests
from loguru import logger

from config import Configuration
from models import CandidatePlace, Coordinates, TravelProxies
from utils import haversine_m, round_half_up


PLACES_FIELD_MASK = "places.id,places.displayName,places.types,places.location,places.rating"
KNOWN_CATEGORIES = ("restaurant", "cafe", "bar", "park")


class PlacesError(RuntimeError):
    pass


def estimate_travel(distance_m: float) -> TravelProxies:
    """Coarse proxies from straight-line distance (walking ~5 km/h)."""
    walk = round_half_up(distance_m / 80.0)
    transit = max(4, round_half_up(walk * 0.7))
    drive = max(3, round_half_up(walk * 0.4))
    return TravelProxies(walk_minutes=walk, transit_minutes=transit, drive_minutes=drive)


def _as_float(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def _category_from_types(types: Optional[list]) -> str:
    for t in types or []:
        if t in KNOWN_CATEGORIES:
            return t
    return "restaurant"


class PlacesClient:
    def __init__(self, cfg: Configuration) -> None:
        cfg.require_places()
        self.cfg = cfg
        self.base = cfg.places_base_url.rstrip("/")
        self.session = requests.Session()

    def _post(self, path: str, body: dict) -> dict:
        url = f"{self.base}{path}"
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.cfg.places_api_key or "",
            "X-Goog-FieldMask": PLACES_FIELD_MASK,
        }
        try:
            resp = self.session.post(url, headers=headers, json=body, timeout=self.cfg.places_timeout)
        except requests.RequestException as exc:
            raise PlacesError(f"request error: {exc}") from exc

        if not resp.ok:
            snippet = resp.text[:300]
            raise PlacesError(f"Places API error {resp.status_code}: {snippet or resp.reason}")

        try:
            return resp.json()
        except ValueError as exc:
            raise PlacesError("invalid json response") from exc

    def _parse_place(self, item: dict, origin: Coordinates) -> Optional[CandidatePlace]:
        loc = item.get("location")
        if not isinstance(loc, dict):
            return None
        lat = _as_float(loc.get("latitude"))
        lng = _as_float(loc.get("longitude"))
        if lat is None or lng is None:
            return None
        display = item.get("displayName")
        if display is not None and not isinstance(display, dict):
            return None
        name = (display or {}).get("text") or "Unknown place"
        rating = _as_float(item.get("rating"))
        types = item.get("types")
        return CandidatePlace(
            id=str(item.get("id") or f"{lat},{lng}"),
            name=str(name),
            category=_category_from_types(types if isinstance(types, list) else None),  # type: ignore[arg-type]
            location=Coordinates(lat=lat, lng=lng),
            travel=estimate_travel(haversine_m(origin.lat, origin.lng, lat, lng)),
            rating=rating,
            source="live",
        )

    def _parse_places(self, items: List[dict], origin: Coordinates) -> List[CandidatePlace]:
        results: list[CandidatePlace] = []
        seen: set[str] = set()
        for item in items:
            place = self._parse_place(item, origin) if isinstance(item, dict) else None
            if place is None:
                logger.debug("Skipping malformed place result: {}", item)
                continue
            if place.id in seen:
                continue
            seen.add(place.id)
            results.append(place)
        return results

    def search_nearby(
        self,
        origin: Coordinates,
        *,
        category: Optional[str] = None,
        radius_m: Optional[int] = None,
        max_results: Optional[int] = None,
    ) -> List[CandidatePlace]:
        cap = self.cfg.places_max_results
        limit = min(max_results or cap, cap)
        body: dict = {
            "maxResultCount": limit,
            "rankPreference": "POPULARITY",
            "locationRestriction": {
                "circle": {
                    "center": {"latitude": origin.lat, "longitude": origin.lng},
                    "radius": radius_m or self.cfg.places_radius_meters,
                }
            },
        }
        if category:
            body["includedTypes"] = [category]
        payload = self._post("/v1/places:searchNearby", body)
        items = (payload.get("places") or []) if isinstance(payload, dict) else []
        if not isinstance(items, list):
            raise PlacesError("unexpected places payload")
        places = self._parse_places(items[:limit], origin)
        if items and not places:
            raise PlacesError("no usable places in response")
        return places
