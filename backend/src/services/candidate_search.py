from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from loguru import logger

from config import Configuration
from models import CandidatePlace, Coordinates, FilterPreferences
from services.mock_places import fetch_mock_places
from services.places import PlacesClient


LIVE_UNAVAILABLE_NOTICE = "Live data unavailable, showing mock results."
PLACES_KEY_MISSING_NOTICE = "Places API key missing; showing mock results."


@dataclass
class CandidateLoad:
    places: List[CandidatePlace] = field(default_factory=list)
    source: str = "mock"
    notice: Optional[str] = None


def dedupe_places(items: List[CandidatePlace]) -> List[CandidatePlace]:
    seen: set[str] = set()
    out: list[CandidatePlace] = []
    for p in items:
        if p.id in seen:
            continue
        seen.add(p.id)
        out.append(p)
    return out


def load_candidates(
    cfg: Configuration,
    origin: Coordinates,
    prefs: FilterPreferences,
    *,
    client_factory: Callable[[Configuration], PlacesClient] = PlacesClient,
    mock_source: Callable[..., List[CandidatePlace]] = fetch_mock_places,
) -> CandidateLoad:
    """Load candidates from the live source, falling back to the mock catalog.

    Never raises: if even the mock catalog fails the result is empty.
    """
    category = prefs.category
    notice: Optional[str] = None

    if prefs.live_mode and cfg.is_places_configured:
        try:
            live = client_factory(cfg).search_nearby(origin, category=category)
            return CandidateLoad(places=dedupe_places(live), source="live")
        except Exception as exc:
            logger.warning("Live places failed, falling back to mock: {}", exc)
            notice = LIVE_UNAVAILABLE_NOTICE
    elif prefs.live_mode:
        notice = PLACES_KEY_MISSING_NOTICE

    try:
        places = mock_source(origin=origin, category=category)
    except Exception as exc:
        logger.error("Error loading mock places: {}", exc)
        places = []
    return CandidateLoad(places=dedupe_places(places), source="mock", notice=notice)
